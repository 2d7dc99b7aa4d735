from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from app.classification.models import ClassificationResult


class UploadState(str, Enum):
    """Per-file pipeline states."""

    RECEIVED = "received"
    VALIDATED = "validated"
    STORED = "stored"
    CLASSIFIED = "classified"
    PERSISTED = "persisted"
    REJECTED = "rejected"
    FAILED = "failed"


class ClassificationSource(str, Enum):
    AI = "ai"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class UploadRequest:
    """A named byte sequence with a declared content type."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class StoredObjectRef:
    """Reference to an object written to the object store."""

    key: str
    content_type: str
    size: int


@dataclass(frozen=True)
class ClassificationOutcome:
    """Metadata for one file, tagged with where it came from."""

    result: ClassificationResult
    source: ClassificationSource
    error: str | None = None


@dataclass(frozen=True)
class FileRecord:
    """Durable metadata for one uploaded document."""

    id: str
    owner_id: str
    original_name: str
    generated_name: str
    stored_object: StoredObjectRef
    classification: ClassificationResult
    uploaded_at: datetime

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "originalName": self.original_name,
            "fileName": self.generated_name,
            "objectKey": self.stored_object.key,
            "size": self.stored_object.size,
            "type": self.stored_object.content_type,
            "aiMetadata": self.classification.to_dict(),
            "uploadedAt": self.uploaded_at.isoformat(),
        }


@dataclass(frozen=True)
class FileOutcome:
    """Terminal result of one file's pipeline run."""

    filename: str
    state: UploadState
    record: FileRecord | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is UploadState.PERSISTED and self.record is not None


@dataclass
class BatchResult:
    """Partition of a batch into persisted records and per-file error messages."""

    successes: list[FileRecord] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        text = f"Successfully uploaded {len(self.successes)} file(s)"
        if self.errors:
            text += f" ({len(self.errors)} failed)"
        return text
