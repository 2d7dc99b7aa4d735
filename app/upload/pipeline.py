from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.upload.models import (
    ClassificationOutcome,
    FileRecord,
    StoredObjectRef,
    UploadRequest,
    UploadState,
)


@dataclass(slots=True)
class UploadContext:
    """Accumulates data as one file moves through the pipeline steps."""

    owner_id: str
    request: UploadRequest
    state: UploadState = UploadState.RECEIVED
    content_type: str = ""
    generated_name: str = ""
    stored_object: StoredObjectRef | None = None
    classification: ClassificationOutcome | None = None
    record: FileRecord | None = None


class UploadStep(ABC):
    @abstractmethod
    def run(self, context: UploadContext) -> UploadContext:
        raise NotImplementedError
