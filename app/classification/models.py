from dataclasses import dataclass
from datetime import datetime
from typing import Any

PROCESSING_PENDING = "pending"
PROCESSING_COMPLETED = "completed"
PROCESSING_FAILED = "failed"
PROCESSING_STATUSES = frozenset({PROCESSING_PENDING, PROCESSING_COMPLETED, PROCESSING_FAILED})

SUPPORTED_LANGUAGES = frozenset({"no", "en", "unknown"})


@dataclass(frozen=True)
class ClassificationResult:
    """Normalized document metadata produced by the AI provider or the fallback."""

    category: str
    is_custom_category: bool
    tags: tuple[str, ...]
    sensitive_data: bool
    sensitive_data_tags: tuple[str, ...]
    confidence: float
    language: str
    description: str
    ai_name: str
    processing_status: str
    last_analyzed: datetime

    def to_dict(self) -> dict[str, object]:
        """Serialize using the camelCase field names of the provider schema."""
        return {
            "category": self.category,
            "isCustomCategory": self.is_custom_category,
            "tags": list(self.tags),
            "sensitiveData": self.sensitive_data,
            "sensitiveDataTags": list(self.sensitive_data_tags),
            "confidence": self.confidence,
            "language": self.language,
            "description": self.description,
            "aiName": self.ai_name,
            "processingStatus": self.processing_status,
            "lastAnalyzed": self.last_analyzed.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClassificationResult":
        """Rebuild a result previously serialized with ``to_dict``."""
        return cls(
            category=data["category"],
            is_custom_category=bool(data["isCustomCategory"]),
            tags=tuple(data.get("tags", ())),
            sensitive_data=bool(data.get("sensitiveData", False)),
            sensitive_data_tags=tuple(data.get("sensitiveDataTags", ())),
            confidence=float(data["confidence"]),
            language=data["language"],
            description=data["description"],
            ai_name=data["aiName"],
            processing_status=data["processingStatus"],
            last_analyzed=datetime.fromisoformat(data["lastAnalyzed"]),
        )
