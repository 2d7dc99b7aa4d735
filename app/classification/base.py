from abc import ABC, abstractmethod

from app.classification.models import ClassificationResult


class BaseClassifier(ABC):
    """Contract for AI-backed document classifiers."""

    @abstractmethod
    def classify(self, data: bytes, filename: str, mime_type: str) -> ClassificationResult:
        """Classify a document and return sanitized metadata.

        Args:
            data: Raw file content.
            filename: Original filename, used for logging and provider uploads.
            mime_type: Resolved content type of the file.

        Raises:
            ClassificationError: on any provider, rendering or parsing failure.
        """
