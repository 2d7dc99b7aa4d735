from abc import ABC, abstractmethod


class BaseClassificationClient(ABC):
    """Contract for provider-specific classification AI clients."""

    @abstractmethod
    def analyze_document(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        document: bytes,
        filename: str,
    ) -> str:
        """Submit a PDF to the provider's document-capable endpoint; return response text."""

    @abstractmethod
    def analyze_image(
        self,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        prompt: str,
        image: bytes,
        image_mime_type: str,
    ) -> str:
        """Submit an inline image to the provider's vision endpoint; return response text."""
