from abc import ABC, abstractmethod


class BaseRenderer(ABC):
    """Contract for document-to-image renderers."""

    @abstractmethod
    def render(self, data: bytes, filename: str, mime_type: str) -> bytes:
        """Convert document bytes into image bytes an image-capable model accepts.

        PDFs and images are returned unchanged.

        Raises:
            UnsupportedTypeError: if the MIME type has no conversion.
            RenderError: if conversion fails for any other reason.
        """
