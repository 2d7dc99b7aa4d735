from app.config.catalog import DocumentCatalog
from app.upload.exceptions import FileValidationError
from app.upload.models import UploadRequest

_FALLBACK_CONTENT_TYPE = "application/octet-stream"


class FileValidator:
    """Checks an incoming file against the catalog allow-list and size ceiling."""

    def __init__(self, catalog: DocumentCatalog) -> None:
        self._catalog = catalog
        self._extensions = catalog.accepted_extensions()

    def validate(self, request: UploadRequest) -> None:
        """Accept the file or raise with a human-readable reason.

        A file is accepted when either its declared MIME type or its filename
        extension is on the allow-list, and its size does not exceed the limit.

        Raises:
            FileValidationError: if the type or size check fails.
        """
        if not self._is_accepted_type(request):
            raise FileValidationError(
                f'File "{request.filename}" is not a supported format. Please upload '
                "PDF, DOC, images (PNG, JPG, GIF, WebP), or text files (TXT, MD) only."
            )
        if request.size > self._catalog.max_file_size_bytes:
            limit_mib = self._catalog.max_file_size_bytes // (1024 * 1024)
            raise FileValidationError(
                f'File "{request.filename}" is too large. Maximum size is {limit_mib}MB.'
            )

    def resolve_content_type(self, request: UploadRequest) -> str:
        """Declared content type, else the allow-listed type for the extension."""
        if request.content_type:
            return request.content_type
        return self._catalog.content_type_for(request.filename) or _FALLBACK_CONTENT_TYPE

    def _is_accepted_type(self, request: UploadRequest) -> bool:
        if request.content_type in self._catalog.accepted_types:
            return True
        lowered = request.filename.lower()
        return any(lowered.endswith(ext) for ext in self._extensions)
