class UploadError(Exception):
    """Base exception for all upload pipeline errors."""


class FileValidationError(UploadError):
    """Raised when a file fails type or size validation."""


class PersistenceError(UploadError):
    """Raised when a file record cannot be written to or read from the database."""


class FileRecordNotFoundError(UploadError):
    """Raised when a file record does not exist or belongs to another owner."""


class BatchUploadError(UploadError):
    """Raised when every file in a batch failed."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(f"All uploads failed ({len(errors)} file(s))")
        self.errors = errors
