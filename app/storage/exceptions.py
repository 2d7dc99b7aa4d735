class StorageError(Exception):
    """Raised when an object-store operation fails."""
