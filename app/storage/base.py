from abc import ABC, abstractmethod


class BaseObjectStore(ABC):
    """Contract for key-addressed blob storage adapters."""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Write bytes under ``key`` and return the stored key.

        Raises:
            StorageError: if the write fails.
        """

    @abstractmethod
    def get_signed_url(self, key: str, ttl_seconds: int) -> str:
        """Return a time-limited URL for reading ``key``.

        Raises:
            StorageError: if no URL can be produced.
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the object stored under ``key``.

        Raises:
            StorageError: if the delete fails.
        """
