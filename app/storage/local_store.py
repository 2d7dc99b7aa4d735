from pathlib import Path

from app.storage.base import BaseObjectStore
from app.storage.exceptions import StorageError


class LocalObjectStore(BaseObjectStore):
    """Stores objects as files under ``files_root``; URLs are ``file://`` URIs."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = (files_root if files_root is not None else self.FILES_ROOT).resolve()

    def put(self, key: str, data: bytes, content_type: str) -> str:
        path = self._resolve_path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc
        return key

    def get_signed_url(self, key: str, ttl_seconds: int) -> str:
        path = self._resolve_path(key)
        if not path.is_file():
            raise StorageError(f"Object not found: {key}")
        return path.as_uri()

    def delete(self, key: str) -> None:
        path = self._resolve_path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to delete {key}: {exc}") from exc

    def _resolve_path(self, key: str) -> Path:
        path = (self._files_root / key).resolve()
        if not path.is_relative_to(self._files_root):
            raise StorageError(f"Object key escapes storage root: {key}")
        return path
