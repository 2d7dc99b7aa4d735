from dataclasses import dataclass

from app.database.repositories.file_records_repository import FileRecordsRepository
from app.logging.logger import Log
from app.storage.base import BaseObjectStore
from app.storage.exceptions import StorageError
from app.upload.exceptions import FileRecordNotFoundError
from app.upload.models import FileRecord


@dataclass(frozen=True)
class FileListing:
    """A stored record paired with a time-limited download URL."""

    record: FileRecord
    url: str

    def to_dict(self) -> dict[str, object]:
        return {**self.record.to_dict(), "url": self.url}


class FileService:
    """Owner-scoped read and delete operations over uploaded files."""

    def __init__(
        self,
        repository: FileRecordsRepository,
        object_store: BaseObjectStore,
        url_ttl_seconds: int = 3600,
    ) -> None:
        self._repository = repository
        self._object_store = object_store
        self._url_ttl_seconds = url_ttl_seconds

    @property
    def url_ttl_seconds(self) -> int:
        return self._url_ttl_seconds

    def list_files(
        self,
        owner_id: str,
        category: str | None = None,
        tag: str | None = None,
    ) -> list[FileListing]:
        """List an owner's files newest first.

        A file whose URL cannot be signed is still listed, with an empty URL.
        """
        records = self._repository.find_by_owner(owner_id, category=category, tag=tag)
        return [FileListing(record=record, url=self._try_sign(record)) for record in records]

    def get_file_url(self, owner_id: str, record_id: str) -> str:
        """Return a signed URL for one of the owner's files.

        Raises:
            FileRecordNotFoundError: if the record is missing or not the owner's.
            StorageError: if the store cannot sign the URL.
        """
        record = self._require_record(owner_id, record_id)
        return self._object_store.get_signed_url(record.stored_object.key, self._url_ttl_seconds)

    def delete_file(self, owner_id: str, record_id: str) -> None:
        """Delete the stored object (best effort) and then the record.

        Raises:
            FileRecordNotFoundError: if the record is missing or not the owner's.
        """
        record = self._require_record(owner_id, record_id)
        key = record.stored_object.key
        try:
            self._object_store.delete(key)
        except StorageError as exc:
            Log.warning(f"Could not delete stored object for file {record_id}: {exc}", key=key)

        if not self._repository.delete_for_owner(record_id, owner_id):
            raise FileRecordNotFoundError(f"File {record_id} not found")
        Log.info(f"Deleted file {record_id}", owner=owner_id)

    def _require_record(self, owner_id: str, record_id: str) -> FileRecord:
        record = self._repository.find_for_owner(record_id, owner_id)
        if record is None:
            raise FileRecordNotFoundError(f"File {record_id} not found")
        return record

    def _try_sign(self, record: FileRecord) -> str:
        try:
            return self._object_store.get_signed_url(
                record.stored_object.key, self._url_ttl_seconds
            )
        except StorageError as exc:
            Log.warning(f"Could not sign URL for file {record.id}: {exc}")
            return ""
