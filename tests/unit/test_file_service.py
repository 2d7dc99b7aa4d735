from datetime import datetime
from unittest.mock import MagicMock

import pytest

from app.classification.sanitizer import sanitize
from app.config.catalog import DocumentCatalog
from app.database.repositories.file_records_repository import FileRecordsRepository
from app.library.service import FileService
from app.storage.base import BaseObjectStore
from app.storage.exceptions import StorageError
from app.upload.exceptions import FileRecordNotFoundError
from app.upload.models import FileRecord, StoredObjectRef


@pytest.fixture()
def record(catalog: DocumentCatalog, fixed_now: datetime) -> FileRecord:
    return FileRecord(
        id="rec-1",
        owner_id="owner-a",
        original_name="pass.jpg",
        generated_name="1-abcdef-pass.jpg",
        stored_object=StoredObjectRef(
            key="owner-a/1-abcdef-pass.jpg", content_type="image/jpeg", size=1234
        ),
        classification=sanitize({"category": "Pass"}, catalog, analyzed_at=fixed_now),
        uploaded_at=fixed_now,
    )


def _make_service() -> tuple[FileService, MagicMock, MagicMock]:
    repo = MagicMock(spec=FileRecordsRepository)
    store = MagicMock(spec=BaseObjectStore)
    return FileService(repo, store, url_ttl_seconds=600), repo, store


class TestListFiles:
    def test_attaches_signed_urls(self, record: FileRecord) -> None:
        service, repo, store = _make_service()
        repo.find_by_owner.return_value = [record]
        store.get_signed_url.return_value = "https://signed/pass.jpg"

        listings = service.list_files("owner-a", category="Pass", tag="id")

        repo.find_by_owner.assert_called_once_with("owner-a", category="Pass", tag="id")
        store.get_signed_url.assert_called_once_with("owner-a/1-abcdef-pass.jpg", 600)
        assert listings[0].record == record
        assert listings[0].to_dict()["url"] == "https://signed/pass.jpg"
        assert listings[0].to_dict()["originalName"] == "pass.jpg"

    def test_signing_failure_gives_empty_url(self, record: FileRecord) -> None:
        service, repo, store = _make_service()
        repo.find_by_owner.return_value = [record]
        store.get_signed_url.side_effect = StorageError("no credentials")

        listings = service.list_files("owner-a")

        assert listings[0].url == ""


class TestGetFileUrl:
    def test_returns_signed_url(self, record: FileRecord) -> None:
        service, repo, store = _make_service()
        repo.find_for_owner.return_value = record
        store.get_signed_url.return_value = "https://signed"

        assert service.get_file_url("owner-a", "rec-1") == "https://signed"
        repo.find_for_owner.assert_called_once_with("rec-1", "owner-a")

    def test_foreign_record_is_not_found(self) -> None:
        service, repo, store = _make_service()
        repo.find_for_owner.return_value = None

        with pytest.raises(FileRecordNotFoundError):
            service.get_file_url("owner-b", "rec-1")
        store.get_signed_url.assert_not_called()

    def test_storage_error_propagates(self, record: FileRecord) -> None:
        service, repo, store = _make_service()
        repo.find_for_owner.return_value = record
        store.get_signed_url.side_effect = StorageError("object missing")

        with pytest.raises(StorageError):
            service.get_file_url("owner-a", "rec-1")


class TestDeleteFile:
    def test_deletes_object_then_record(self, record: FileRecord) -> None:
        service, repo, store = _make_service()
        repo.find_for_owner.return_value = record
        repo.delete_for_owner.return_value = True

        service.delete_file("owner-a", "rec-1")

        store.delete.assert_called_once_with("owner-a/1-abcdef-pass.jpg")
        repo.delete_for_owner.assert_called_once_with("rec-1", "owner-a")

    def test_other_owner_cannot_delete(self) -> None:
        service, repo, store = _make_service()
        repo.find_for_owner.return_value = None

        with pytest.raises(FileRecordNotFoundError):
            service.delete_file("owner-b", "rec-1")

        store.delete.assert_not_called()
        repo.delete_for_owner.assert_not_called()

    def test_storage_failure_still_deletes_record(self, record: FileRecord) -> None:
        service, repo, store = _make_service()
        repo.find_for_owner.return_value = record
        repo.delete_for_owner.return_value = True
        store.delete.side_effect = StorageError("bucket unavailable")

        service.delete_file("owner-a", "rec-1")

        repo.delete_for_owner.assert_called_once_with("rec-1", "owner-a")

    def test_record_vanishing_mid_delete_is_not_found(self, record: FileRecord) -> None:
        service, repo, _store = _make_service()
        repo.find_for_owner.return_value = record
        repo.delete_for_owner.return_value = False

        with pytest.raises(FileRecordNotFoundError):
            service.delete_file("owner-a", "rec-1")
