from datetime import datetime
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from app.classification.sanitizer import sanitize
from app.config.catalog import DocumentCatalog
from app.database.repositories.file_records_repository import FileRecordsRepository
from app.upload.exceptions import PersistenceError
from app.upload.models import FileRecord, StoredObjectRef

_PATCH_TARGET = "app.database.repositories.file_records_repository.get_connection"


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


@pytest.fixture()
def record(catalog: DocumentCatalog, fixed_now: datetime) -> FileRecord:
    return FileRecord(
        id="0b7f5c8e-2f43-4e8b-9a51-0d1f9a3c7e11",
        owner_id="owner-a",
        original_name="lønnslipp.pdf",
        generated_name="1-abcdef-l_nnslipp.pdf",
        stored_object=StoredObjectRef(
            key="owner-a/1-abcdef-l_nnslipp.pdf", content_type="application/pdf", size=2048
        ),
        classification=sanitize(
            {"category": "Lønnslipp", "tags": ["lønn"], "sensitiveDataTags": ["navn"]},
            catalog,
            analyzed_at=fixed_now,
        ),
        uploaded_at=fixed_now,
    )


def _row(record: FileRecord) -> dict:
    return {
        "id": record.id,
        "owner_id": record.owner_id,
        "original_name": record.original_name,
        "generated_name": record.generated_name,
        "object_key": record.stored_object.key,
        "content_type": record.stored_object.content_type,
        "size_bytes": record.stored_object.size,
        "ai_metadata": record.classification.to_dict(),
        "uploaded_at": record.uploaded_at,
    }


class TestInsert:
    @patch(_PATCH_TARGET)
    def test_inserts_denormalized_columns(self, mock_get_conn: MagicMock, record: FileRecord) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)

        FileRecordsRepository().insert(record)

        params = mock_conn.execute.call_args.args[1]
        assert params[0] == record.id
        assert params[4] == "owner-a/1-abcdef-l_nnslipp.pdf"
        assert params[7] == "Lønnslipp"
        assert params[8] == ["lønn"]
        assert params[9] == "completed"
        assert params[10].obj == record.classification.to_dict()
        mock_conn.commit.assert_called_once()

    @patch(_PATCH_TARGET)
    def test_db_error_becomes_persistence_error(
        self, mock_get_conn: MagicMock, record: FileRecord
    ) -> None:
        mock_conn, _cursor = _mock_connection(mock_get_conn)
        mock_conn.execute.side_effect = psycopg.OperationalError("connection lost")

        with pytest.raises(PersistenceError, match="Failed to save file record"):
            FileRecordsRepository().insert(record)


class TestFindByOwner:
    @patch(_PATCH_TARGET)
    def test_returns_records(self, mock_get_conn: MagicMock, record: FileRecord) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = [_row(record)]

        result = FileRecordsRepository().find_by_owner("owner-a")

        assert result == [record]
        query, params = mock_cursor.execute.call_args.args
        assert "ORDER BY uploaded_at DESC" in query
        assert params == ["owner-a"]

    @patch(_PATCH_TARGET)
    def test_applies_category_and_tag_filters(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchall.return_value = []

        FileRecordsRepository().find_by_owner("owner-a", category="Pass", tag=" ID ")

        query, params = mock_cursor.execute.call_args.args
        assert "category = %s" in query
        assert "tags @> %s" in query
        assert params == ["owner-a", "Pass", ["id"]]


class TestFindForOwner:
    @patch(_PATCH_TARGET)
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert FileRecordsRepository().find_for_owner("rec-1", "owner-b") is None
        assert mock_cursor.execute.call_args.args[1] == ("rec-1", "owner-b")

    @patch(_PATCH_TARGET)
    def test_malformed_id_is_treated_as_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.errors.InvalidTextRepresentation("bad uuid")

        assert FileRecordsRepository().find_for_owner("not-a-uuid", "owner-a") is None


class TestDeleteForOwner:
    @patch(_PATCH_TARGET)
    def test_returns_true_when_row_deleted(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 1

        assert FileRecordsRepository().delete_for_owner("rec-1", "owner-a") is True
        mock_conn.commit.assert_called_once()

    @patch(_PATCH_TARGET)
    def test_returns_false_when_nothing_matched(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.rowcount = 0

        assert FileRecordsRepository().delete_for_owner("rec-1", "owner-b") is False
