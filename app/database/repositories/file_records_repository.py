from typing import Any

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.classification.models import ClassificationResult
from app.database.connection import get_connection
from app.upload.exceptions import PersistenceError
from app.upload.models import FileRecord, StoredObjectRef

_SELECT_COLUMNS = """
    SELECT id, owner_id, original_name, generated_name, object_key,
           content_type, size_bytes, ai_metadata, uploaded_at
    FROM file_records
"""


class FileRecordsRepository:
    """Database operations for the file_records table.

    Every read and delete is scoped by owner id; a record belonging to another
    owner behaves exactly like a missing one.
    """

    def insert(self, record: FileRecord) -> None:
        """Persist a new file record.

        Raises:
            PersistenceError: if the insert fails.
        """
        metadata = record.classification
        try:
            with get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO file_records
                    (id, owner_id, original_name, generated_name, object_key,
                     content_type, size_bytes, category, tags, processing_status,
                     ai_metadata, uploaded_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        record.id,
                        record.owner_id,
                        record.original_name,
                        record.generated_name,
                        record.stored_object.key,
                        record.stored_object.content_type,
                        record.stored_object.size,
                        metadata.category,
                        list(metadata.tags),
                        metadata.processing_status,
                        Jsonb(metadata.to_dict()),
                        record.uploaded_at,
                    ),
                )
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to save file record: {exc}") from exc

    def find_by_owner(
        self,
        owner_id: str,
        *,
        category: str | None = None,
        tag: str | None = None,
    ) -> list[FileRecord]:
        """List an owner's records, newest first, optionally filtered."""
        conditions = ["owner_id = %s"]
        params: list[Any] = [owner_id]
        if category:
            conditions.append("category = %s")
            params.append(category)
        if tag:
            conditions.append("tags @> %s")
            params.append([tag.strip().lower()])
        query = f"{_SELECT_COLUMNS} WHERE {' AND '.join(conditions)} ORDER BY uploaded_at DESC"
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(query, params)  # type: ignore[arg-type]
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to list files: {exc}") from exc
        return [self._to_record(row) for row in rows]

    def find_for_owner(self, record_id: str, owner_id: str) -> FileRecord | None:
        """Find a record by id, only if it belongs to ``owner_id``."""
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"{_SELECT_COLUMNS} WHERE id = %s AND owner_id = %s",  # type: ignore[arg-type]
                        (record_id, owner_id),
                    )
                    row = cur.fetchone()
        except psycopg.errors.InvalidTextRepresentation:
            return None
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to load file {record_id}: {exc}") from exc
        return self._to_record(row) if row is not None else None

    def delete_for_owner(self, record_id: str, owner_id: str) -> bool:
        """Delete a record owned by ``owner_id``. Returns False if nothing matched."""
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "DELETE FROM file_records WHERE id = %s AND owner_id = %s",
                        (record_id, owner_id),
                    )
                    deleted = cur.rowcount > 0
                conn.commit()
        except psycopg.Error as exc:
            raise PersistenceError(f"Failed to delete file {record_id}: {exc}") from exc
        return deleted

    @staticmethod
    def _to_record(row: dict[str, Any]) -> FileRecord:
        return FileRecord(
            id=str(row["id"]),
            owner_id=row["owner_id"],
            original_name=row["original_name"],
            generated_name=row["generated_name"],
            stored_object=StoredObjectRef(
                key=row["object_key"],
                content_type=row["content_type"],
                size=row["size_bytes"],
            ),
            classification=ClassificationResult.from_dict(row["ai_metadata"]),
            uploaded_at=row["uploaded_at"],
        )
