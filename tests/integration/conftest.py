import os
import random
import uuid
from collections.abc import Generator
from datetime import datetime
from pathlib import Path
from typing import Any

import psycopg
import pytest

from app.classification.sanitizer import sanitize
from app.config.catalog import DocumentCatalog
from app.config.settings import Settings
from app.database.connection import (
    apply_schema,
    build_conninfo,
    close_pool,
    get_connection,
    init_pool,
)
from app.storage.keys import generate_file_name, object_key
from app.storage.local_store import LocalObjectStore
from app.upload.models import FileRecord, StoredObjectRef


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "docvault_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        with psycopg.connect(build_conninfo(test_settings), connect_timeout=3):
            pass
    except psycopg.Error as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a scratch database"
        )
    init_pool(test_settings)
    try:
        apply_schema()
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def owner_ids(integration_pool: None) -> Generator[list[str], None, None]:
    """Owner ids created by a test; their rows are removed afterwards."""
    owners: list[str] = []
    yield owners
    if not owners:
        return
    with get_connection() as conn:
        conn.execute("DELETE FROM file_records WHERE owner_id = ANY(%s)", (owners,))
        conn.commit()


@pytest.fixture
def make_record(
    catalog: DocumentCatalog,
) -> Any:
    rng = random.Random(11)

    def _make(
        owner_id: str,
        filename: str,
        uploaded_at: datetime,
        category: str = "Pass",
        tags: list[str] | None = None,
    ) -> FileRecord:
        generated = generate_file_name(filename, now=uploaded_at, rng=rng)
        return FileRecord(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            original_name=filename,
            generated_name=generated,
            stored_object=StoredObjectRef(
                key=object_key(owner_id, generated),
                content_type="application/pdf",
                size=1024,
            ),
            classification=sanitize(
                {"category": category, "tags": tags or ["dokument"]},
                catalog,
                analyzed_at=uploaded_at,
            ),
            uploaded_at=uploaded_at,
        )

    return _make


@pytest.fixture
def local_store(tmp_path: Path) -> LocalObjectStore:
    return LocalObjectStore(files_root=tmp_path)
