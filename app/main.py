from pathlib import Path

import uvicorn

from app.api.app import create_app
from app.config.catalog import load_catalog
from app.config.settings import Settings
from app.database.connection import apply_schema, close_pool, init_pool
from app.database.repositories.file_records_repository import FileRecordsRepository
from app.library.service import FileService
from app.logging.logger import Log
from app.storage.factory import ObjectStoreFactory
from app.upload.orchestrator import build_orchestrator


def main() -> None:
    """Entry point: initialize pool -> build services -> serve HTTP."""
    settings = Settings()
    Log.configure(settings.log_level)
    catalog = load_catalog(Path(settings.catalog_path) if settings.catalog_path else None)
    init_pool(settings)

    try:
        apply_schema()
        object_store = ObjectStoreFactory.create(settings)
        repository = FileRecordsRepository()
        orchestrator = build_orchestrator(settings, catalog, object_store, repository)
        file_service = FileService(
            repository, object_store, url_ttl_seconds=settings.signed_url_ttl_seconds
        )
        app = create_app(orchestrator, file_service, catalog.max_file_size_bytes)
        Log.info(f"Serving on {settings.api_host}:{settings.api_port}")
        uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_config=None)
    finally:
        close_pool()


if __name__ == "__main__":
    main()
