from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from app.api.routes import router
from app.library.service import FileService
from app.logging.logger import Log
from app.storage.exceptions import StorageError
from app.upload.exceptions import FileRecordNotFoundError, PersistenceError
from app.upload.orchestrator import UploadOrchestrator


def create_app(
    orchestrator: UploadOrchestrator,
    file_service: FileService,
    max_upload_bytes: int | None = None,
) -> FastAPI:
    """Build the HTTP application around already-constructed services.

    ``max_upload_bytes`` caps how much of each uploaded file is read into
    memory; anything larger is read just past the cap so validation rejects it.
    """
    app = FastAPI(title="docvault", description="Document upload and classification")
    app.state.orchestrator = orchestrator
    app.state.file_service = file_service
    app.state.max_upload_bytes = max_upload_bytes
    app.include_router(router)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})

    @app.exception_handler(FileRecordNotFoundError)
    async def not_found_handler(request: Request, exc: FileRecordNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "File not found"})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        Log.error(f"Storage error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "Failed to access file storage"})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        Log.error(f"Database error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": "Database error"})

    return app
