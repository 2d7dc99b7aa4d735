from typing import Any

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import JSONResponse

from app.api.deps import (
    get_file_service,
    get_max_upload_bytes,
    get_orchestrator,
    get_owner_id,
)
from app.library.service import FileService
from app.upload.exceptions import BatchUploadError
from app.upload.models import UploadRequest, UploadState
from app.upload.orchestrator import UploadOrchestrator

router = APIRouter()


def _to_request(upload: UploadFile, max_bytes: int | None = None) -> UploadRequest:
    # One byte past the limit is enough for the size check to reject the file.
    data = upload.file.read() if max_bytes is None else upload.file.read(max_bytes + 1)
    return UploadRequest(
        filename=upload.filename or "",
        content_type=upload.content_type or "",
        data=data,
    )


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/api/upload")
def upload_files(
    files: list[UploadFile] | None = File(default=None),
    owner_id: str = Depends(get_owner_id),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
    max_bytes: int | None = Depends(get_max_upload_bytes),
) -> JSONResponse:
    """Upload a batch of files; partial success is still a 200."""
    if not files:
        return JSONResponse(status_code=400, content={"error": "No files provided"})

    requests = [_to_request(upload, max_bytes) for upload in files]
    try:
        result = orchestrator.upload_batch(owner_id, requests)
    except BatchUploadError as exc:
        return JSONResponse(
            status_code=500,
            content={"error": "All uploads failed", "details": exc.errors},
        )

    body: dict[str, object] = {
        "success": True,
        "uploadedFiles": [record.to_dict() for record in result.successes],
        "message": result.message,
    }
    if result.errors:
        body["errors"] = result.errors
    return JSONResponse(content=body)


@router.post("/api/upload-single")
def upload_single(
    file: UploadFile = File(...),
    owner_id: str = Depends(get_owner_id),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
    max_bytes: int | None = Depends(get_max_upload_bytes),
) -> JSONResponse:
    outcome = orchestrator.upload_file(owner_id, _to_request(file, max_bytes))
    if outcome.state is UploadState.REJECTED:
        return JSONResponse(status_code=400, content={"error": outcome.error})
    if not outcome.succeeded or outcome.record is None:
        return JSONResponse(status_code=500, content={"error": outcome.error})
    return JSONResponse(content={"success": True, "file": outcome.record.to_dict()})


@router.get("/api/files")
def list_files(
    category: str | None = Query(default=None),
    tag: str | None = Query(default=None),
    owner_id: str = Depends(get_owner_id),
    file_service: FileService = Depends(get_file_service),
) -> dict[str, Any]:
    listings = file_service.list_files(owner_id, category=category, tag=tag)
    return {"files": [listing.to_dict() for listing in listings]}


@router.get("/api/files/{file_id}/url")
def get_file_url(
    file_id: str,
    owner_id: str = Depends(get_owner_id),
    file_service: FileService = Depends(get_file_service),
) -> dict[str, Any]:
    url = file_service.get_file_url(owner_id, file_id)
    return {"url": url, "expiresIn": file_service.url_ttl_seconds}


@router.delete("/api/files/{file_id}")
def delete_file(
    file_id: str,
    owner_id: str = Depends(get_owner_id),
    file_service: FileService = Depends(get_file_service),
) -> dict[str, bool]:
    file_service.delete_file(owner_id, file_id)
    return {"success": True}
