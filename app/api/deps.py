from fastapi import Header, HTTPException, Request

from app.library.service import FileService
from app.upload.orchestrator import UploadOrchestrator

OWNER_HEADER = "X-Owner-Id"


def get_orchestrator(request: Request) -> UploadOrchestrator:
    return request.app.state.orchestrator


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


def get_owner_id(x_owner_id: str | None = Header(default=None)) -> str:
    """Owner id set by the authenticating gateway in front of this service."""
    owner_id = (x_owner_id or "").strip()
    if not owner_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return owner_id


def get_max_upload_bytes(request: Request) -> int | None:
    return request.app.state.max_upload_bytes
