from pathlib import Path

from app.config.settings import Settings
from app.storage.base import BaseObjectStore
from app.storage.local_store import LocalObjectStore
from app.storage.s3_store import S3ObjectStore


class ObjectStoreFactory:
    """Creates the object store adapter selected in settings."""

    BACKENDS = ("local", "s3")

    @classmethod
    def create(cls, settings: Settings) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        if backend == "local":
            return LocalObjectStore(files_root=Path(settings.files_root))
        if backend == "s3":
            if not settings.s3_bucket:
                raise ValueError("s3_bucket is required for storage_backend=s3")
            return S3ObjectStore(
                bucket=settings.s3_bucket,
                region=settings.s3_region,
                endpoint_url=settings.s3_endpoint_url or None,
            )
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
