import random
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from app.classification.factory import ClassifierFactory
from app.classification.fallback import FallbackClassifier
from app.config.catalog import DocumentCatalog
from app.config.settings import Settings
from app.database.repositories.file_records_repository import FileRecordsRepository
from app.logging.logger import Log
from app.storage.base import BaseObjectStore
from app.storage.exceptions import StorageError
from app.upload.exceptions import BatchUploadError, FileValidationError, PersistenceError
from app.upload.models import BatchResult, FileOutcome, UploadRequest, UploadState
from app.upload.pipeline import UploadContext
from app.upload.steps import ClassifyStep, PersistStep, StoreStep, ValidateStep
from app.upload.validator import FileValidator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadOrchestrator:
    """Drives each file through validate -> store -> classify -> persist.

    Per-file failures are returned as values; only a batch in which every
    file failed raises.
    """

    def __init__(
        self,
        validate_step: ValidateStep,
        store_step: StoreStep,
        classify_step: ClassifyStep,
        persist_step: PersistStep,
        max_workers: int = 4,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self._validate_step = validate_step
        self._store_step = store_step
        self._classify_step = classify_step
        self._persist_step = persist_step
        self._max_workers = max_workers

    def upload_file(self, owner_id: str, request: UploadRequest) -> FileOutcome:
        """Run the pipeline for one file. Never raises."""
        context = UploadContext(owner_id=owner_id, request=request)
        name = request.filename
        Log.info(f"Processing upload {name} ({request.size} bytes)", owner=owner_id)

        try:
            self._validate_step.run(context)
        except FileValidationError as exc:
            Log.warning(f"Rejected {name}: {exc}")
            return FileOutcome(filename=name, state=UploadState.REJECTED, error=str(exc))

        try:
            self._store_step.run(context)
        except StorageError as exc:
            return self._failed(context, f"Failed to upload {name}: {exc}")
        except Exception as exc:
            return self._failed(context, f"Failed to process {name}: {exc}")

        self._classify_step.run(context)

        try:
            self._persist_step.run(context)
        except PersistenceError as exc:
            # The stored object is left in place; nothing references it now.
            key = context.stored_object.key if context.stored_object else ""
            Log.error(f"Record for {name} not saved, stored object orphaned", key=key)
            return self._failed(context, f"Failed to process {name}: {exc}")
        except Exception as exc:
            return self._failed(context, f"Failed to process {name}: {exc}")

        Log.info(
            f"Uploaded {name}",
            category=context.record.classification.category if context.record else "",
            source=context.classification.source.value if context.classification else "",
        )
        return FileOutcome(filename=name, state=context.state, record=context.record)

    def upload_batch(self, owner_id: str, requests: Sequence[UploadRequest]) -> BatchResult:
        """Upload several files with bounded concurrency.

        Results keep the input order. Raises BatchUploadError if nothing
        succeeded and ValueError for an empty batch.
        """
        if not requests:
            raise ValueError("No files provided")

        workers = min(self._max_workers, len(requests))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="upload") as pool:
            outcomes = list(pool.map(lambda req: self.upload_file(owner_id, req), requests))

        result = BatchResult()
        for outcome in outcomes:
            if outcome.succeeded and outcome.record is not None:
                result.successes.append(outcome.record)
            else:
                result.errors.append(outcome.error or f"Failed to process {outcome.filename}")

        Log.info(
            f"Batch finished: {len(result.successes)} uploaded, {len(result.errors)} failed",
            owner=owner_id,
        )
        if not result.successes:
            raise BatchUploadError(result.errors)
        return result

    def _failed(self, context: UploadContext, message: str) -> FileOutcome:
        Log.error(message)
        context.state = UploadState.FAILED
        return FileOutcome(filename=context.request.filename, state=UploadState.FAILED, error=message)


def build_orchestrator(
    settings: Settings,
    catalog: DocumentCatalog,
    object_store: BaseObjectStore,
    repository: FileRecordsRepository | None = None,
    clock: Callable[[], datetime] = _utcnow,
    rng: random.Random | None = None,
) -> UploadOrchestrator:
    """Build an UploadOrchestrator with all required adapters."""
    rng = rng if rng is not None else random.Random()
    return UploadOrchestrator(
        validate_step=ValidateStep(FileValidator(catalog)),
        store_step=StoreStep(object_store, clock=clock, rng=rng),
        classify_step=ClassifyStep(
            classifier=ClassifierFactory.create(settings, catalog),
            fallback=FallbackClassifier(catalog, rng=rng, clock=clock),
        ),
        persist_step=PersistStep(repository or FileRecordsRepository(), clock=clock),
        max_workers=settings.upload_max_workers,
    )
