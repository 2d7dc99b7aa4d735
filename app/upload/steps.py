import random
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime

from app.classification.base import BaseClassifier
from app.classification.exceptions import ClassificationError
from app.classification.fallback import FallbackClassifier
from app.classification.models import PROCESSING_COMPLETED, PROCESSING_FAILED
from app.database.repositories.file_records_repository import FileRecordsRepository
from app.logging.logger import Log
from app.storage.base import BaseObjectStore
from app.storage.keys import generate_file_name, object_key
from app.upload.models import (
    ClassificationOutcome,
    ClassificationSource,
    FileRecord,
    StoredObjectRef,
    UploadState,
)
from app.upload.pipeline import UploadContext, UploadStep
from app.upload.validator import FileValidator


class ValidateStep(UploadStep):
    def __init__(self, validator: FileValidator) -> None:
        self._validator = validator

    def run(self, context: UploadContext) -> UploadContext:
        self._validator.validate(context.request)
        context.content_type = self._validator.resolve_content_type(context.request)
        context.state = UploadState.VALIDATED
        return context


class StoreStep(UploadStep):
    def __init__(
        self,
        object_store: BaseObjectStore,
        clock: Callable[[], datetime],
        rng: random.Random,
    ) -> None:
        self._object_store = object_store
        self._clock = clock
        self._rng = rng

    def run(self, context: UploadContext) -> UploadContext:
        request = context.request
        context.generated_name = generate_file_name(
            request.filename, now=self._clock(), rng=self._rng
        )
        key = self._object_store.put(
            object_key(context.owner_id, context.generated_name),
            request.data,
            context.content_type,
        )
        context.stored_object = StoredObjectRef(
            key=key,
            content_type=context.content_type,
            size=request.size,
        )
        context.state = UploadState.STORED
        Log.info(f"Stored {request.filename} ({request.size} bytes)", key=key)
        return context


class ClassifyStep(UploadStep):
    """AI classification with a fallback branch; never aborts the file."""

    def __init__(self, classifier: BaseClassifier, fallback: FallbackClassifier) -> None:
        self._classifier = classifier
        self._fallback = fallback

    def run(self, context: UploadContext) -> UploadContext:
        request = context.request
        try:
            result = self._classifier.classify(request.data, request.filename, context.content_type)
            context.classification = ClassificationOutcome(
                result=replace(result, processing_status=PROCESSING_COMPLETED),
                source=ClassificationSource.AI,
            )
        except ClassificationError as exc:
            Log.warning(f"AI analysis failed for {request.filename}, using fallback: {exc}")
            context.classification = self._fallback_outcome(context, exc)
        except Exception as exc:
            Log.error(f"Unexpected classifier error for {request.filename}, using fallback: {exc}")
            context.classification = self._fallback_outcome(context, exc)
        context.state = UploadState.CLASSIFIED
        return context

    def _fallback_outcome(self, context: UploadContext, exc: Exception) -> ClassificationOutcome:
        request = context.request
        result = self._fallback.classify(request.filename, context.content_type, request.size)
        return ClassificationOutcome(
            result=replace(result, processing_status=PROCESSING_FAILED),
            source=ClassificationSource.FALLBACK,
            error=str(exc),
        )


class PersistStep(UploadStep):
    def __init__(
        self,
        repository: FileRecordsRepository,
        clock: Callable[[], datetime],
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._repository = repository
        self._clock = clock
        self._id_factory = id_factory

    def run(self, context: UploadContext) -> UploadContext:
        if context.stored_object is None:
            raise ValueError("UploadContext.stored_object must be set before persist")
        if context.classification is None:
            raise ValueError("UploadContext.classification must be set before persist")
        record = FileRecord(
            id=self._id_factory(),
            owner_id=context.owner_id,
            original_name=context.request.filename,
            generated_name=context.generated_name,
            stored_object=context.stored_object,
            classification=context.classification.result,
            uploaded_at=self._clock(),
        )
        self._repository.insert(record)
        context.record = record
        context.state = UploadState.PERSISTED
        return context
