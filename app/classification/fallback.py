"""Deterministic keyword-based metadata used when the AI provider fails."""

import random
import re
import unicodedata
from collections.abc import Callable
from datetime import datetime, timezone
from typing import ClassVar

from app.classification.models import PROCESSING_COMPLETED, ClassificationResult
from app.classification.sanitizer import sanitize
from app.config.catalog import DocumentCatalog, FallbackRule


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FallbackClassifier:
    """Builds metadata from the filename, MIME type and size. Never raises.

    One tag is drawn from the catalog's random pool through the injected
    ``rng``; every other field is a pure function of the inputs.
    """

    LARGE_FILE_BYTES: ClassVar[int] = 5 * 1024 * 1024
    SMALL_FILE_BYTES: ClassVar[int] = 100 * 1024

    _EXTENSION_RE: ClassVar[re.Pattern[str]] = re.compile(r"\.[^/.]+$")
    _SEPARATOR_RE: ClassVar[re.Pattern[str]] = re.compile(r"[-_\s]+")

    def __init__(
        self,
        catalog: DocumentCatalog,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._catalog = catalog
        self._rng = rng if rng is not None else random.Random()
        self._clock = clock

    def classify(self, filename: str, mime_type: str, size: int) -> ClassificationResult:
        rule = self._match_rule(filename)
        raw: dict[str, object] = {
            "category": rule.category if rule else self._catalog.default_category,
            "tags": self._tags(mime_type, size),
            "sensitiveDataTags": list(rule.sensitive_data_tags) if rule else [],
            "confidence": self._catalog.fallback_confidence,
            "language": "no",
            "description": rule.description if rule else self._catalog.default_description,
            "aiName": rule.ai_name if rule else self._name_from_filename(filename),
            "processingStatus": PROCESSING_COMPLETED,
        }
        return sanitize(raw, self._catalog, analyzed_at=self._clock())

    def _match_rule(self, filename: str) -> FallbackRule | None:
        # First match wins; the catalog lists the generic "attest" rule last.
        lowered = unicodedata.normalize("NFC", filename).lower()
        for rule in self._catalog.fallback_rules:
            if rule.matches(lowered):
                return rule
        return None

    def _tags(self, mime_type: str, size: int) -> list[str]:
        tags: list[str] = []
        if mime_type.startswith("image/"):
            tags.append("bilde")
            if mime_type == "image/jpeg":
                tags.extend(["foto", "komprimert"])
            elif mime_type == "image/png":
                tags.extend(["grafisk", "gjennomsiktig"])
        elif mime_type == "application/pdf":
            tags.extend(["pdf", "dokument"])
        elif mime_type.startswith("text/"):
            tags.extend(["tekst", "dokument"])
        else:
            tags.append("dokument")

        if size > self.LARGE_FILE_BYTES:
            tags.append("large-file")
        elif size < self.SMALL_FILE_BYTES:
            tags.append("small-file")

        if self._catalog.fallback_tag_pool:
            tags.append(self._rng.choice(self._catalog.fallback_tag_pool))
        return tags

    def _name_from_filename(self, filename: str) -> str:
        stem = self._EXTENSION_RE.sub("", filename)
        first_word = self._SEPARATOR_RE.split(stem.strip())[0]
        return first_word or self._catalog.default_ai_name
