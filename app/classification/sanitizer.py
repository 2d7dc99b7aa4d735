"""Normalizes raw provider JSON into a ClassificationResult.

Applied to every result regardless of provider. The function is idempotent:
sanitizing ``result.to_dict()`` again yields the same result.
"""

import math
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from app.classification.models import (
    PROCESSING_COMPLETED,
    PROCESSING_STATUSES,
    SUPPORTED_LANGUAGES,
    ClassificationResult,
)
from app.config.catalog import DocumentCatalog

MAX_TAGS = 10
MAX_AI_NAME_WORDS = 3
DEFAULT_CONFIDENCE = 0.5
CUSTOM_CATEGORY_PREFIX = "CUSTOM_"


def sanitize(
    raw: Mapping[str, Any],
    catalog: DocumentCatalog,
    *,
    analyzed_at: datetime,
) -> ClassificationResult:
    """Build a ClassificationResult from loosely shaped provider output.

    The provider's ``isCustomCategory`` and ``sensitiveData`` flags are ignored;
    both are derived from the category list and the sensitive tags.
    """
    category = _clean_category(raw.get("category"), catalog)
    tags = _clean_tags(raw.get("tags")) or (catalog.default_tag,)
    sensitive_data_tags = _clean_tags(raw.get("sensitiveDataTags"))
    return ClassificationResult(
        category=category,
        is_custom_category=not catalog.is_predefined_category(category),
        tags=tags,
        sensitive_data=bool(sensitive_data_tags),
        sensitive_data_tags=sensitive_data_tags,
        confidence=_clean_confidence(raw.get("confidence")),
        language=_clean_language(raw.get("language")),
        description=_clean_text(raw.get("description"), catalog.default_description),
        ai_name=_clean_ai_name(raw.get("aiName"), catalog.default_ai_name),
        processing_status=_clean_status(raw.get("processingStatus")),
        last_analyzed=analyzed_at,
    )


def _clean_category(raw: Any, catalog: DocumentCatalog) -> str:
    if not isinstance(raw, str):
        return catalog.default_category
    category = raw.strip()
    while category.startswith(CUSTOM_CATEGORY_PREFIX):
        category = category[len(CUSTOM_CATEGORY_PREFIX):].strip()
    return category or catalog.default_category


def _clean_tags(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    cleaned: list[str] = []
    for item in raw:
        if not isinstance(item, str):
            continue
        tag = item.strip().lower()
        if tag and tag not in cleaned:
            cleaned.append(tag)
        if len(cleaned) == MAX_TAGS:
            break
    return tuple(cleaned)


def _clean_confidence(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return DEFAULT_CONFIDENCE
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_CONFIDENCE
    if math.isnan(value):
        return DEFAULT_CONFIDENCE
    return max(0.0, min(1.0, value))


def _clean_language(raw: Any) -> str:
    if isinstance(raw, str) and raw.strip().lower() in SUPPORTED_LANGUAGES:
        return raw.strip().lower()
    return "unknown"


def _clean_text(raw: Any, default: str) -> str:
    if isinstance(raw, str) and raw.strip():
        return raw.strip()
    return default


def _clean_ai_name(raw: Any, default: str) -> str:
    if not isinstance(raw, str):
        return default
    words = raw.split()
    return " ".join(words[:MAX_AI_NAME_WORDS]) or default


def _clean_status(raw: Any) -> str:
    if isinstance(raw, str) and raw in PROCESSING_STATUSES:
        return raw
    return PROCESSING_COMPLETED
