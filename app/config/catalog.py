"""Immutable document catalog: accepted file kinds, categories and tag vocabularies."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

_DEFAULT_CATALOG_PATH = Path(__file__).parent / "catalog.json"


class CatalogError(Exception):
    """Raised when the document catalog cannot be loaded."""


@dataclass(frozen=True)
class FallbackRule:
    """Filename keyword rule used by the fallback classifier."""

    keywords: tuple[str, ...]
    category: str
    description: str
    ai_name: str
    sensitive_data_tags: tuple[str, ...] = ()

    def matches(self, lowered_filename: str) -> bool:
        return any(keyword in lowered_filename for keyword in self.keywords)


@dataclass(frozen=True)
class DocumentCatalog:
    """Process-wide configuration loaded once at startup and injected where needed."""

    accepted_types: dict[str, tuple[str, ...]]
    max_file_size_bytes: int
    categories: tuple[str, ...]
    general_tags: tuple[str, ...]
    sensitive_data_tags: tuple[str, ...]
    fallback_rules: tuple[FallbackRule, ...] = ()
    fallback_tag_pool: tuple[str, ...] = ()
    fallback_confidence: float = 0.3
    default_category: str = "Offentlig dokument"
    default_description: str = "Dokument lastet opp til systemet"
    default_ai_name: str = "Dokument"
    default_tag: str = "dokument"
    _category_set: frozenset[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_category_set", frozenset(self.categories))

    def accepted_extensions(self) -> tuple[str, ...]:
        return tuple(ext for exts in self.accepted_types.values() for ext in exts)

    def is_predefined_category(self, category: str) -> bool:
        return category in self._category_set

    def content_type_for(self, filename: str) -> str | None:
        """Map a filename to its allow-listed MIME type by extension."""
        lowered = filename.lower()
        for mime_type, extensions in self.accepted_types.items():
            if any(lowered.endswith(ext) for ext in extensions):
                return mime_type
        return None


def load_catalog(path: Path | None = None) -> DocumentCatalog:
    """Load the document catalog from a JSON file.

    Args:
        path: Path to the catalog file.
              Defaults to the bundled catalog.json.

    Raises:
        CatalogError: if the file cannot be read or is malformed.
    """
    if path is None:
        path = _DEFAULT_CATALOG_PATH
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CatalogError(f"Failed to load catalog: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Catalog is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise CatalogError("Catalog must be a JSON object")
    try:
        return _build_catalog(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise CatalogError(f"Catalog is malformed: {exc}") from exc


_OPTIONAL_SCALARS = (
    "fallback_confidence",
    "default_category",
    "default_description",
    "default_ai_name",
    "default_tag",
)


def _build_catalog(raw: dict[str, Any]) -> DocumentCatalog:
    accepted_types = {
        str(mime): tuple(str(ext).lower() for ext in exts)
        for mime, exts in raw["accepted_types"].items()
    }
    rules = tuple(
        FallbackRule(
            keywords=tuple(str(k).lower() for k in rule["keywords"]),
            category=rule["category"],
            description=rule["description"],
            ai_name=rule["ai_name"],
            sensitive_data_tags=tuple(rule.get("sensitive_data_tags", ())),
        )
        for rule in raw.get("fallback_rules", [])
    )
    optional: dict[str, Any] = {key: raw[key] for key in _OPTIONAL_SCALARS if key in raw}
    if "fallback_confidence" in optional:
        optional["fallback_confidence"] = float(optional["fallback_confidence"])
    return DocumentCatalog(
        accepted_types=accepted_types,
        max_file_size_bytes=int(raw["max_file_size_bytes"]),
        categories=tuple(raw["categories"]),
        general_tags=tuple(raw.get("general_tags", ())),
        sensitive_data_tags=tuple(raw.get("sensitive_data_tags", ())),
        fallback_rules=rules,
        fallback_tag_pool=tuple(raw.get("fallback_tag_pool", ())),
        **optional,
    )
