"""Keyword families for the auto-classifier.

A keyword family maps a family name (matched against category names) to
keywords (matched against import text). The built-in table can be replaced
by a YAML file:

    families:
      glass: [glass, panel, glazing, transparent]
      hardware: [hardware, screw, bolt]

The file location comes from ``settings.keyword_families_path``.
"""

from collections.abc import Mapping, Sequence
from functools import lru_cache
from pathlib import Path

import yaml

from taxonomy.config import settings
from taxonomy.core.category_store import TaxonomyError
from taxonomy.infra.logging import get_logger

logger = get_logger(__name__)

KeywordFamilies = dict[str, tuple[str, ...]]

DEFAULT_KEYWORD_FAMILIES: KeywordFamilies = {
    "glass": ("glass", "panel", "glazing", "transparent"),
    "shower": ("shower", "screen", "bathroom", "door"),
    "pool": ("pool", "fencing", "fence", "barrier"),
    "hardware": ("hardware", "screw", "bolt", "bracket", "hinge"),
    "aluminum": ("aluminum", "aluminium", "metal", "frame"),
}


class KeywordConfigError(TaxonomyError):
    """Raised when a keyword family file is malformed."""

    pass


def normalize_keyword_families(families: Mapping[str, Sequence[str]]) -> KeywordFamilies:
    """Lower-case family names and keywords, dropping blanks and duplicates.

    Raises:
        KeywordConfigError: If the mapping has the wrong shape
    """
    normalized: KeywordFamilies = {}
    for family, keywords in families.items():
        if not isinstance(family, str) or not family.strip():
            raise KeywordConfigError(f"Family name must be a non-empty string, got {family!r}")
        if isinstance(keywords, str) or not isinstance(keywords, Sequence):
            raise KeywordConfigError(f"Keywords for family '{family}' must be a list")

        cleaned: list[str] = []
        for keyword in keywords:
            if not isinstance(keyword, str):
                raise KeywordConfigError(
                    f"Keyword in family '{family}' must be a string, got {keyword!r}"
                )
            keyword = keyword.strip().lower()
            if keyword and keyword not in cleaned:
                cleaned.append(keyword)

        key = family.strip().lower()
        normalized[key] = tuple(dict.fromkeys(normalized.get(key, ()) + tuple(cleaned)))
    return normalized


def parse_keyword_families(yaml_content: str) -> KeywordFamilies:
    """Parse YAML content into a normalized keyword family table.

    Raises:
        KeywordConfigError: If the YAML is invalid or lacks a families mapping
    """
    try:
        data = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        raise KeywordConfigError(f"Invalid keyword family YAML: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("families"), dict):
        raise KeywordConfigError("Keyword family YAML must contain a 'families' mapping")

    return normalize_keyword_families(data["families"])


def load_keyword_families(path: str | Path) -> KeywordFamilies:
    """Load a keyword family table from a YAML file."""
    path = Path(path)
    logger.info("Loading keyword families from file", path=str(path))
    families = parse_keyword_families(path.read_text(encoding="utf-8"))
    logger.info("Keyword families loaded", families=list(families))
    return families


@lru_cache
def _cached_families(path: str | None) -> KeywordFamilies:
    if not path:
        return dict(DEFAULT_KEYWORD_FAMILIES)

    if not Path(path).exists():
        logger.warning("Keyword family file not found, using defaults", path=path)
        return dict(DEFAULT_KEYWORD_FAMILIES)

    return load_keyword_families(path)


def get_keyword_families() -> KeywordFamilies:
    """Configured keyword families (cached per configured path)."""
    return _cached_families(settings.keyword_families_path)


def clear_keyword_cache() -> None:
    """Forget cached keyword tables."""
    _cached_families.cache_clear()


__all__ = [
    "DEFAULT_KEYWORD_FAMILIES",
    "KeywordConfigError",
    "KeywordFamilies",
    "clear_keyword_cache",
    "get_keyword_families",
    "load_keyword_families",
    "normalize_keyword_families",
    "parse_keyword_families",
]
