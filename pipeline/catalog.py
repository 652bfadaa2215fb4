"""
Loading of the bundled collection catalog.
The matcher prompt embeds the raw JSON text verbatim; /api/collections serves the parsed entries.
"""
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .config import DEFAULT_CATALOG_PATH
from .errors import CatalogUnavailable

logger = logging.getLogger(__name__)

SHORT_DESCRIPTION_LENGTH = 200

# Catalog text is static for the process lifetime.
# Entries: {resolved_path: catalog_text}
_catalog_cache: Dict[str, str] = {}


def load_catalog_text(path: Path = DEFAULT_CATALOG_PATH) -> str:
    """Return the catalog JSON text, reading the file only on first use."""
    key = str(Path(path).resolve())
    if key in _catalog_cache:
        return _catalog_cache[key]
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Unable to read collection catalog at %s: %s", path, exc)
        raise CatalogUnavailable(f"Failed to load collections definition from {path}") from exc
    logger.info("Loaded collection catalog from %s (%d chars)", path, len(text))
    _catalog_cache[key] = text
    return text


def clear_catalog_cache() -> None:
    _catalog_cache.clear()


def _short_description(description: str) -> str:
    if len(description) > SHORT_DESCRIPTION_LENGTH:
        return description[:SHORT_DESCRIPTION_LENGTH] + "..."
    return description


def load_catalog_entries(path: Path = DEFAULT_CATALOG_PATH) -> Dict[str, Dict[str, Any]]:
    """
    Parse the catalog into {collection_id: metadata}.
    Each entry carries id, title, description, shortDescription and thumbnailUrl.
    """
    text = load_catalog_text(path)
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogUnavailable(f"Collection catalog at {path} is not valid JSON: {exc}") from exc

    if isinstance(raw, dict):
        items: List[Any] = raw.get("collections", list(raw.values()))
    else:
        items = raw

    entries: Dict[str, Dict[str, Any]] = {}
    for item in items:
        if not isinstance(item, dict) or not item.get("id"):
            logger.warning("Skipping catalog entry without id: %r", item)
            continue
        description = item.get("description") or ""
        entries[item["id"]] = {
            "id": item["id"],
            "title": item.get("title") or item["id"],
            "description": description,
            "shortDescription": item.get("shortDescription") or _short_description(description),
            "thumbnailUrl": item.get("thumbnailUrl"),
        }
    return entries


__all__ = ["load_catalog_text", "load_catalog_entries", "clear_catalog_cache"]
