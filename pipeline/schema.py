"""
Result model and guardrails for Hydro Search Params.
Defines the assembled SearchResult, its HTTP rendering, and the allowed model names.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

from llm.parameter_extractor import BoundingBox, ExtractedParameters
from .errors import InvalidRequest

# Aliases accepted in the ?model= parameter -> Mistral API model ids.
MODEL_ALIASES: Dict[str, str] = {
    "MISTRAL_LARGE_LATEST": "mistral-large-latest",
    "MISTRAL_MEDIUM_LATEST": "mistral-medium-latest",
    "MISTRAL_SMALL_LATEST": "mistral-small-latest",
    "OPEN_MISTRAL_NEMO": "open-mistral-nemo",
    "CODESTRAL_LATEST": "codestral-latest",
}


@dataclass(frozen=True)
class SearchResult:
    collections: List[str] = field(default_factory=list)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    bounding_box: Optional[BoundingBox] = None

    def to_response(self) -> Dict[str, Any]:
        """Render the endpoint payload (camelCase keys, ISO-8601 dates)."""
        return {
            "collections": list(self.collections),
            "startDate": format_timestamp(self.start_date),
            "endDate": format_timestamp(self.end_date),
            "boundingBox": list(self.bounding_box) if self.bounding_box is not None else None,
        }


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with milliseconds; UTC is written with a Z designator."""
    if value is None:
        return None
    text = value.isoformat(timespec="milliseconds")
    if value.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


def assemble_result(collections: Sequence[str], parameters: ExtractedParameters) -> SearchResult:
    return SearchResult(
        collections=list(collections),
        start_date=parameters.start,
        end_date=parameters.end,
        bounding_box=parameters.bbox,
    )


def resolve_model(requested: Optional[str], default: str) -> str:
    """Map a ?model= value (alias or raw id) to a model id; None/blank -> default."""
    if requested is None or not requested.strip():
        return default
    requested = requested.strip()
    if requested.upper() in MODEL_ALIASES:
        return MODEL_ALIASES[requested.upper()]
    if requested in MODEL_ALIASES.values():
        return requested
    raise InvalidRequest(
        f"Unknown model '{requested}'. Allowed: {', '.join(sorted(MODEL_ALIASES))}."
    )


__all__ = ["SearchResult", "MODEL_ALIASES", "assemble_result", "format_timestamp", "resolve_model"]
