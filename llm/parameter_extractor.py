"""
Search-parameter extraction: bbox and date interval from the query.
The model is asked for one-line JSON; the reply is sanitized, parsed, and each
field is extracted on its own so one bad field never sinks the others.
"""
from __future__ import annotations
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from llm.openai_client import ChatModel
from llm.prompt_templates import PARAMETER_EXTRACTION_PROMPT
from pipeline.errors import FieldParseFailure, MalformedModelResponse

logger = logging.getLogger(__name__)

BoundingBox = Tuple[str, str, str, str]

LANGUAGE_TAG = "json"
BBOX_KEY = "bbox"
START_KEY = "start_datetime"
END_KEY = "end_datetime"

# yyyy-MM-dd'T'HH:mm:ss.SSSX
DATETIME_PATTERN = re.compile(
    r"^(\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3})(Z|[+-]\d{2}(?::?\d{2})?)$"
)
DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


@dataclass(frozen=True)
class ExtractedParameters:
    bbox: Optional[BoundingBox] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None


def sanitize_response(text: str) -> str:
    """Remove code-fence backticks, then a leading 'json' tag and its separator."""
    text = text.replace("`", "")
    if text.startswith(LANGUAGE_TAG):
        text = text[len(LANGUAGE_TAG) + 1:]
    return text


def parse_response_object(text: Optional[str]) -> Dict[str, Any]:
    """
    Parse the sanitized reply as a JSON object.
    Numbers are kept as their source text so coordinates keep their formatting.
    """
    if text is None:
        raise MalformedModelResponse("Model returned no content for search parameters.")
    try:
        parsed = json.loads(text, parse_float=str, parse_int=str, parse_constant=str)
    except json.JSONDecodeError as exc:
        raise MalformedModelResponse(f"Model did not return valid JSON: {exc}") from exc
    if not isinstance(parsed, dict):
        raise MalformedModelResponse(
            f"Model returned JSON {type(parsed).__name__}, expected an object."
        )
    return parsed


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def parse_bbox(payload: Dict[str, Any]) -> Optional[BoundingBox]:
    """Return the 4 bbox values as text, or None when absent or not exactly 4 long."""
    if BBOX_KEY not in payload:
        return None
    value = payload[BBOX_KEY]
    if not isinstance(value, list):
        raise FieldParseFailure(BBOX_KEY, value, "expected an array")
    if len(value) != 4:
        return None
    if any(isinstance(item, (list, dict)) for item in value):
        raise FieldParseFailure(BBOX_KEY, value, "coordinates must be scalars")
    return tuple(_scalar_text(item) for item in value)


def parse_datetime(value: str) -> datetime:
    """Parse a yyyy-MM-dd'T'HH:mm:ss.SSSX timestamp into an aware datetime."""
    match = DATETIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"{value!r} does not match yyyy-MM-ddTHH:mm:ss.SSSX")
    stamp, zone = match.groups()
    if zone == "Z":
        zone = "+0000"
    elif len(zone) == 3:
        zone += "00"
    return datetime.strptime(stamp + zone, DATETIME_FORMAT)


def parse_datetime_field(payload: Dict[str, Any], key: str) -> Optional[datetime]:
    """Return the parsed timestamp for key, None when missing or blank."""
    if key not in payload:
        return None
    value = payload[key]
    if value is None:
        return None
    if not isinstance(value, str):
        raise FieldParseFailure(key, value, "expected a string")
    if not value.strip():
        return None
    try:
        return parse_datetime(value)
    except ValueError as exc:
        raise FieldParseFailure(key, value, str(exc)) from exc


def _soft(parse, *args):
    """Run a field parser; a FieldParseFailure becomes None plus a warning."""
    try:
        return parse(*args)
    except FieldParseFailure as exc:
        logger.warning("Failed to parse %s: %s", exc.field, exc)
        return None


def extract_from_response(response: Optional[str]) -> ExtractedParameters:
    """Sanitize, parse and extract fields from a raw model reply."""
    if response is None:
        raise MalformedModelResponse("Model returned no content for search parameters.")
    sanitized = sanitize_response(response)
    logger.info("Response string for params: %s", sanitized)
    payload = parse_response_object(sanitized)
    return ExtractedParameters(
        bbox=_soft(parse_bbox, payload),
        start=_soft(parse_datetime_field, payload, START_KEY),
        end=_soft(parse_datetime_field, payload, END_KEY),
    )


def extract_parameters(llm: ChatModel, query: str) -> ExtractedParameters:
    """Ask the model for bbox/date JSON and extract it. Start/end order is not checked."""
    response = llm.chat(PARAMETER_EXTRACTION_PROMPT, query)
    return extract_from_response(response)


__all__ = [
    "BoundingBox",
    "ExtractedParameters",
    "extract_parameters",
    "extract_from_response",
    "sanitize_response",
    "parse_response_object",
    "parse_bbox",
    "parse_datetime",
    "parse_datetime_field",
]
