"""
STAC item search built from extracted search parameters.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional, Sequence, Union

import requests

from .errors import InvalidRequest, UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 100
STAC_TIMEOUT_SECONDS = 30


def build_stac_query(
    collections: Optional[Sequence[str]] = None,
    bbox: Optional[Sequence[Union[str, float]]] = None,
    datetime_range: Optional[str] = None,
    limit: int = DEFAULT_LIMIT,
) -> Dict[str, Any]:
    """
    Build a STAC /search body.
    bbox is only sent when it has exactly 4 values ([minx, miny, maxx, maxy]).
    """
    query: Dict[str, Any] = {"limit": limit}
    if collections:
        query["collections"] = list(collections)
    if bbox and len(bbox) == 4:
        try:
            query["bbox"] = [float(v) for v in bbox]
        except (TypeError, ValueError) as exc:
            raise InvalidRequest(f"bbox values must be numeric: {list(bbox)}") from exc
    if datetime_range:
        query["datetime"] = datetime_range
    return query


def datetime_interval(start: Optional[str], end: Optional[str]) -> Optional[str]:
    """STAC interval string; an open end is written as '..'."""
    if not start and not end:
        return None
    return f"{start or '..'}/{end or '..'}"


def search_stac(
    query: Dict[str, Any],
    stac_url: str,
    session: Optional[requests.Session] = None,
    timeout: float = STAC_TIMEOUT_SECONDS,
) -> Dict[str, Any]:
    """
    POST the query to <stac_url>/search and return the FeatureCollection.
    A 4xx from the STAC API is the caller's fault (InvalidRequest); anything else is upstream.
    """
    post = session.post if session is not None else requests.post
    url = f"{stac_url.rstrip('/')}/search"
    try:
        response = post(url, json=query, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("STAC API unreachable at %s: %s", url, exc)
        raise UpstreamUnavailable(f"Failed to query STAC API: {exc}") from exc

    if not response.ok:
        logger.error("STAC API error %s: %s", response.status_code, response.text[:500])
        message = f"STAC API returned status {response.status_code}: {response.text[:500]}"
        if 400 <= response.status_code < 500:
            raise InvalidRequest(message)
        raise UpstreamUnavailable(message)
    return response.json()


__all__ = ["build_stac_query", "datetime_interval", "search_stac"]
