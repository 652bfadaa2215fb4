"""
Request orchestration for Hydro Search Params.
Pipeline: query -> collection matching -> bbox/date extraction -> SearchResult.
Both LLM calls run sequentially on the same client.
"""
from __future__ import annotations
import time
import logging
from typing import Optional

from llm.collection_matcher import match_collections
from llm.openai_client import ChatModel, make_chat_llm
from llm.parameter_extractor import extract_parameters
from .catalog import load_catalog_text
from .config import AppConfig
from .errors import InvalidRequest
from .schema import SearchResult, assemble_result, resolve_model

logger = logging.getLogger(__name__)

# Value bound when requestString is omitted from the query string.
SENTINEL_REQUEST = "None"


def validate_request_string(value: Optional[str]) -> str:
    """Return the query unchanged, or raise InvalidRequest if missing/blank/sentinel."""
    if value is None or not value.strip():
        raise InvalidRequest("requestString parameter is required")
    if value.strip() == SENTINEL_REQUEST:
        raise InvalidRequest("requestString parameter is required")
    return value


def run_search(query: str, llm: ChatModel, catalog: str) -> SearchResult:
    """Run both stages against one chat client and assemble the result."""
    query = validate_request_string(query)
    t0 = time.perf_counter()
    logger.info("Query received: %s", query[:200])

    collections = match_collections(llm, catalog, query)
    parameters = extract_parameters(llm, query)
    result = assemble_result(collections, parameters)

    logger.info(
        "Query done in %.0fms: %d collections, bbox=%s, start=%s, end=%s",
        (time.perf_counter() - t0) * 1000,
        len(result.collections),
        result.bounding_box is not None,
        result.start_date,
        result.end_date,
    )
    return result


def search(query: str, config: AppConfig, model: Optional[str] = None) -> SearchResult:
    """Validate, build a fresh client for this request, and run the pipeline."""
    query = validate_request_string(query)
    model_name = resolve_model(model, config.model)
    catalog = load_catalog_text(config.catalog_path)
    llm = make_chat_llm(config, model=model_name)
    return run_search(query, llm, catalog)


__all__ = ["run_search", "search", "validate_request_string", "SENTINEL_REQUEST"]
