"""
Collection matching: asks the LLM which catalog collections fit the query.
The answer is taken at face value; IDs are not checked against the catalog.
"""
from __future__ import annotations
import logging
from typing import List, Optional

from llm.openai_client import ChatModel
from llm.prompt_templates import build_collection_matching_prompt

logger = logging.getLogger(__name__)


def split_collection_ids(response: Optional[str]) -> List[str]:
    """
    Turn a comma separated model answer into a list of IDs.
    Tokens are trimmed and unquoted, empty ones dropped; order and duplicates are kept.
    """
    if response is None:
        return []
    # Answers may quote each ID like the prompt examples, or be a bare "" for no match
    tokens = (token.strip().strip('"').strip() for token in response.split(","))
    return [token for token in tokens if token]


def match_collections(llm: ChatModel, catalog: str, query: str) -> List[str]:
    """Return the collection IDs the model considers relevant to the query."""
    instruction = build_collection_matching_prompt(catalog)
    response = llm.chat(instruction, query)
    logger.info("Response string for collections: %s", response)
    return split_collection_ids(response)


__all__ = ["match_collections", "split_collection_ids"]
