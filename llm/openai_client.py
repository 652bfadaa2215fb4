"""
Chat client wrapper for the Mistral API (OpenAI-compatible endpoint).
Exposes a single chat(system_instruction, user_message) -> str call.
"""
from __future__ import annotations
import logging
from typing import Optional, Protocol

from openai import OpenAI, OpenAIError

from pipeline.config import AppConfig
from pipeline.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


class ChatModel(Protocol):
    """Anything that answers one system + user exchange with text."""

    def chat(self, system_instruction: str, user_message: str) -> Optional[str]:
        ...


class ChatLLM:
    """One-shot chat exchanges against a single model. No memory between calls."""

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

    def chat(self, system_instruction: str, user_message: str) -> Optional[str]:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_instruction},
                    {"role": "user", "content": user_message},
                ],
            )
        except OpenAIError as exc:
            logger.error("Mistral API call failed (model=%s): %s", self.model, exc)
            raise UpstreamUnavailable(f"LLM provider call failed: {exc}") from exc

        if not completion.choices:
            return None
        return completion.choices[0].message.content


def make_chat_llm(config: AppConfig, model: Optional[str] = None) -> ChatLLM:
    """Return a ChatLLM bound to the configured key, endpoint and model."""
    client = OpenAI(api_key=config.api_key, base_url=config.base_url)
    return ChatLLM(client, model or config.model)


__all__ = ["ChatModel", "ChatLLM", "make_chat_llm"]
