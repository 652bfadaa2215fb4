"""
Pytest configuration for Hydro Search Params tests.
LLM calls are served by a scripted fake unless FORCE_LLM_TESTS=1 is set
for tests marked `llm`.
"""
import os
from pathlib import Path

import pytest

from pipeline.catalog import clear_catalog_cache
from pipeline.config import AppConfig

REPO_ROOT = Path(__file__).resolve().parent.parent
CATALOG_PATH = REPO_ROOT / "data" / "collections.json"


class FakeChatLLM:
    """Returns queued responses in order and records every exchange."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def chat(self, system_instruction, user_message):
        self.calls.append((system_instruction, user_message))
        if not self.responses:
            raise AssertionError("FakeChatLLM ran out of scripted responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "llm: marks tests that require LLM API access")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("FORCE_LLM_TESTS") == "1":
        return
    skip_llm = pytest.mark.skip(reason="set FORCE_LLM_TESTS=1 to run live LLM tests")
    for item in items:
        if "llm" in item.keywords:
            item.add_marker(skip_llm)


@pytest.fixture(autouse=True)
def fresh_catalog_cache():
    clear_catalog_cache()
    yield
    clear_catalog_cache()


@pytest.fixture
def fake_llm():
    return FakeChatLLM


@pytest.fixture
def catalog_text():
    return CATALOG_PATH.read_text(encoding="utf-8")


@pytest.fixture
def app_config():
    return AppConfig(api_key="test-key", catalog_path=CATALOG_PATH)
