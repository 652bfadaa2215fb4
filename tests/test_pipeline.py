"""
Pytest suite for the Hydro Search Params pipeline.
Covers: request validation, end-to-end runs with a scripted LLM, and error propagation.
Live-model checks are marked `llm`.

Run: pytest tests/test_pipeline.py -v
"""
from __future__ import annotations
from datetime import datetime, timezone

import pytest

from pipeline import main as pipeline_main
from pipeline.config import AppConfig
from pipeline.errors import CatalogUnavailable, InvalidRequest, MalformedModelResponse, UpstreamUnavailable
from pipeline.main import run_search, search, validate_request_string
from pipeline.schema import SearchResult


# =============================================================================
# REQUEST VALIDATION
# =============================================================================

class TestValidateRequestString:

    @pytest.mark.parametrize("value", [None, "", "   ", "None"])
    def test_rejected(self, value):
        with pytest.raises(InvalidRequest):
            validate_request_string(value)

    def test_accepted_unchanged(self):
        assert validate_request_string(" snow over the Alps ") == " snow over the Alps "

    def test_none_inside_text_is_fine(self):
        assert validate_request_string("None of the lakes") == "None of the lakes"


# =============================================================================
# END-TO-END WITH A SCRIPTED MODEL
# =============================================================================

class TestRunSearch:

    def test_lakes_query(self, fake_llm, catalog_text):
        llm = fake_llm(
            "HYDROWEB_LAKES_RESEARCH, SWOT_L2_HR_LAKESP_OBS, SWOT_L2_HR_LAKESP_PRIOR, HYDROWEB_LAKES_OPE",
            '```json\n{"start_datetime":"2023-07-01T00:00:00.000Z","end_datetime":"2023-07-31T23:59:59.000Z"}\n```',
        )
        result = run_search("Lakes water level in July 2023", llm, catalog_text)

        assert "HYDROWEB_LAKES_RESEARCH" in result.collections
        assert "SWOT_PRIOR_LAKE_DATABASE" not in result.collections
        assert result.start_date == datetime(2023, 7, 1, tzinfo=timezone.utc)
        assert result.end_date == datetime(2023, 7, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert result.bounding_box is None

    def test_stages_run_in_order_on_one_client(self, fake_llm, catalog_text):
        llm = fake_llm("LIS_SNT_YEARLY", '{"bbox": [5.0, 43.5, 16.5, 48.5]}')
        run_search("Snow over the Alps", llm, catalog_text)

        assert len(llm.calls) == 2
        assert llm.calls[0][0].endswith(catalog_text)
        assert "bbox" in llm.calls[1][0]
        assert all(user == "Snow over the Alps" for _, user in llm.calls)

    def test_no_matching_collection(self, fake_llm, catalog_text):
        llm = fake_llm("", "{}")
        result = run_search("Water underground reserves", llm, catalog_text)
        assert result == SearchResult(collections=[], start_date=None, end_date=None, bounding_box=None)

    def test_invalid_query_makes_no_call(self, fake_llm, catalog_text):
        llm = fake_llm()
        with pytest.raises(InvalidRequest):
            run_search("None", llm, catalog_text)
        assert llm.calls == []

    def test_malformed_parameters_fail_the_request(self, fake_llm, catalog_text):
        llm = fake_llm("LIS_SNT_YEARLY", "I could not find any location.")
        with pytest.raises(MalformedModelResponse):
            run_search("Snow over the Alps", llm, catalog_text)

    def test_upstream_failure_propagates(self, fake_llm, catalog_text):
        llm = fake_llm(UpstreamUnavailable("quota exceeded"))
        with pytest.raises(UpstreamUnavailable):
            run_search("Snow over the Alps", llm, catalog_text)


class TestSearch:

    def test_builds_client_for_resolved_model(self, monkeypatch, fake_llm, app_config):
        llm = fake_llm("GRAVIMETRY_TOTAL_WATER", '{"bbox": [-6, 49.9, 1.8, 55.8]}')
        seen = {}

        def fake_make_chat_llm(config, model=None):
            seen["config"], seen["model"] = config, model
            return llm

        monkeypatch.setattr(pipeline_main, "make_chat_llm", fake_make_chat_llm)
        result = search("Total water over England", app_config, model="MISTRAL_SMALL_LATEST")

        assert seen == {"config": app_config, "model": "mistral-small-latest"}
        assert result.collections == ["GRAVIMETRY_TOTAL_WATER"]
        assert result.bounding_box == ("-6", "49.9", "1.8", "55.8")

    def test_missing_catalog(self, monkeypatch, tmp_path, fake_llm, app_config):
        monkeypatch.setattr(pipeline_main, "make_chat_llm", lambda config, model=None: fake_llm())
        config = AppConfig(api_key="k", catalog_path=tmp_path / "missing.json")
        with pytest.raises(CatalogUnavailable):
            search("Snow", config)

    def test_unknown_model(self, app_config):
        with pytest.raises(InvalidRequest):
            search("Snow", app_config, model="gpt-9")


# =============================================================================
# LIVE MODEL (FORCE_LLM_TESTS=1)
# =============================================================================

@pytest.mark.llm
class TestLiveModel:

    @pytest.fixture
    def live_config(self):
        from pipeline.config import load_config
        return load_config()

    def test_lakes_include_water_level_exclude_shapes(self, live_config):
        result = search("Lakes water level in July 2023", live_config)
        assert "HYDROWEB_LAKES_RESEARCH" in result.collections
        assert "SWOT_PRIOR_LAKE_DATABASE" not in result.collections

    def test_underground_reserves_is_empty(self, live_config):
        result = search("Water underground reserves", live_config)
        assert result.collections == []
        assert result.bounding_box is None
        assert result.start_date is None and result.end_date is None
