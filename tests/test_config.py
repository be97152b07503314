"""
tests/test_config.py

Pytest unit tests for environment settings, structured logging and the
default pipeline factory.
"""

from __future__ import annotations

import json
import logging

import pytest

from netops import config
from netops.domain.report import BusinessHoursImpact
from netops.logging_utils import log_event
from netops.services.pipeline_service import build_default_pipeline

_SETTINGS_ENV = (
    "PARSER_DETECTION_MODE",
    "PARSER_HEADER_WINDOW_LINES",
    "PARSER_TOP_N",
    "PARSER_REQUIRE_PROVENANCE",
    "PARSER_FILTER_ZERO",
    "PARSER_ENFORCE_PERIOD",
    "PARSER_NAIVE_TIMESTAMPS",
    "BUSINESS_HOURS_START",
    "BUSINESS_HOURS_END",
    "EXTERNAL_HTTP_TIMEOUT_SECONDS",
    "EXTERNAL_HTTP_MAX_RETRIES",
    "IATA_RATE_LIMIT_PER_SEC",
    "AIRPORT_LOOKUP_ENABLED",
    "API_NINJAS_KEY",
    "LLM_ADAPTER",
    "LLM_API_KEY",
    "OPENAI_API_KEY",
)


def _clear_caches() -> None:
    config.get_external_http_settings.cache_clear()
    config.get_airport_lookup_settings.cache_clear()
    config.get_parser_settings.cache_clear()
    config.get_narrative_settings.cache_clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    _clear_caches()
    yield
    _clear_caches()


def test_parser_defaults() -> None:
    settings = config.get_parser_settings()

    assert settings.detection_mode == "flexible"
    assert settings.top_n == 3
    assert settings.require_provenance is True
    assert settings.naive_timestamps == "site_local"
    assert (settings.business_hours_start, settings.business_hours_end) == (9, 18)


def test_parser_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARSER_DETECTION_MODE", "STRICT")
    monkeypatch.setenv("PARSER_TOP_N", "5")
    monkeypatch.setenv("PARSER_FILTER_ZERO", "no")
    monkeypatch.setenv("PARSER_NAIVE_TIMESTAMPS", "utc")

    settings = config.get_parser_settings()

    assert settings.detection_mode == "strict"
    assert settings.top_n == 5
    assert settings.filter_zero is False
    assert settings.naive_timestamps == "utc"


def test_invalid_values_fall_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PARSER_DETECTION_MODE", "fuzzy")
    monkeypatch.setenv("PARSER_TOP_N", "three")
    monkeypatch.setenv("BUSINESS_HOURS_START", "10")
    monkeypatch.setenv("BUSINESS_HOURS_END", "5")

    settings = config.get_parser_settings()

    assert settings.detection_mode == "flexible"
    assert settings.top_n == 3
    assert (settings.business_hours_start, settings.business_hours_end) == (10, 11)


def test_http_settings_are_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("EXTERNAL_HTTP_TIMEOUT_SECONDS", "0.2")
    monkeypatch.setenv("EXTERNAL_HTTP_MAX_RETRIES", "-4")
    monkeypatch.setenv("IATA_RATE_LIMIT_PER_SEC", "2")

    settings = config.get_external_http_settings()

    assert settings.timeout_seconds == 1.0
    assert settings.max_retries == 0
    assert settings.rate_limit_per_second == 2.0


def test_narrative_key_falls_back_to_openai_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setenv("LLM_ADAPTER", "Mock")

    settings = config.get_narrative_settings()

    assert settings.api_key == "sk-test"
    assert settings.adapter == "mock"


def test_blank_api_key_is_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_NINJAS_KEY", "   ")

    assert config.get_airport_lookup_settings().api_key is None


def test_log_event_writes_sorted_json(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("netops.test")

    with caplog.at_level(logging.INFO, logger="netops.test"):
        log_event(logger, logging.INFO, "rows_mapped", mapped=3, category="Port Errors")

    record = caplog.records[-1]
    assert json.loads(record.getMessage()) == {"event": "rows_mapped", "mapped": 3, "category": "Port Errors"}
    assert record.getMessage().index('"category"') < record.getMessage().index('"event"')


def test_default_pipeline_without_lookup_key_uses_static_airports() -> None:
    pipeline = build_default_pipeline()

    result = pipeline.run(
        ["Interface down events\nATL-SW1 experienced interface down, 5 occurrences, avg 12.3 min, 08/15/2025 10:30\n"]
    )

    row = result.categories[0].findings[0]
    assert row.timezone == "America/New_York"
    assert row.business_hours_impact is BusinessHoursImpact.YES
