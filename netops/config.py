"""
netops/config.py

Environment-driven configuration helpers for the findings pipeline.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

_ALLOWED_DETECTION_MODES = {"flexible", "strict"}
_ALLOWED_NAIVE_TIMESTAMP_MODES = {"site_local", "utc"}


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_choice_env(name: str, default: str, allowed: set[str]) -> str:
    value = _get_str_env(name, default).lower()
    return value if value in allowed else default


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for external connectors.
    """

    timeout_seconds: float = 10.0
    max_retries: int = 3
    backoff_initial_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 5.0
    burst_reservoir: int = 20


@dataclass(frozen=True)
class AirportLookupSettings:
    """
    Airport code lookup service settings.
    """

    enabled: bool = True
    api_key: str | None = None
    base_url: str = "https://api.api-ninjas.com/v1"
    dataset_url: str = "https://ourairports.com/data/airports.csv"


@dataclass(frozen=True)
class ParserSettings:
    """
    Runtime settings for table detection, filtering and classification.
    """

    detection_mode: str = "flexible"
    header_window_lines: int = 12
    top_n: int = 3
    require_provenance: bool = True
    filter_zero: bool = True
    enforce_period: bool = True
    naive_timestamps: str = "site_local"
    business_hours_start: int = 9
    business_hours_end: int = 18


@dataclass(frozen=True)
class NarrativeSettings:
    """
    Narrative generation collaborator settings.
    """

    adapter: str = "openai"
    model: str = "gpt-4o"
    max_tokens: int = 2048
    api_key: str | None = None
    base_url: str | None = None
    max_chunk_chars: int = 12000
    max_retries: int = 2


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return shared connector HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(1.0, _get_float_env("EXTERNAL_HTTP_TIMEOUT_SECONDS", 10.0)),
        max_retries=max(0, _get_int_env("EXTERNAL_HTTP_MAX_RETRIES", 3)),
        backoff_initial_seconds=max(0.1, _get_float_env("EXTERNAL_HTTP_BACKOFF_INITIAL_SECONDS", 1.0)),
        backoff_multiplier=max(1.0, _get_float_env("EXTERNAL_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.1, _get_float_env("IATA_RATE_LIMIT_PER_SEC", 5.0)),
        burst_reservoir=max(1, _get_int_env("IATA_RATE_LIMIT_RESERVOIR", 20)),
    )


@lru_cache(maxsize=1)
def get_airport_lookup_settings() -> AirportLookupSettings:
    """
    Return airport lookup settings from environment variables.
    """

    return AirportLookupSettings(
        enabled=_get_bool_env("AIRPORT_LOOKUP_ENABLED", True),
        api_key=_get_optional_str_env("API_NINJAS_KEY"),
        base_url=_get_str_env("API_NINJAS_BASE", "https://api.api-ninjas.com/v1"),
        dataset_url=_get_str_env("OUR_AIRPORTS_URL", "https://ourairports.com/data/airports.csv"),
    )


@lru_cache(maxsize=1)
def get_parser_settings() -> ParserSettings:
    """
    Return parser settings from environment variables.
    """

    start = min(23, max(0, _get_int_env("BUSINESS_HOURS_START", 9)))
    end = min(24, max(start + 1, _get_int_env("BUSINESS_HOURS_END", 18)))
    return ParserSettings(
        detection_mode=_get_choice_env("PARSER_DETECTION_MODE", "flexible", _ALLOWED_DETECTION_MODES),
        header_window_lines=max(1, _get_int_env("PARSER_HEADER_WINDOW_LINES", 12)),
        top_n=max(1, _get_int_env("PARSER_TOP_N", 3)),
        require_provenance=_get_bool_env("PARSER_REQUIRE_PROVENANCE", True),
        filter_zero=_get_bool_env("PARSER_FILTER_ZERO", True),
        enforce_period=_get_bool_env("PARSER_ENFORCE_PERIOD", True),
        naive_timestamps=_get_choice_env(
            "PARSER_NAIVE_TIMESTAMPS", "site_local", _ALLOWED_NAIVE_TIMESTAMP_MODES
        ),
        business_hours_start=start,
        business_hours_end=end,
    )


@lru_cache(maxsize=1)
def get_narrative_settings() -> NarrativeSettings:
    """
    Return narrative collaborator settings from environment variables.
    """

    return NarrativeSettings(
        adapter=_get_str_env("LLM_ADAPTER", "openai").lower(),
        model=_get_str_env("LLM_MODEL", "gpt-4o"),
        max_tokens=max(1, _get_int_env("LLM_MAX_TOKENS", 2048)),
        api_key=_get_optional_str_env("LLM_API_KEY") or _get_optional_str_env("OPENAI_API_KEY"),
        base_url=_get_optional_str_env("LLM_BASE_URL"),
        max_chunk_chars=max(500, _get_int_env("NARRATIVE_MAX_CHUNK_CHARS", 12000)),
        max_retries=max(0, _get_int_env("NARRATIVE_MAX_RETRIES", 2)),
    )
