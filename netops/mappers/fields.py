"""
netops/mappers/fields.py

Field normalization from loosely named row values to CanonicalRow.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from netops.domain.report import (
    DEFAULT_TREND,
    UNKNOWN_DEVICE,
    UNKNOWN_ERROR_TYPE,
    UNKNOWN_INTERFACE,
    UNKNOWN_SITE,
    CanonicalRow,
    Provenance,
)
from netops.temporal.timestamps import is_missing_timestamp

CANONICAL_FIELDS: tuple[str, ...] = (
    "site",
    "device",
    "interface",
    "occurrences",
    "last_occurred",
    "trend",
    "avg_duration",
    "error_type",
    "impacted_clients",
)

METRIC_FIELDS: tuple[str, ...] = (
    "errors",
    "error_rate",
    "in_avg_error",
    "in_max_error",
    "out_avg_error",
    "out_max_error",
    "unreachable_count",
    "total",
    "availability",
    "up_avg",
    "down_avg",
    "clients_week1",
    "clients_week2",
    "clients_week3",
    "clients_week4",
)

ATTRIBUTE_FIELDS: tuple[str, ...] = (
    "device_type",
    "tunnel_name",
    "incident_id",
    "info",
    "status",
    "sla",
)

DEFAULT_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "site": ("site name", "location", "site_name"),
    "device": ("device name", "hostname", "host", "ap", "access point"),
    "interface": ("port", "port name", "if", "interface name"),
    "occurrences": ("occurrence", "count", "events", "times"),
    "last_occurred": ("last occurrence", "last seen", "timestamp", "date", "time"),
    "trend": ("change", "delta"),
    "avg_duration": ("avg duration", "average duration", "duration", "avg duration min"),
    "error_type": ("error", "type", "issue", "error category"),
    "impacted_clients": ("impacted clients", "clients impacted", "affected clients", "clients"),
    "errors": ("error count", "errors total"),
    "error_rate": ("error %", "error percent", "error rate"),
    "unreachable_count": ("unreachable", "unreachable count"),
    "total": ("total errors",),
    "availability": ("availability %", "uptime"),
    "up_avg": ("up avg", "upload avg"),
    "down_avg": ("down avg", "download avg"),
    "clients_week1": ("clients week1", "week1", "week 1"),
    "clients_week2": ("clients week2", "week2", "week 2"),
    "clients_week3": ("clients week3", "week3", "week 3"),
    "clients_week4": ("clients week4", "week4", "week 4"),
    "in_avg_max": ("in avg max", "in (avg/max)", "in"),
    "out_avg_max": ("out avg max", "out (avg/max)", "out"),
    "device_type": ("type of device",),
    "tunnel_name": ("tunnel", "tunnel name"),
    "incident_id": ("incident", "incident id", "ticket"),
    "info": ("details", "description"),
    "sla": ("sla profile",),
}

_INT_RE = re.compile(r"-?\d[\d,]*")
_FLOAT_RE = re.compile(r"-?\d[\d,]*(?:\.\d+)?|-?\.\d+")
_TREND_RE = re.compile(r"([+-]?)\s*(\d+(?:\.\d+)?)\s*%")
_DURATION_RE = re.compile(
    r"(\d+(?:\.\d+)?)\s*(h(?:ours?|rs?)?|m(?:in(?:ute)?s?)?\.?|s(?:ec(?:ond)?s?)?)?\b",
    re.IGNORECASE,
)
_PAIR_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%?\s*/\s*(\d+(?:\.\d+)?)")


def normalize_header(header: str) -> str:
    """
    Normalize a column name for flexible matching.
    """

    return "".join(ch for ch in header.strip().lower() if ch.isalnum())


def _build_alias_lookup(aliases: Mapping[str, Sequence[str]]) -> dict[str, str]:
    lookup: dict[str, str] = {}
    for canonical, values in aliases.items():
        lookup.setdefault(normalize_header(canonical), canonical)
        for value in values:
            lookup.setdefault(normalize_header(value), canonical)
    return lookup


_ALIAS_LOOKUP = _build_alias_lookup(DEFAULT_FIELD_ALIASES)


def canonical_field_for(header: str) -> str:
    """
    Return the canonical field name for a column header.

    Unknown headers come back normalized so they can still be kept as
    attributes.
    """

    normalized = normalize_header(header)
    return _ALIAS_LOOKUP.get(normalized, normalized)


def parse_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return int(value)
    match = _INT_RE.search(str(value))
    if not match:
        return default
    try:
        return int(match.group(0).replace(",", ""))
    except ValueError:
        return default


def parse_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = _FLOAT_RE.search(str(value))
    if not match:
        return default
    try:
        return float(match.group(0).replace(",", ""))
    except ValueError:
        return default


def parse_duration_minutes(value: Any, default: float = 0.0) -> float:
    """
    Parse a duration into float minutes ("12.3 min", "1.5 h", "90 s", "40.1").
    """

    if value is None:
        return default
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    match = _DURATION_RE.search(str(value))
    if not match:
        return default
    amount = float(match.group(1))
    unit = (match.group(2) or "m").lower()
    if unit.startswith("h"):
        return amount * 60.0
    if unit.startswith("s"):
        return amount / 60.0
    return amount


def parse_trend(value: Any) -> str:
    """
    Normalize a trend percentage, keeping its sign ("+12%", "-24%", "50%").
    """

    if value is None:
        return DEFAULT_TREND
    match = _TREND_RE.search(str(value))
    if not match:
        return DEFAULT_TREND
    sign, amount = match.groups()
    return f"{sign}{amount}%"


def trend_value(trend: str) -> float:
    match = _TREND_RE.search(trend or "")
    if not match:
        return 0.0
    sign, amount = match.groups()
    number = float(amount)
    return -number if sign == "-" else number


def parse_pair(value: Any) -> tuple[float, float] | None:
    """
    Parse an "avg / max" pair such as "0.5 / 2.1" or "17% / 24".
    """

    if value is None:
        return None
    match = _PAIR_RE.search(str(value))
    if not match:
        return None
    return float(match.group(1)), float(match.group(2))


def split_weekly_counts(value: str) -> list[int]:
    """
    Split weekly client counts. Whitespace- or comma-separated values are used
    as given; a single run of digits whose length divides into four equal
    groups is read as four concatenated weekly counts.
    """

    tokens = [token for token in re.split(r"[\s,]+", value.strip()) if token]
    if len(tokens) > 1:
        return [parse_int(token) for token in tokens]
    digits = tokens[0] if tokens else ""
    if len(digits) >= 8 and len(digits) % 4 == 0 and digits.isdigit():
        width = len(digits) // 4
        return [int(digits[i : i + width]) for i in range(0, len(digits), width)]
    return [parse_int(digits)] if digits else []


def _clean_text(value: Any, default: str) -> str:
    if value is None:
        return default
    text = " ".join(str(value).split()).strip(" -|")
    return text or default


def build_canonical_row(fields: Mapping[str, Any], provenance: Provenance | None) -> CanonicalRow:
    """
    Build a CanonicalRow from canonical field names, filling sentinels.

    Occurrence counts fall back to `unreachable_count` or `total`, then to 0.
    Impacted clients fall back to the weekly peak.
    """

    metrics: dict[str, float] = {}
    for name in METRIC_FIELDS:
        if fields.get(name) not in (None, ""):
            metrics[name] = parse_float(fields[name])

    for pair_field, prefix in (("in_avg_max", "in"), ("out_avg_max", "out")):
        pair = parse_pair(fields.get(pair_field))
        if pair is not None:
            metrics[f"{prefix}_avg_error"], metrics[f"{prefix}_max_error"] = pair

    weekly = fields.get("clients_weekly")
    if weekly:
        for week, count in enumerate(weekly[:4], start=1):
            metrics[f"clients_week{week}"] = float(count)
    weekly_peak = max(
        (metrics.get(f"clients_week{week}", 0.0) for week in range(1, 5)),
        default=0.0,
    )

    occurrences_raw = fields.get("occurrences")
    if occurrences_raw in (None, ""):
        occurrences_raw = fields.get("unreachable_count")
    if occurrences_raw in (None, ""):
        occurrences_raw = fields.get("total")

    impacted_raw = fields.get("impacted_clients")
    impacted_clients = parse_int(impacted_raw) if impacted_raw not in (None, "") else int(weekly_peak)

    last_occurred = fields.get("last_occurred")
    if last_occurred is not None and is_missing_timestamp(str(last_occurred)):
        last_occurred = None

    attributes = {
        name: _clean_text(fields[name], "")
        for name in ATTRIBUTE_FIELDS
        if fields.get(name) not in (None, "")
    }

    return CanonicalRow(
        site=_clean_text(fields.get("site"), UNKNOWN_SITE),
        device=_clean_text(fields.get("device"), UNKNOWN_DEVICE),
        interface=_clean_text(fields.get("interface"), UNKNOWN_INTERFACE),
        occurrences=max(0, parse_int(occurrences_raw)),
        last_occurred=" ".join(str(last_occurred).split()) if last_occurred else None,
        trend=parse_trend(fields.get("trend")),
        avg_duration=parse_duration_minutes(fields.get("avg_duration")),
        error_type=_clean_text(fields.get("error_type"), UNKNOWN_ERROR_TYPE),
        impacted_clients=max(0, impacted_clients),
        provenance=provenance,
        metrics=metrics,
        attributes=attributes,
    )
