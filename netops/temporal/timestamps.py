"""
netops/temporal/timestamps.py

Parsing for the timestamp shapes found in report tables.

Three shapes are recognized:

    ISO instant     2025-08-15T14:30:00Z, 2025-08-15T10:30:00-04:00
    date and time   08/15/2025 10:30
    date only       08/15/2025, 2025-08-15

ISO instants without an offset are read as UTC. `MM/DD/YYYY HH:MM` values carry
no offset at all and are left naive; how a naive value is anchored is decided by
`NaiveTimestampPolicy` at the point of use.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

NOT_AVAILABLE_VALUES = frozenset({"", "n/a", "na", "none", "null", "-", "--", "unknown"})

_DATE_TIME_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
)

_DATE_ONLY_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%Y-%m-%d",
)

_ISO_HINT_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


class TimestampShape(str, Enum):
    ISO_INSTANT = "iso_instant"
    DATE_TIME = "date_time"
    DATE_ONLY = "date_only"


class NaiveTimestampPolicy(str, Enum):
    """
    How to anchor a timestamp that carries no offset.

    SITE_LOCAL reads the wall-clock value in the site's own timezone, which is
    how the report tables print event times. UTC reads it as a UTC instant.
    """

    SITE_LOCAL = "site_local"
    UTC = "utc"


@dataclass(frozen=True)
class ParsedTimestamp:
    """
    A parsed report timestamp and the shape it arrived in.
    """

    value: datetime
    shape: TimestampShape

    @property
    def has_time_of_day(self) -> bool:
        return self.shape is not TimestampShape.DATE_ONLY

    @property
    def is_naive(self) -> bool:
        return self.value.tzinfo is None

    def as_utc(self) -> datetime:
        """
        Return the value as a UTC instant; naive values are read as UTC.
        """

        if self.value.tzinfo is None:
            return self.value.replace(tzinfo=timezone.utc)
        return self.value.astimezone(timezone.utc)

    def in_zone(self, zone: ZoneInfo, naive_policy: NaiveTimestampPolicy) -> datetime:
        """
        Return the value as a wall-clock datetime in `zone`.
        """

        if self.value.tzinfo is None:
            if naive_policy is NaiveTimestampPolicy.SITE_LOCAL:
                return self.value.replace(tzinfo=zone)
            return self.value.replace(tzinfo=timezone.utc).astimezone(zone)
        return self.value.astimezone(zone)


def is_missing_timestamp(value: str | datetime | None) -> bool:
    if value is None:
        return True
    if isinstance(value, datetime):
        return False
    return value.strip().lower() in NOT_AVAILABLE_VALUES


def parse_report_timestamp(value: str | datetime | None) -> ParsedTimestamp | None:
    """
    Parse a timestamp string from a report row.

    Returns None for missing or malformed values; never raises.
    """

    if is_missing_timestamp(value):
        return None

    if isinstance(value, datetime):
        shape = TimestampShape.ISO_INSTANT if value.tzinfo is not None else TimestampShape.DATE_TIME
        return ParsedTimestamp(value=value, shape=shape)

    text = " ".join(value.split())

    if _ISO_HINT_RE.match(text):
        parsed_iso = _parse_iso_instant(text)
        if parsed_iso is not None:
            return ParsedTimestamp(value=parsed_iso, shape=TimestampShape.ISO_INSTANT)

    for fmt in _DATE_TIME_FORMATS:
        try:
            return ParsedTimestamp(value=datetime.strptime(text, fmt), shape=TimestampShape.DATE_TIME)
        except ValueError:
            continue

    for fmt in _DATE_ONLY_FORMATS:
        try:
            return ParsedTimestamp(value=datetime.strptime(text, fmt), shape=TimestampShape.DATE_ONLY)
        except ValueError:
            continue

    logger.debug("Unparseable report timestamp value=%r", value)
    return None


def _parse_iso_instant(text: str) -> datetime | None:
    normalized = text[:-1] + "+00:00" if text.endswith("Z") else text
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed
