"""
netops/temporal/business_hours.py

Local business-hours membership for report timestamps.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from netops.temporal.timestamps import NaiveTimestampPolicy, ParsedTimestamp, parse_report_timestamp

logger = logging.getLogger(__name__)

LOCAL_TIME_FORMAT = "%Y-%m-%d %H:%M:%S %Z"


@dataclass(frozen=True)
class BusinessWindow:
    """
    Weekday working window in local hours, `[start, end)`.
    """

    start: int = 9
    end: int = 18

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end <= 24:
            raise ValueError(f"Invalid business window start={self.start} end={self.end}.")

    def contains(self, local: datetime) -> bool:
        if local.weekday() >= 5:
            return False
        hour_float = local.hour + local.minute / 60
        return self.start <= hour_float < self.end


DEFAULT_WINDOW = BusinessWindow()


@lru_cache(maxsize=256)
def get_zone(timezone_name: str | None) -> ZoneInfo | None:
    """
    Return the IANA zone for a name, or None if it is empty or unknown.
    """

    if not timezone_name:
        return None
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown IANA timezone name=%r", timezone_name)
        return None


def _coerce(timestamp: str | datetime | ParsedTimestamp | None) -> ParsedTimestamp | None:
    if isinstance(timestamp, ParsedTimestamp):
        return timestamp
    return parse_report_timestamp(timestamp)


def to_local_datetime(
    timestamp: str | datetime | ParsedTimestamp | None,
    timezone_name: str | None,
    *,
    naive_policy: NaiveTimestampPolicy = NaiveTimestampPolicy.SITE_LOCAL,
) -> datetime | None:
    """
    Convert a timestamp to wall-clock time in `timezone_name`.

    Date-only values have no time of day and return None.
    """

    parsed = _coerce(timestamp)
    if parsed is None or not parsed.has_time_of_day:
        return None
    zone = get_zone(timezone_name)
    if zone is None:
        return None
    return parsed.in_zone(zone, naive_policy)


def is_business_hours(
    timestamp: str | datetime | ParsedTimestamp | None,
    timezone_name: str | None,
    window: BusinessWindow = DEFAULT_WINDOW,
    *,
    naive_policy: NaiveTimestampPolicy = NaiveTimestampPolicy.SITE_LOCAL,
) -> bool:
    """
    Return True only for a weekday local time inside `window`.

    Missing timezone, unknown timezone, date-only or malformed timestamps all
    return False.
    """

    local = to_local_datetime(timestamp, timezone_name, naive_policy=naive_policy)
    if local is None:
        return False
    return window.contains(local)


def to_local_string(
    timestamp: str | datetime | ParsedTimestamp | None,
    timezone_name: str | None,
    *,
    naive_policy: NaiveTimestampPolicy = NaiveTimestampPolicy.SITE_LOCAL,
) -> str | None:
    local = to_local_datetime(timestamp, timezone_name, naive_policy=naive_policy)
    if local is None:
        return None
    return local.strftime(LOCAL_TIME_FORMAT)
