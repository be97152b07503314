"""
netops/temporal/policies.py

The two temporal policies applied to findings.

PeriodBoundPolicy fails open: a row whose timestamp is missing or cannot be
parsed is kept, and only a parseable timestamp that falls outside the reporting
window rejects it.

BusinessHoursPolicy fails closed: any missing input (timestamp, time of day,
timezone) yields NO, with the reason recorded.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from netops import failure_codes
from netops.domain.report import BusinessHoursImpact, TimeWindow
from netops.temporal.business_hours import DEFAULT_WINDOW, LOCAL_TIME_FORMAT, BusinessWindow, get_zone
from netops.temporal.timestamps import NaiveTimestampPolicy, is_missing_timestamp, parse_report_timestamp


@dataclass(frozen=True)
class PeriodBoundPolicy:
    """
    Reporting-period bound check. Naive timestamps are compared as UTC.
    """

    def is_out_of_bounds(self, last_occurred: str | None, window: TimeWindow | None) -> bool:
        if window is None:
            return False
        parsed = parse_report_timestamp(last_occurred)
        if parsed is None:
            return False
        return not window.contains(parsed.as_utc())

    def admits(self, last_occurred: str | None, window: TimeWindow | None) -> bool:
        return not self.is_out_of_bounds(last_occurred, window)


@dataclass(frozen=True)
class BusinessHoursDecision:
    impact: BusinessHoursImpact
    reason: str
    local_time: str | None = None


@dataclass(frozen=True)
class BusinessHoursPolicy:
    """
    Business-hours classification for one finding.
    """

    window: BusinessWindow = field(default=DEFAULT_WINDOW)
    naive_policy: NaiveTimestampPolicy = NaiveTimestampPolicy.SITE_LOCAL

    def classify(self, last_occurred: str | None, timezone_name: str | None) -> BusinessHoursDecision:
        if is_missing_timestamp(last_occurred):
            return BusinessHoursDecision(BusinessHoursImpact.NO, failure_codes.IMPACT_NO_TIMESTAMP)

        parsed = parse_report_timestamp(last_occurred)
        if parsed is None:
            return BusinessHoursDecision(BusinessHoursImpact.NO, failure_codes.IMPACT_UNPARSEABLE_TIMESTAMP)
        if not parsed.has_time_of_day:
            return BusinessHoursDecision(BusinessHoursImpact.NO, failure_codes.IMPACT_DATE_ONLY)
        if not timezone_name:
            return BusinessHoursDecision(BusinessHoursImpact.NO, failure_codes.IMPACT_TIMEZONE_UNRESOLVED)

        zone = get_zone(timezone_name)
        if zone is None:
            return BusinessHoursDecision(BusinessHoursImpact.NO, failure_codes.IMPACT_UNKNOWN_TIMEZONE)

        local = parsed.in_zone(zone, self.naive_policy)
        local_time = local.strftime(LOCAL_TIME_FORMAT)
        if local.weekday() >= 5:
            return BusinessHoursDecision(BusinessHoursImpact.NO, failure_codes.IMPACT_WEEKEND, local_time)
        if not self.window.contains(local):
            return BusinessHoursDecision(BusinessHoursImpact.NO, failure_codes.IMPACT_OUTSIDE_WINDOW, local_time)
        return BusinessHoursDecision(BusinessHoursImpact.YES, failure_codes.IMPACT_IN_BUSINESS_HOURS, local_time)
