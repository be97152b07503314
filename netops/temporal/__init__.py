"""
netops/temporal package marker.
"""

from netops.temporal.business_hours import (
    DEFAULT_WINDOW,
    BusinessWindow,
    is_business_hours,
    to_local_string,
)
from netops.temporal.policies import BusinessHoursDecision, BusinessHoursPolicy, PeriodBoundPolicy
from netops.temporal.timestamps import (
    NaiveTimestampPolicy,
    ParsedTimestamp,
    TimestampShape,
    parse_report_timestamp,
)

__all__ = [
    "DEFAULT_WINDOW",
    "BusinessHoursDecision",
    "BusinessHoursPolicy",
    "BusinessWindow",
    "NaiveTimestampPolicy",
    "ParsedTimestamp",
    "PeriodBoundPolicy",
    "TimestampShape",
    "is_business_hours",
    "parse_report_timestamp",
    "to_local_string",
]
