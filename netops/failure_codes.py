"""Shared reason codes for dropped rows and negative business-hours decisions."""

DROPPED_ZERO = "dropped_zero"
DROPPED_PERIOD = "dropped_period"
DROPPED_NO_PROVENANCE = "dropped_no_provenance"

FILTER_REASONS = [
    DROPPED_ZERO,
    DROPPED_PERIOD,
    DROPPED_NO_PROVENANCE,
]

IMPACT_IN_BUSINESS_HOURS = "within_business_hours"
IMPACT_NO_TIMESTAMP = "no_timestamp"
IMPACT_UNPARSEABLE_TIMESTAMP = "unparseable_timestamp"
IMPACT_DATE_ONLY = "date_only_timestamp"
IMPACT_TIMEZONE_UNRESOLVED = "timezone_unresolved"
IMPACT_UNKNOWN_TIMEZONE = "unknown_timezone"
IMPACT_WEEKEND = "weekend"
IMPACT_OUTSIDE_WINDOW = "outside_business_hours"

# Reasons that mean "we could not tell", as opposed to a real off-hours event.
INDETERMINATE_IMPACT_REASONS = [
    IMPACT_NO_TIMESTAMP,
    IMPACT_UNPARSEABLE_TIMESTAMP,
    IMPACT_DATE_ONLY,
    IMPACT_TIMEZONE_UNRESOLVED,
    IMPACT_UNKNOWN_TIMEZONE,
]
