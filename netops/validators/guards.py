"""
netops/validators/guards.py

Validation guards applied to mapped categories.

Rules run in a fixed order and the first rule that rejects a row names the
drop reason:

    1. non-zero requirement    (per category family)     -> dropped_zero
    2. reporting-period bound  (PeriodBoundPolicy)        -> dropped_period
    3. provenance requirement                            -> dropped_no_provenance

`apply_filters` is pure: inputs are never mutated, and running it again on
its own output drops nothing further.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from netops import failure_codes
from netops.domain.diagnostics import FilterCounts
from netops.domain.report import Category, CanonicalRow, CategoryKind, TimeWindow
from netops.logging_utils import log_event
from netops.mappers.fields import trend_value
from netops.temporal.policies import PeriodBoundPolicy

logger = logging.getLogger(__name__)

_PERIOD_POLICY = PeriodBoundPolicy()


@dataclass(frozen=True)
class FilterResult:
    categories: tuple[Category, ...]
    counts: FilterCounts


def _has_occurrences(row: CanonicalRow) -> bool:
    return row.occurrences > 0


def _has_port_errors(row: CanonicalRow) -> bool:
    names = ("errors", "error_rate", "in_avg_error", "in_max_error", "out_avg_error", "out_max_error")
    return any(row.metric(name) > 0 for name in names) or row.occurrences > 0


def _has_wifi_impact(row: CanonicalRow) -> bool:
    return row.occurrences > 0 or row.impacted_clients > 0 or row.metric("total") > 0


def _has_client_counts(row: CanonicalRow) -> bool:
    weekly = any(row.metric(f"clients_week{week}") > 0 for week in range(1, 5))
    return weekly or row.impacted_clients > 0 or trend_value(row.trend) != 0


def _has_wan_activity(row: CanonicalRow) -> bool:
    return (
        row.metric("up_avg") > 0
        or row.metric("down_avg") > 0
        or trend_value(row.trend) != 0
        or row.occurrences > 0
    )


def _has_any_value(row: CanonicalRow) -> bool:
    return (
        row.occurrences > 0
        or row.impacted_clients > 0
        or row.avg_duration > 0
        or trend_value(row.trend) != 0
        or any(value > 0 for value in row.metrics.values())
    )


NON_ZERO_RULES: dict[CategoryKind, Callable[[CanonicalRow], bool]] = {
    CategoryKind.SITE_UNREACHABLE: _has_occurrences,
    CategoryKind.DEVICE_AVAILABILITY: _has_occurrences,
    CategoryKind.VPN_TUNNEL_DOWN: _has_occurrences,
    CategoryKind.INTERFACE_DOWN: _has_occurrences,
    CategoryKind.SERVICE_PERFORMANCE: _has_occurrences,
    CategoryKind.NETWORK_UTILIZATION: _has_occurrences,
    CategoryKind.SLA_PROFILES: _has_any_value,
    CategoryKind.WIFI_ISSUES: _has_wifi_impact,
    CategoryKind.PORT_ERRORS: _has_port_errors,
    CategoryKind.CONNECTED_CLIENTS: _has_client_counts,
    CategoryKind.WAN_UTILIZATION: _has_wan_activity,
    CategoryKind.GENERIC: _has_any_value,
}


def has_required_values(kind: CategoryKind, row: CanonicalRow) -> bool:
    rule = NON_ZERO_RULES.get(kind, _has_any_value)
    return rule(row)


def rejection_reason(
    kind: CategoryKind,
    row: CanonicalRow,
    time_window: TimeWindow | None,
    *,
    filter_zero: bool = True,
    enforce_period: bool = True,
    require_provenance: bool = True,
) -> str | None:
    """
    Return the first failing rule's reason code, or None when the row is kept.
    """

    if filter_zero and not has_required_values(kind, row):
        return failure_codes.DROPPED_ZERO
    if enforce_period and _PERIOD_POLICY.is_out_of_bounds(row.last_occurred, time_window):
        return failure_codes.DROPPED_PERIOD
    if require_provenance and (row.provenance is None or not row.provenance.has_snippet):
        return failure_codes.DROPPED_NO_PROVENANCE
    return None


def apply_filters(
    categories: Sequence[Category],
    time_window: TimeWindow | None,
    *,
    filter_zero: bool = True,
    enforce_period: bool = True,
    require_provenance: bool = True,
) -> FilterResult:
    """
    Drop rows that fail a guard and report counts per reason.

    Categories left without findings are removed. `total_findings_count` of a
    surviving category is recomputed as its kept row count.
    """

    dropped = {reason: 0 for reason in failure_codes.FILTER_REASONS}
    kept_total = 0
    kept_categories: list[Category] = []

    for category in categories:
        kept_rows: list[CanonicalRow] = []
        for row in category.findings:
            reason = rejection_reason(
                category.kind,
                row,
                time_window,
                filter_zero=filter_zero,
                enforce_period=enforce_period,
                require_provenance=require_provenance,
            )
            if reason is None:
                kept_rows.append(row)
                continue
            dropped[reason] += 1
            logger.debug(
                "Row dropped category=%s reason=%s provenance=%s",
                category.category_name,
                reason,
                row.provenance_key,
            )

        kept_total += len(kept_rows)
        if kept_rows:
            kept_categories.append(
                Category.from_rows(
                    category_name=category.category_name,
                    rows=kept_rows,
                    kind=category.kind,
                )
            )

    counts = FilterCounts(
        kept=kept_total,
        dropped_zero=dropped[failure_codes.DROPPED_ZERO],
        dropped_period=dropped[failure_codes.DROPPED_PERIOD],
        dropped_no_provenance=dropped[failure_codes.DROPPED_NO_PROVENANCE],
    )
    log_event(logger, logging.INFO, "filters_applied", **counts.to_dict())
    return FilterResult(categories=tuple(kept_categories), counts=counts)
