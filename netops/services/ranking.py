"""
netops/services/ranking.py

Severity policy and category ordering.

Default severity rules
----------------------
Site Unreachable, Device Availability, VPN Tunnel Down   -> major
more than 5 occurrences                                   -> major
otherwise                                                 -> minor
top error-count device in Port Errors / Wi-Fi Issues      -> promoted to major

The policy is an object so callers can swap the rules without touching the
aggregator.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Sequence

from netops.domain.report import Category, CanonicalRow, CategoryKind, Severity

logger = logging.getLogger(__name__)

MAJOR_OCCURRENCE_THRESHOLD = 5

ALWAYS_MAJOR_KINDS = frozenset(
    {
        CategoryKind.SITE_UNREACHABLE,
        CategoryKind.DEVICE_AVAILABILITY,
        CategoryKind.VPN_TUNNEL_DOWN,
    }
)

ERROR_COUNT_KINDS = frozenset({CategoryKind.PORT_ERRORS, CategoryKind.WIFI_ISSUES})

CATEGORY_PRIORITY: tuple[CategoryKind, ...] = (
    CategoryKind.SITE_UNREACHABLE,
    CategoryKind.DEVICE_AVAILABILITY,
    CategoryKind.VPN_TUNNEL_DOWN,
    CategoryKind.INTERFACE_DOWN,
    CategoryKind.WIFI_ISSUES,
    CategoryKind.PORT_ERRORS,
    CategoryKind.CONNECTED_CLIENTS,
    CategoryKind.WAN_UTILIZATION,
    CategoryKind.SERVICE_PERFORMANCE,
    CategoryKind.NETWORK_UTILIZATION,
    CategoryKind.SLA_PROFILES,
)


def category_priority(kind: CategoryKind) -> int:
    """
    Position in the fixed priority list; unknown kinds sort last.
    """

    try:
        return CATEGORY_PRIORITY.index(kind)
    except ValueError:
        return len(CATEGORY_PRIORITY)


def error_count(row: CanonicalRow) -> float:
    return max(row.metric("errors"), row.metric("total"), float(row.occurrences))


class SeverityPolicy(ABC):
    """
    Assigns a Severity to every row of a category.
    """

    @abstractmethod
    def assign(self, kind: CategoryKind, rows: Sequence[CanonicalRow]) -> list[CanonicalRow]:
        raise NotImplementedError


class DefaultSeverityPolicy(SeverityPolicy):
    def __init__(self, major_threshold: int = MAJOR_OCCURRENCE_THRESHOLD) -> None:
        self._major_threshold = major_threshold

    def severity_for(self, kind: CategoryKind, row: CanonicalRow) -> Severity:
        if kind in ALWAYS_MAJOR_KINDS:
            return Severity.MAJOR
        if row.occurrences > self._major_threshold:
            return Severity.MAJOR
        return Severity.MINOR

    def assign(self, kind: CategoryKind, rows: Sequence[CanonicalRow]) -> list[CanonicalRow]:
        assigned = [replace(row, severity=self.severity_for(kind, row)) for row in rows]
        if kind in ERROR_COUNT_KINDS and assigned:
            top_index = max(range(len(assigned)), key=lambda index: error_count(assigned[index]))
            if error_count(assigned[top_index]) > 0:
                assigned[top_index] = replace(assigned[top_index], severity=Severity.MAJOR)
        return assigned


def severity_rank(row: CanonicalRow) -> int:
    return row.severity.rank if row.severity is not None else 0


@dataclass(frozen=True)
class RankedFinding:
    """
    One finding in the cross-category ranking.
    """

    category_name: str
    row: CanonicalRow
    score: float


def finding_score(row: CanonicalRow) -> float:
    peak_clients = max((row.metric(f"clients_week{week}") for week in range(1, 5)), default=0.0)
    return float(row.occurrences) + row.metric("errors") + peak_clients / 500.0


def rank_top_across_all(categories: Sequence[Category], limit: int = 3) -> list[RankedFinding]:
    """
    Top findings across every category by score, highest first.

    Ties keep category priority order, then row order within the category.
    """

    ranked = [
        RankedFinding(category_name=category.category_name, row=row, score=finding_score(row))
        for category in sorted(categories, key=lambda item: category_priority(item.kind))
        for row in category.findings
    ]
    ranked.sort(key=lambda item: item.score, reverse=True)
    return ranked[: max(0, limit)]
