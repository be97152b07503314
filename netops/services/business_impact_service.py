"""
netops/services/business_impact_service.py

Business-hours impact classification and breakdowns.

Every finding is resolved to a site timezone (site label first, then the
device label) and classified by BusinessHoursPolicy. Unresolved sites keep
their row with impact NO and a recorded reason.

Breakdown percentages are computed over findings whose timestamp parses, so
rows without one (or with an unreadable one) do not dilute the share of
business-hours events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Sequence

from netops.domain.report import (
    UNKNOWN_DEVICE,
    UNKNOWN_SITE,
    BusinessHoursImpact,
    Category,
    CanonicalRow,
    SiteLocation,
)
from netops.logging_utils import log_event
from netops.resolvers.site_resolver import SiteTimezoneResolver
from netops.temporal.policies import BusinessHoursPolicy
from netops.temporal.timestamps import parse_report_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImpactBreakdown:
    """
    Business-hours share for one grouping key (category, site, city or airport).
    """

    key: str
    total_events: int
    timestamped_events: int
    business_hours_events: int

    @property
    def percentage(self) -> int:
        if self.timestamped_events == 0:
            return 0
        return round(self.business_hours_events / self.timestamped_events * 100)


@dataclass(frozen=True)
class ImpactSummary:
    by_category: tuple[ImpactBreakdown, ...]
    by_site: tuple[ImpactBreakdown, ...]
    by_city: tuple[ImpactBreakdown, ...]
    by_airport: tuple[ImpactBreakdown, ...]
    unresolved_sites: tuple[str, ...]

    @property
    def business_hours_events(self) -> int:
        return sum(item.business_hours_events for item in self.by_category)

    @property
    def total_events(self) -> int:
        return sum(item.total_events for item in self.by_category)


class _Tally:
    def __init__(self) -> None:
        self._order: list[str] = []
        self._counts: dict[str, list[int]] = {}

    def add(self, key: str, row: CanonicalRow) -> None:
        if key not in self._counts:
            self._order.append(key)
            self._counts[key] = [0, 0, 0]
        counts = self._counts[key]
        counts[0] += 1
        if parse_report_timestamp(row.last_occurred) is not None:
            counts[1] += 1
        if row.business_hours_impact is BusinessHoursImpact.YES:
            counts[2] += 1

    def build(self) -> tuple[ImpactBreakdown, ...]:
        return tuple(
            ImpactBreakdown(
                key=key,
                total_events=self._counts[key][0],
                timestamped_events=self._counts[key][1],
                business_hours_events=self._counts[key][2],
            )
            for key in self._order
        )


class BusinessImpactClassifier:
    """
    Attaches timezone, local time and business-hours impact to findings.
    """

    def __init__(
        self,
        resolver: SiteTimezoneResolver,
        policy: BusinessHoursPolicy | None = None,
    ) -> None:
        self._resolver = resolver
        self._policy = policy or BusinessHoursPolicy()

    def resolve_location(self, row: CanonicalRow) -> SiteLocation | None:
        for label in (row.site, row.device):
            if not label or label in (UNKNOWN_SITE, UNKNOWN_DEVICE):
                continue
            location = self._resolver.resolve(label)
            if location is not None:
                return location
        return None

    def classify_row(self, row: CanonicalRow) -> CanonicalRow:
        location = self.resolve_location(row)
        decision = self._policy.classify(row.last_occurred, location.timezone if location else None)
        return replace(
            row,
            business_hours_impact=decision.impact,
            impact_reason=decision.reason,
            local_time=decision.local_time,
            timezone=location.timezone if location else None,
            site_location=location,
        )

    def classify(self, categories: Sequence[Category]) -> list[Category]:
        classified: list[Category] = []
        flagged = 0
        unresolved = 0
        for category in categories:
            rows = tuple(self.classify_row(row) for row in category.findings)
            flagged += sum(1 for row in rows if row.business_hours_impact is BusinessHoursImpact.YES)
            unresolved += sum(1 for row in rows if row.site_location is None)
            classified.append(replace(category, findings=rows))

        log_event(
            logger,
            logging.INFO,
            "business_impact_classified",
            findings=sum(len(category.findings) for category in classified),
            business_hours=flagged,
            unresolved=unresolved,
        )
        return classified

    @staticmethod
    def summarize(categories: Sequence[Category]) -> ImpactSummary:
        """
        Group already-classified findings by category, site, city and airport.
        """

        by_category = _Tally()
        by_site = _Tally()
        by_city = _Tally()
        by_airport = _Tally()
        unresolved: list[str] = []

        for category in categories:
            for row in category.findings:
                by_category.add(category.category_name, row)
                by_site.add(row.site, row)
                location = row.site_location
                if location is None:
                    if row.site not in unresolved:
                        unresolved.append(row.site)
                    continue
                if location.city:
                    by_city.add(location.city, row)
                if location.source == "airport":
                    by_airport.add(location.identifier, row)

        return ImpactSummary(
            by_category=by_category.build(),
            by_site=by_site.build(),
            by_city=by_city.build(),
            by_airport=by_airport.build(),
            unresolved_sites=tuple(unresolved),
        )
