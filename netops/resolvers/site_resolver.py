"""
netops/resolvers/site_resolver.py

Site label to timezone resolution across the city and airport strategies.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from netops.domain.report import SiteLocation
from netops.resolvers.airport_resolver import AirportTimezoneResolver
from netops.resolvers.city_matcher import CityMatcher

logger = logging.getLogger(__name__)


class ResolutionStrategy(str, Enum):
    CITY = "city"
    AIRPORT = "airport"


DEFAULT_STRATEGY_ORDER: tuple[ResolutionStrategy, ...] = (
    ResolutionStrategy.CITY,
    ResolutionStrategy.AIRPORT,
)


class SiteTimezoneResolver:
    """
    Tries each strategy in order and returns the first hit.

    Strategy results are never merged: a city match is returned as-is even
    when the label also carries an airport code.
    """

    def __init__(
        self,
        *,
        city_matcher: CityMatcher,
        airport_resolver: AirportTimezoneResolver | None = None,
        strategy_order: Sequence[ResolutionStrategy] = DEFAULT_STRATEGY_ORDER,
    ) -> None:
        self._city_matcher = city_matcher
        self._airport_resolver = airport_resolver
        self._strategy_order = tuple(strategy_order)

    @property
    def strategy_order(self) -> tuple[ResolutionStrategy, ...]:
        return self._strategy_order

    def with_strategy_order(self, strategy_order: Sequence[ResolutionStrategy]) -> SiteTimezoneResolver:
        return SiteTimezoneResolver(
            city_matcher=self._city_matcher,
            airport_resolver=self._airport_resolver,
            strategy_order=strategy_order,
        )

    def resolve(self, site_label: str | None) -> SiteLocation | None:
        if not site_label or not site_label.strip():
            return None
        for strategy in self._strategy_order:
            location = self._resolve_with(strategy, site_label)
            if location is not None:
                return location
        logger.debug("Site timezone unresolved site=%r", site_label)
        return None

    def _resolve_with(self, strategy: ResolutionStrategy, site_label: str) -> SiteLocation | None:
        if strategy is ResolutionStrategy.CITY:
            matched = self._city_matcher.match(site_label)
            if matched is None:
                return None
            return SiteLocation(
                identifier=matched.city,
                timezone=matched.timezone,
                source=ResolutionStrategy.CITY.value,
                city=matched.city.title(),
            )
        if self._airport_resolver is None:
            return None
        return self._airport_resolver.resolve(site_label)
