"""
netops/resolvers/airport_resolver.py

Airport-code strategy for site timezone resolution.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

from netops.connectors.airport_lookup_connector import AirportLookupConnector
from netops.connectors.base import ConnectorRequestError
from netops.domain.airport import AirportRecord
from netops.domain.report import SiteLocation
from netops.logging_utils import log_event
from netops.resolvers.airport_index import build_fallback_index
from netops.resolvers.cache import AirportCityMap, TimezoneLookupCache

logger = logging.getLogger(__name__)

SFS_SITE_RE = re.compile(r"SFS[-_\s]?([A-Z]{3})\b")
LEADING_CODE_RE = re.compile(r"^([A-Z]{3})(?=$|[-_\s])")


def extract_iata_code(site_label: str | None) -> str | None:
    """
    Pull a three-letter airport code out of a structured site name.

    Recognizes `SFS-ATL` style site codes anywhere in the label and a bare
    leading code such as `ATL` or `ATL-SW1`.
    """

    if not site_label:
        return None
    label = site_label.strip()
    sfs_match = SFS_SITE_RE.search(label)
    if sfs_match:
        return sfs_match.group(1)
    leading = LEADING_CODE_RE.match(label)
    if leading and leading.group(1) != "SFS":
        return leading.group(1)
    return None


class AirportTimezoneResolver:
    """
    Resolves airport codes through cache, lookup service, then fallback table.
    """

    def __init__(
        self,
        *,
        cache: TimezoneLookupCache,
        lookup: AirportLookupConnector | None = None,
        fallback_index: Mapping[str, AirportRecord] | None = None,
        airport_cities: AirportCityMap | None = None,
    ) -> None:
        self._cache = cache
        self._lookup = lookup
        self._fallback_index = dict(fallback_index) if fallback_index is not None else build_fallback_index()
        self._airport_cities = airport_cities

    def lookup(self, code: str) -> AirportRecord | None:
        normalized = code.strip().upper()
        cached = self._cache.get(normalized)
        if cached is not None:
            return cached

        if self._lookup is not None and not self._cache.is_missing(normalized):
            try:
                fetched = self._lookup.fetch_airport(normalized)
            except ConnectorRequestError as exc:
                log_event(
                    logger,
                    logging.WARNING,
                    "airport_lookup_failed",
                    code=normalized,
                    error=str(exc),
                )
                fetched = None
            else:
                if fetched is None:
                    self._cache.mark_missing(normalized)
            if fetched is not None:
                return self._cache.insert(normalized, fetched)

        fallback = self._fallback_index.get(normalized)
        if fallback is not None and fallback.timezone:
            return fallback
        return None

    def resolve(self, site_label: str | None) -> SiteLocation | None:
        code = extract_iata_code(site_label)
        if code is None:
            return None
        record = self.lookup(code)
        if record is None or not record.timezone:
            logger.debug("Airport code unresolved code=%s site=%r", code, site_label)
            return None
        if self._airport_cities is not None:
            self._airport_cities.record(code, record.city)
        return SiteLocation(
            identifier=code,
            timezone=record.timezone,
            source="airport",
            city=record.city or None,
            country=record.country or None,
        )
