"""
netops/connectors/airport_lookup_connector.py

Lookup-by-code client for the API Ninjas airports endpoint.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import requests

from netops.config import AirportLookupSettings, ExternalHTTPSettings
from netops.connectors.base import BaseConnector
from netops.domain.airport import AirportRecord
from netops.rate_limiter import ReservoirRateLimiter

logger = logging.getLogger(__name__)

_IATA_CODE_RE = re.compile(r"^[A-Z]{3}$")


class AirportLookupConnector(BaseConnector):
    """
    Fetches one airport record per IATA code.
    """

    def __init__(
        self,
        *,
        settings: AirportLookupSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        rate_limiter: ReservoirRateLimiter | None = None,
    ) -> None:
        super().__init__(
            source="airport_lookup",
            http_settings=http_settings,
            session=session,
            rate_limiter=rate_limiter,
        )
        self._settings = settings

    def fetch_airport(self, code: str) -> AirportRecord | None:
        """
        Return the best-match record for `code`, or None when not found.

        Transport failures raise ConnectorRequestError; callers decide how to
        degrade.
        """

        normalized = code.strip().upper()
        if not _IATA_CODE_RE.match(normalized):
            logger.warning("Rejected malformed IATA code code=%r", code)
            return None

        payload = self._get_json(
            f"{self._settings.base_url.rstrip('/')}/airports",
            params={"iata": normalized},
            headers={"X-Api-Key": self._settings.api_key or ""},
        )
        record = parse_airport_payload(payload)
        if record is None:
            logger.info("Airport lookup returned no usable record code=%s", normalized)
        return record


def parse_airport_payload(payload: Any) -> AirportRecord | None:
    """
    Map an API Ninjas airports payload to an AirportRecord.

    The service answers with a JSON list; the first entry is the best match.
    Anything without an IATA code and a timezone is treated as not found.
    """

    if isinstance(payload, list):
        if not payload:
            return None
        payload = payload[0]
    if not isinstance(payload, dict):
        return None

    iata = str(payload.get("iata") or "").strip().upper()
    timezone_name = str(payload.get("timezone") or "").strip()
    if not iata or not timezone_name:
        return None

    return AirportRecord(
        iata=iata,
        name=str(payload.get("name") or ""),
        city=str(payload.get("city") or ""),
        country=str(payload.get("country") or ""),
        timezone=timezone_name,
        icao=payload.get("icao") or None,
        region=payload.get("region") or None,
        latitude=_to_float(payload.get("latitude")),
        longitude=_to_float(payload.get("longitude")),
    )


def _to_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
