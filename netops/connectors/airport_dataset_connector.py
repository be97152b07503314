"""
netops/connectors/airport_dataset_connector.py

Downloads the OurAirports airports CSV.
"""

from __future__ import annotations

import requests

from netops.config import AirportLookupSettings, ExternalHTTPSettings
from netops.connectors.base import BaseConnector
from netops.rate_limiter import ReservoirRateLimiter


class AirportDatasetConnector(BaseConnector):
    """
    Fetches the raw airports dataset as text.
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
            source="airport_dataset",
            http_settings=http_settings,
            session=session,
            rate_limiter=rate_limiter,
        )
        self._url = settings.dataset_url

    def fetch_dataset(self) -> str:
        return self._get_text(self._url)
