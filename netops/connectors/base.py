"""
netops/connectors/base.py

Shared GET client for airport reference lookups.

Every outbound call passes the rate limiter first. Timeouts, connection
errors and the statuses in RETRYABLE_STATUS_CODES are retried with
exponential backoff; any other HTTP error fails on the first response.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from netops.config import ExternalHTTPSettings
from netops.rate_limiter import ReservoirRateLimiter

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


class ConnectorRequestError(RuntimeError):
    """
    Raised when a lookup cannot be completed after retries.
    """


class BaseConnector:
    """
    Rate-limited GET client used by the airport connectors.
    """

    source: str

    def __init__(
        self,
        *,
        source: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
        rate_limiter: ReservoirRateLimiter | None = None,
    ) -> None:
        self.source = source
        self._session = session or requests.Session()
        self._http = http_settings
        self._rate_limiter = rate_limiter or ReservoirRateLimiter(
            rate_limit_per_second=http_settings.rate_limit_per_second,
            reservoir=http_settings.burst_reservoir,
        )

    def _get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = self._get(url, params=params, headers=headers)
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Lookup response is not JSON source=%s url=%s", self.source, url)
            raise ConnectorRequestError(f"{self.source}: response was not valid JSON.") from exc

    def _get_text(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> str:
        return self._get(url, params=params, headers=headers).text

    def _get(
        self,
        url: str,
        *,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> requests.Response:
        attempts = self._http.max_retries + 1
        last_error: Exception | None = None

        for attempt in range(attempts):
            try:
                return self._send_once(url, params=params, headers=headers)
            except requests.HTTPError as exc:
                status_code = exc.response.status_code if exc.response is not None else None
                if status_code not in RETRYABLE_STATUS_CODES:
                    logger.error(
                        "Lookup rejected source=%s status=%s url=%s",
                        self.source,
                        status_code,
                        url,
                    )
                    raise ConnectorRequestError(f"{self.source}: lookup rejected with status {status_code}.") from exc
                last_error = exc
            except (requests.Timeout, requests.ConnectionError) as exc:
                last_error = exc

            if attempt + 1 < attempts:
                delay = self._backoff_seconds(attempt)
                logger.warning(
                    "Lookup retry source=%s attempt=%s/%s wait_seconds=%.2f error=%s",
                    self.source,
                    attempt + 1,
                    attempts,
                    delay,
                    last_error,
                )
                time.sleep(delay)

        logger.error("Lookup gave up source=%s url=%s attempts=%s error=%s", self.source, url, attempts, last_error)
        raise ConnectorRequestError(f"{self.source}: lookup failed after {attempts} attempt(s).") from last_error

    def _send_once(
        self,
        url: str,
        *,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> requests.Response:
        self._rate_limiter.acquire()
        response = self._session.request(
            method="GET",
            url=url,
            params=params,
            headers=headers,
            timeout=self._http.timeout_seconds,
        )
        if response.status_code in RETRYABLE_STATUS_CODES:
            raise requests.HTTPError(f"Retryable status {response.status_code}", response=response)
        response.raise_for_status()
        return response

    def _backoff_seconds(self, attempt: int) -> float:
        return self._http.backoff_initial_seconds * (self._http.backoff_multiplier**attempt)
