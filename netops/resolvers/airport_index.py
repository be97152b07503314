"""
netops/resolvers/airport_index.py

IATA airport index built from the OurAirports dataset, with a static fallback
of well-known airports.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from typing import Iterator, Mapping

from netops.connectors.airport_dataset_connector import AirportDatasetConnector
from netops.connectors.base import ConnectorRequestError
from netops.domain.airport import AirportRecord

logger = logging.getLogger(__name__)

FALLBACK_AIRPORTS: tuple[AirportRecord, ...] = (
    AirportRecord("ATL", "Hartsfield-Jackson Atlanta International Airport", "Atlanta", "US", "America/New_York", continent="NA", latitude=33.6367, longitude=-84.4281),
    AirportRecord("LAX", "Los Angeles International Airport", "Los Angeles", "US", "America/Los_Angeles", continent="NA", latitude=33.9416, longitude=-118.4085),
    AirportRecord("JFK", "John F. Kennedy International Airport", "New York", "US", "America/New_York", continent="NA", latitude=40.6413, longitude=-73.7781),
    AirportRecord("ORD", "O'Hare International Airport", "Chicago", "US", "America/Chicago", continent="NA", latitude=41.9786, longitude=-87.9048),
    AirportRecord("DFW", "Dallas/Fort Worth International Airport", "Dallas", "US", "America/Chicago", continent="NA", latitude=32.8968, longitude=-97.0380),
    AirportRecord("LHR", "London Heathrow Airport", "London", "GB", "Europe/London", continent="EU", latitude=51.4700, longitude=-0.4543),
    AirportRecord("CDG", "Charles de Gaulle Airport", "Paris", "FR", "Europe/Paris", continent="EU", latitude=49.0097, longitude=2.5479),
    AirportRecord("FRA", "Frankfurt Airport", "Frankfurt", "DE", "Europe/Berlin", continent="EU", latitude=50.0379, longitude=8.5622),
    AirportRecord("YYZ", "Toronto Pearson International Airport", "Toronto", "CA", "America/Toronto", continent="NA", latitude=43.6777, longitude=-79.6248),
    AirportRecord("VNY", "Van Nuys Airport", "Los Angeles", "US", "America/Los_Angeles", continent="NA", latitude=34.2098, longitude=-118.4900),
    AirportRecord("LTN", "London Luton Airport", "London", "GB", "Europe/London", continent="EU", latitude=51.8747, longitude=-0.3683),
    AirportRecord("MIA", "Miami International Airport", "Miami", "US", "America/New_York", continent="NA", latitude=25.7932, longitude=-80.2906),
    AirportRecord("SFO", "San Francisco International Airport", "San Francisco", "US", "America/Los_Angeles", continent="NA", latitude=37.6189, longitude=-122.3750),
    AirportRecord("BOS", "Boston Logan International Airport", "Boston", "US", "America/New_York", continent="NA", latitude=42.3656, longitude=-71.0096),
    AirportRecord("DEN", "Denver International Airport", "Denver", "US", "America/Denver", continent="NA", latitude=39.8561, longitude=-104.6737),
)

SFS_CODE_PATTERN = re.compile(r"SFS[-_\s]?([A-Z]{3})\b")
LOOSE_CODE_PATTERN = re.compile(r"\b([A-Z]{3})\b")


def build_fallback_index() -> dict[str, AirportRecord]:
    return {airport.iata: airport for airport in FALLBACK_AIRPORTS}


def looks_like_html(text: str) -> bool:
    head = text.lstrip()[:512].lower()
    return head.startswith("<!doctype") or "<html" in head


def parse_airport_csv(text: str) -> dict[str, AirportRecord]:
    """
    Parse OurAirports `airports.csv` into an IATA-keyed index.

    Rows without an IATA code are skipped. The dataset has no timezone column
    in its current form, so `timezone` is only filled when one is present.
    """

    index: dict[str, AirportRecord] = {}
    reader = csv.DictReader(io.StringIO(text))
    for row in reader:
        code = (row.get("iata_code") or "").strip().upper()
        if not code:
            continue
        index[code] = AirportRecord(
            iata=code,
            name=row.get("name") or "",
            city=row.get("municipality") or "",
            country=row.get("iso_country") or "",
            timezone=row.get("timezone") or row.get("tz_database_time_zone") or row.get("tz") or None,
            icao=row.get("icao_code") or row.get("gps_code") or None,
            region=row.get("iso_region") or None,
            continent=row.get("continent") or None,
            latitude=_to_float(row.get("latitude_deg")),
            longitude=_to_float(row.get("longitude_deg")),
        )
    return index


def build_airport_index(connector: AirportDatasetConnector | None = None) -> dict[str, AirportRecord]:
    """
    Build the airport index from the dataset, or from the fallback table when
    the dataset is unavailable, returns HTML, or parses to nothing.

    Fallback entries fill in timezones the dataset lacks.
    """

    fallback = build_fallback_index()
    if connector is None:
        return fallback

    try:
        text = connector.fetch_dataset()
    except ConnectorRequestError as exc:
        logger.warning("Airport dataset unavailable, using fallback index error=%s", exc)
        return fallback

    if looks_like_html(text):
        logger.warning("Airport dataset returned HTML, using fallback index")
        return fallback

    try:
        index = parse_airport_csv(text)
    except csv.Error as exc:
        logger.warning("Airport dataset could not be parsed, using fallback index error=%s", exc)
        return fallback

    if not index:
        logger.warning("Airport dataset contained no IATA codes, using fallback index")
        return fallback

    for code, airport in fallback.items():
        existing = index.get(code)
        if existing is None or not existing.timezone:
            index[code] = airport
    logger.info("Airport index built airports=%s", len(index))
    return index


def find_iata_codes(text: str, index: Mapping[str, AirportRecord]) -> list[str]:
    """
    Return airport codes mentioned in `text`, in order of first appearance.

    `SFS-XXX` site codes are collected first, then bare three-letter tokens;
    every candidate must exist in `index`.
    """

    return list(_iter_codes(text, index))


def _iter_codes(text: str, index: Mapping[str, AirportRecord]) -> Iterator[str]:
    seen: set[str] = set()
    for pattern in (SFS_CODE_PATTERN, LOOSE_CODE_PATTERN):
        for match in pattern.finditer(text):
            code = match.group(1).upper()
            if code in index and code not in seen:
                seen.add(code)
                yield code


def _to_float(value: str | None) -> float | None:
    try:
        return float(value) if value not in (None, "") else None
    except ValueError:
        return None
