"""
netops/domain/airport.py

Airport reference record used by the airport-code timezone strategy.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AirportRecord:
    """
    Airport metadata keyed by IATA code.
    """

    iata: str
    name: str = ""
    city: str = ""
    country: str = ""
    timezone: str | None = None
    icao: str | None = None
    region: str | None = None
    continent: str | None = None
    latitude: float | None = None
    longitude: float | None = None
