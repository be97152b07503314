"""
netops/resolvers/cache.py

Process-scoped lookup state passed explicitly into the resolvers.
"""

from __future__ import annotations

import threading

from netops.domain.airport import AirportRecord


class TimezoneLookupCache:
    """
    Append-only cache of airport lookups keyed by IATA code.

    Entries are never replaced once written. Two callers racing on the same
    code may both fetch it; the first insert wins and the second is a no-op.
    Codes the lookup service reported as unknown are remembered separately so
    they are not fetched again.
    """

    def __init__(self) -> None:
        self._records: dict[str, AirportRecord] = {}
        self._misses: set[str] = set()
        self._lock = threading.Lock()

    def get(self, code: str) -> AirportRecord | None:
        return self._records.get(code.upper())

    def insert(self, code: str, record: AirportRecord) -> AirportRecord:
        """
        Store `record` unless the code is already cached; return the stored record.
        """

        key = code.upper()
        with self._lock:
            existing = self._records.get(key)
            if existing is not None:
                return existing
            self._records[key] = record
            self._misses.discard(key)
            return record

    def mark_missing(self, code: str) -> None:
        key = code.upper()
        with self._lock:
            if key not in self._records:
                self._misses.add(key)

    def is_missing(self, code: str) -> bool:
        return code.upper() in self._misses

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.upper() in self._records

    def __len__(self) -> int:
        return len(self._records)

    def snapshot(self) -> dict[str, AirportRecord]:
        with self._lock:
            return dict(self._records)


class AirportCityMap:
    """
    Airport code to city name, filled in as sites resolve during a run.
    """

    def __init__(self) -> None:
        self._cities: dict[str, str] = {}
        self._lock = threading.Lock()

    def record(self, code: str, city: str) -> None:
        if not city:
            return
        with self._lock:
            self._cities.setdefault(code.upper(), city)

    def get(self, code: str) -> str | None:
        with self._lock:
            return self._cities.get(code.upper())
