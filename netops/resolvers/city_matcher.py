"""
netops/resolvers/city_matcher.py

City-name strategy for site timezone resolution.

Site labels are free text ("Boston VL", "Chicago Warehouse",
"ARVA2001 - South Bell - Arlington VA"). Resolution order:

    1. ignore-list        generic names resolve to nothing
    2. alias table        "ft lauderdale" -> "fort lauderdale"
    3. exact match
    4. first word         "phoenix qcc" -> "phoenix"
    5. per-word scan      any word of 3+ letters that names a known city
    6. phrase scan        multi-word cities inside a longer label
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Mapping

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3

CITY_TIMEZONE_MAP: dict[str, str] = {
    # Americas
    "new york": "America/New_York",
    "los angeles": "America/Los_Angeles",
    "chicago": "America/Chicago",
    "toronto": "America/Toronto",
    "vancouver": "America/Vancouver",
    "edmonton": "America/Edmonton",
    "calgary": "America/Edmonton",
    "mexico city": "America/Mexico_City",
    "sao paulo": "America/Sao_Paulo",
    "buenos aires": "America/Argentina/Buenos_Aires",
    "phoenix": "America/Phoenix",
    "ft lauderdale": "America/New_York",
    "fort lauderdale": "America/New_York",
    "jacksonville": "America/New_York",
    "pittsburgh": "America/New_York",
    "houston": "America/Chicago",
    "detroit": "America/New_York",
    "seattle": "America/Los_Angeles",
    "boston": "America/New_York",
    "washington": "America/New_York",
    "washington dc": "America/New_York",
    "denver": "America/Denver",
    "atlanta": "America/New_York",
    "dallas": "America/Chicago",
    "miami": "America/New_York",
    "san francisco": "America/Los_Angeles",
    "arlington": "America/New_York",
    "philadelphia": "America/New_York",
    "orlando": "America/New_York",
    "charlotte": "America/New_York",
    "nashville": "America/Chicago",
    "minneapolis": "America/Chicago",
    "austin": "America/Chicago",
    "las vegas": "America/Los_Angeles",
    "san diego": "America/Los_Angeles",
    "salt lake city": "America/Denver",
    "montreal": "America/Toronto",
    # Europe
    "dublin": "Europe/Dublin",
    "london": "Europe/London",
    "manchester": "Europe/London",
    "paris": "Europe/Paris",
    "berlin": "Europe/Berlin",
    "madrid": "Europe/Madrid",
    "rome": "Europe/Rome",
    "amsterdam": "Europe/Amsterdam",
    "zurich": "Europe/Zurich",
    "geneva": "Europe/Zurich",
    "stockholm": "Europe/Stockholm",
    "moscow": "Europe/Moscow",
    "frankfurt": "Europe/Berlin",
    # Asia Pacific
    "tokyo": "Asia/Tokyo",
    "singapore": "Asia/Singapore",
    "hong kong": "Asia/Hong_Kong",
    "sydney": "Australia/Sydney",
    "melbourne": "Australia/Melbourne",
    "mumbai": "Asia/Kolkata",
    "dubai": "Asia/Dubai",
    "shanghai": "Asia/Shanghai",
    "seoul": "Asia/Seoul",
    "bangkok": "Asia/Bangkok",
}

CITY_ALIASES: dict[str, str] = {
    "ft lauderdale": "fort lauderdale",
    "ft. lauderdale": "fort lauderdale",
    "washington dc": "washington",
    "washington d.c.": "washington",
    "la": "los angeles",
    "nyc": "new york",
    "sf": "san francisco",
    "boston vl": "boston",
    "chicago warehouse": "chicago",
    "phoenix qcc": "phoenix",
}

IGNORE_SITES: frozenset[str] = frozenset(
    {
        "multiple sites",
        "global",
        "hq",
        "flexential",
        "colo",
        "datacenter",
        "data center",
        "headquarters",
        "main office",
        "primary site",
    }
)

_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")


def normalize_site_name(site_name: str | None) -> str:
    """
    Lowercase, trim and collapse whitespace.
    """

    if not site_name:
        return ""
    return " ".join(str(site_name).lower().split())


@dataclass(frozen=True)
class CityMatch:
    city: str
    timezone: str


class CityMatcher:
    """
    Resolves free-text site labels to a known city and its IANA timezone.
    """

    def __init__(
        self,
        *,
        city_timezones: Mapping[str, str] | None = None,
        aliases: Mapping[str, str] | None = None,
        ignore_sites: Iterable[str] | None = None,
    ) -> None:
        self._city_timezones = dict(city_timezones or CITY_TIMEZONE_MAP)
        self._aliases = dict(aliases or CITY_ALIASES)
        self._ignore_sites = frozenset(ignore_sites if ignore_sites is not None else IGNORE_SITES)
        self._multi_word_cities = sorted(
            (city for city in self._city_timezones if " " in city),
            key=len,
            reverse=True,
        )

    def resolve_city_name(self, site_name: str | None) -> str | None:
        normalized = normalize_site_name(site_name)
        if not normalized or normalized in self._ignore_sites:
            return None

        alias = self._aliases.get(normalized)
        if alias and alias in self._city_timezones:
            return alias

        if normalized in self._city_timezones:
            return normalized

        cleaned = " ".join(_NON_WORD_RE.sub(" ", normalized).split())
        if cleaned in self._ignore_sites:
            return None
        words = cleaned.split(" ") if cleaned else []

        if len(words) > 1:
            first_word = words[0]
            if len(first_word) >= MIN_WORD_LENGTH and first_word in self._city_timezones:
                return first_word

        for word in words:
            if len(word) < MIN_WORD_LENGTH:
                continue
            if word in self._city_timezones:
                return word
            alias = self._aliases.get(word)
            if alias and alias in self._city_timezones:
                return alias

        padded = f" {cleaned} "
        for city in self._multi_word_cities:
            if f" {city} " in padded:
                return self._aliases.get(city, city)

        return None

    def match(self, site_name: str | None) -> CityMatch | None:
        city = self.resolve_city_name(site_name)
        if city is None:
            logger.debug("No city match site=%r", site_name)
            return None
        return CityMatch(city=city, timezone=self._city_timezones[city])

    def find_timezone(self, site_name: str | None) -> str | None:
        matched = self.match(site_name)
        return matched.timezone if matched else None
