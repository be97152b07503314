from __future__ import annotations

import unittest

from netops.connectors.base import ConnectorRequestError
from netops.domain.airport import AirportRecord
from netops.resolvers.airport_index import build_fallback_index, find_iata_codes
from netops.resolvers.airport_resolver import AirportTimezoneResolver, extract_iata_code
from netops.resolvers.cache import AirportCityMap, TimezoneLookupCache
from netops.resolvers.city_matcher import CityMatcher
from netops.resolvers.site_resolver import ResolutionStrategy, SiteTimezoneResolver


class FakeLookup:
    """Stands in for AirportLookupConnector; answers from a dict or raises."""

    def __init__(self, records: dict[str, AirportRecord] | None = None, error: Exception | None = None) -> None:
        self.records = records or {}
        self.error = error
        self.calls: list[str] = []

    def fetch_airport(self, code: str) -> AirportRecord | None:
        self.calls.append(code)
        if self.error is not None:
            raise self.error
        return self.records.get(code)


class TestCityMatcher(unittest.TestCase):
    def setUp(self) -> None:
        self.matcher = CityMatcher()

    def test_alias_resolves_to_canonical_timezone(self) -> None:
        self.assertEqual(
            self.matcher.find_timezone("Ft Lauderdale"),
            self.matcher.find_timezone("Fort Lauderdale"),
        )
        self.assertEqual(self.matcher.find_timezone("Ft Lauderdale"), "America/New_York")

    def test_first_word_match(self) -> None:
        matched = self.matcher.match("Phoenix Data Hall 2")

        self.assertEqual(matched.city, "phoenix")
        self.assertEqual(matched.timezone, "America/Phoenix")

    def test_word_scan_inside_structured_site_name(self) -> None:
        self.assertEqual(
            self.matcher.resolve_city_name("ARVA1900 - 1900 Crystal Dr - Arlington VA"),
            "arlington",
        )

    def test_case_and_whitespace_are_normalized(self) -> None:
        self.assertEqual(self.matcher.find_timezone("  LONDON   "), "Europe/London")

    def test_ignore_list_resolves_to_nothing(self) -> None:
        self.assertIsNone(self.matcher.match("Multiple Sites"))
        self.assertIsNone(self.matcher.match("HQ"))

    def test_unknown_label_is_none(self) -> None:
        self.assertIsNone(self.matcher.match("ARVA2001 - South Bell"))
        self.assertIsNone(self.matcher.match(""))
        self.assertIsNone(self.matcher.match(None))

    def test_custom_tables(self) -> None:
        matcher = CityMatcher(city_timezones={"springfield": "America/Chicago"}, aliases={}, ignore_sites=())

        self.assertEqual(matcher.find_timezone("Springfield Plant"), "America/Chicago")
        self.assertIsNone(matcher.find_timezone("London"))


class TestExtractIataCode(unittest.TestCase):
    def test_structured_site_codes(self) -> None:
        self.assertEqual(extract_iata_code("SFS-ATL"), "ATL")
        self.assertEqual(extract_iata_code("Signature SFS_LHR Hangar"), "LHR")
        self.assertEqual(extract_iata_code("ATL"), "ATL")
        self.assertEqual(extract_iata_code("ATL-SW1"), "ATL")

    def test_non_codes(self) -> None:
        self.assertIsNone(extract_iata_code("ARVA2001 - South Bell"))
        self.assertIsNone(extract_iata_code("SFS"))
        self.assertIsNone(extract_iata_code("atl"))
        self.assertIsNone(extract_iata_code(None))


class TestAirportTimezoneResolver(unittest.TestCase):
    def test_fallback_table_without_lookup_service(self) -> None:
        resolver = AirportTimezoneResolver(cache=TimezoneLookupCache())

        location = resolver.resolve("SFS-LAX")

        self.assertEqual(location.identifier, "LAX")
        self.assertEqual(location.timezone, "America/Los_Angeles")
        self.assertEqual(location.source, "airport")

    def test_lookup_result_is_cached(self) -> None:
        record = AirportRecord("TEB", "Teterboro Airport", "Teterboro", "US", "America/New_York")
        lookup = FakeLookup({"TEB": record})
        cache = TimezoneLookupCache()
        resolver = AirportTimezoneResolver(cache=cache, lookup=lookup)

        first = resolver.resolve("SFS-TEB")
        second = resolver.resolve("SFS-TEB")

        self.assertEqual(first.timezone, "America/New_York")
        self.assertEqual(second, first)
        self.assertEqual(lookup.calls, ["TEB"])
        self.assertIn("TEB", cache)

    def test_not_found_is_negatively_cached(self) -> None:
        lookup = FakeLookup({})
        cache = TimezoneLookupCache()
        resolver = AirportTimezoneResolver(cache=cache, lookup=lookup)

        self.assertIsNone(resolver.resolve("SFS-ZZZ"))
        self.assertIsNone(resolver.resolve("SFS-ZZZ"))
        self.assertEqual(lookup.calls, ["ZZZ"])
        self.assertTrue(cache.is_missing("ZZZ"))

    def test_service_failure_falls_back_to_static_table(self) -> None:
        lookup = FakeLookup(error=ConnectorRequestError("airport_lookup: request failed after retries."))
        cache = TimezoneLookupCache()
        resolver = AirportTimezoneResolver(cache=cache, lookup=lookup)

        location = resolver.resolve("SFS-MIA")

        self.assertEqual(location.timezone, "America/New_York")
        self.assertFalse(cache.is_missing("MIA"))
        self.assertEqual(len(cache), 0)

    def test_airport_city_map_is_filled(self) -> None:
        cities = AirportCityMap()
        resolver = AirportTimezoneResolver(cache=TimezoneLookupCache(), airport_cities=cities)

        resolver.resolve("SFS-BOS")

        self.assertEqual(cities.get("bos"), "Boston")


class TestTimezoneLookupCache(unittest.TestCase):
    def test_insert_keeps_first_record(self) -> None:
        cache = TimezoneLookupCache()
        first = AirportRecord("ATL", city="Atlanta", timezone="America/New_York")
        second = AirportRecord("ATL", city="Elsewhere", timezone="UTC")

        cache.insert("ATL", first)
        stored = cache.insert("ATL", second)

        self.assertIs(stored, first)
        self.assertEqual(cache.get("ATL").city, "Atlanta")


class TestSiteTimezoneResolver(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = SiteTimezoneResolver(
            city_matcher=CityMatcher(),
            airport_resolver=AirportTimezoneResolver(cache=TimezoneLookupCache()),
        )

    def test_city_first_by_default(self) -> None:
        location = self.resolver.resolve("LHR London Hangar")

        self.assertEqual(location.source, "city")
        self.assertEqual(location.identifier, "london")
        self.assertEqual(location.city, "London")

    def test_airport_first_order(self) -> None:
        resolver = self.resolver.with_strategy_order((ResolutionStrategy.AIRPORT, ResolutionStrategy.CITY))

        location = resolver.resolve("LHR London Hangar")

        self.assertEqual(location.source, "airport")
        self.assertEqual(location.identifier, "LHR")

    def test_falls_through_to_second_strategy(self) -> None:
        location = self.resolver.resolve("SFS-DEN")

        self.assertEqual(location.source, "airport")
        self.assertEqual(location.timezone, "America/Denver")

    def test_unresolved_label(self) -> None:
        self.assertIsNone(self.resolver.resolve("ARVA2001 - South Bell"))
        self.assertIsNone(self.resolver.resolve("   "))


class TestFindIataCodes(unittest.TestCase):
    def test_site_codes_then_bare_codes_validated_against_index(self) -> None:
        text = "Outages at SFS-LAX and SFS-BOS. JFK saw delays; THE and AND are not airports."

        codes = find_iata_codes(text, build_fallback_index())

        self.assertEqual(codes, ["LAX", "BOS", "JFK"])


if __name__ == "__main__":
    unittest.main()
