"""
netops/resolvers package marker.
"""

from netops.resolvers.airport_index import FALLBACK_AIRPORTS, build_airport_index, find_iata_codes
from netops.resolvers.airport_resolver import AirportTimezoneResolver, extract_iata_code
from netops.resolvers.cache import AirportCityMap, TimezoneLookupCache
from netops.resolvers.city_matcher import CityMatch, CityMatcher, normalize_site_name
from netops.resolvers.site_resolver import ResolutionStrategy, SiteTimezoneResolver

__all__ = [
    "FALLBACK_AIRPORTS",
    "AirportCityMap",
    "AirportTimezoneResolver",
    "CityMatch",
    "CityMatcher",
    "ResolutionStrategy",
    "SiteTimezoneResolver",
    "TimezoneLookupCache",
    "build_airport_index",
    "extract_iata_code",
    "find_iata_codes",
    "normalize_site_name",
]
