"""
netops/services/airport_kpi_service.py

Airport KPIs for aviation reports.

KPIs
----
total_airports_with_issues               distinct airport codes among findings
airports_affected_during_business_hours  distinct codes with a YES finding
airport_operations_priority_index        share of incidents per airport tier,
                                         e.g. "Tier 1: 67%, Tier 2: 33%, Tier 3: 0%"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from netops.domain.airport import AirportRecord
from netops.domain.report import BusinessHoursImpact, Category
from netops.resolvers.airport_index import find_iata_codes
from netops.resolvers.airport_resolver import extract_iata_code
from netops.resolvers.cache import AirportCityMap

logger = logging.getLogger(__name__)

NO_INCIDENTS = "No incidents recorded"

TIER_1_MARKERS: tuple[str, ...] = (
    "London", "New York", "Paris", "Los Angeles", "Miami", "Dallas", "Chicago",
    "Tokyo", "Dubai", "Singapore", "Atlanta", "JFK", "ORD", "LAX", "MIA", "DFW",
    "LHR", "CDG", "NRT", "DXB", "SIN",
)

TIER_2_MARKERS: tuple[str, ...] = (
    "Manchester", "Berlin", "Geneva", "Madrid", "Toronto", "Boston", "Zurich",
    "Rome", "Houston", "San Francisco", "YYZ", "BOS", "ZRH", "FRA", "MAD",
    "BCN", "MXP", "IAH", "SFO", "BWI",
)


def airport_tier(name: str) -> int:
    """
    Tier 1 for major hubs, 2 for regional hubs, 3 otherwise.
    """

    lowered = name.lower()
    if any(marker.lower() in lowered for marker in TIER_1_MARKERS):
        return 1
    if any(marker.lower() in lowered for marker in TIER_2_MARKERS):
        return 2
    return 3


@dataclass(frozen=True)
class AirportKPIs:
    total_airports_with_issues: int
    airports_affected_during_business_hours: int
    airport_operations_priority_index: str
    tier_breakdown: dict[str, str] = field(default_factory=dict)
    total_incidents: int = 0
    incidents_by_airport: dict[str, int] = field(default_factory=dict)
    airports_mentioned: tuple[str, ...] = ()


def calculate_airport_kpis(
    categories: Sequence[Category],
    airports: Mapping[str, AirportRecord],
    *,
    airport_cities: AirportCityMap | None = None,
    document_text: str = "",
) -> AirportKPIs:
    """
    Count airports with issues and weight incidents by airport tier.

    Tiers come from the airport index record, or from the city recorded by
    the lookup service for codes the index does not know. `document_text`
    is scanned for every indexed airport the report mentions.
    """

    airports_with_issues: set[str] = set()
    business_hours_airports: set[str] = set()
    incidents_by_airport: dict[str, int] = {}
    tier_incidents = {1: 0, 2: 0, 3: 0}

    for category in categories:
        for row in category.findings:
            code = extract_iata_code(row.site)
            if code is None:
                continue
            airports_with_issues.add(code)
            incidents_by_airport[code] = incidents_by_airport.get(code, 0) + 1
            if row.business_hours_impact is BusinessHoursImpact.YES:
                business_hours_airports.add(code)
            record = airports.get(code)
            if record is not None:
                tier_incidents[airport_tier(record.city or record.name)] += 1
            else:
                city = airport_cities.get(code) if airport_cities is not None else None
                if city:
                    tier_incidents[airport_tier(city)] += 1

    total = sum(tier_incidents.values())
    breakdown: dict[str, str] = {}
    if total > 0:
        for tier, count in tier_incidents.items():
            breakdown[f"Tier {tier}"] = f"{round(count / total * 100)}%"
    index = ", ".join(f"{tier}: {share}" for tier, share in breakdown.items())

    kpis = AirportKPIs(
        total_airports_with_issues=len(airports_with_issues),
        airports_affected_during_business_hours=len(business_hours_airports),
        airport_operations_priority_index=index or NO_INCIDENTS,
        tier_breakdown=breakdown,
        total_incidents=total,
        incidents_by_airport=dict(sorted(incidents_by_airport.items())),
        airports_mentioned=tuple(find_iata_codes(document_text, airports)) if document_text else (),
    )
    logger.info(
        "Airport KPIs calculated airports=%s business_hours=%s incidents=%s",
        kpis.total_airports_with_issues,
        kpis.airports_affected_during_business_hours,
        kpis.total_incidents,
    )
    return kpis


def aviation_narrative(kpis: AirportKPIs) -> str:
    parts = [
        f"Analysis of {kpis.total_airports_with_issues} Signature Aviation airports "
        "revealed network infrastructure challenges."
    ]
    if kpis.airports_affected_during_business_hours > 0:
        parts.append(
            f"{kpis.airports_affected_during_business_hours} airports experienced incidents during "
            "business hours, potentially affecting ground handling and administrative workflows."
        )
    tier_1 = kpis.tier_breakdown.get("Tier 1")
    if tier_1 is not None:
        parts.append(
            f"Incident concentration shows {tier_1} occurring in Tier 1 major hubs, "
            "concentrating operational risk in critical global nodes."
        )
    else:
        parts.append("Incidents were distributed across airport tiers, indicating widespread infrastructure challenges.")
    return " ".join(parts)


def dashboard_table(kpis: AirportKPIs) -> list[dict[str, str]]:
    return [
        {"KPI": "Total Airports with Issues", "Value": str(kpis.total_airports_with_issues)},
        {
            "KPI": "Airports Affected During Business Hours",
            "Value": str(kpis.airports_affected_during_business_hours),
        },
        {"KPI": "Airport Operations Priority Index", "Value": kpis.airport_operations_priority_index},
    ]
