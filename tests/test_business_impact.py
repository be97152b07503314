from __future__ import annotations

import unittest

from netops import failure_codes
from netops.domain.report import UNKNOWN_SITE, BusinessHoursImpact, CanonicalRow, Category, CategoryKind, Provenance
from netops.resolvers.airport_resolver import AirportTimezoneResolver
from netops.resolvers.cache import TimezoneLookupCache
from netops.resolvers.city_matcher import CityMatcher
from netops.resolvers.site_resolver import SiteTimezoneResolver
from netops.services.business_impact_service import BusinessImpactClassifier, ImpactBreakdown


def _row(line_index: int, site: str, device: str, last_occurred: str | None, occurrences: int = 2) -> CanonicalRow:
    return CanonicalRow(
        site=site,
        device=device,
        occurrences=occurrences,
        last_occurred=last_occurred,
        provenance=Provenance(page=1, line_index=line_index, snippet=f"{site} {device}"),
    )


class TestBusinessImpactClassifier(unittest.TestCase):
    def setUp(self) -> None:
        resolver = SiteTimezoneResolver(
            city_matcher=CityMatcher(),
            airport_resolver=AirportTimezoneResolver(cache=TimezoneLookupCache()),
        )
        self.classifier = BusinessImpactClassifier(resolver)
        self.interface = Category.from_rows(
            category_name=CategoryKind.INTERFACE_DOWN.value,
            kind=CategoryKind.INTERFACE_DOWN,
            rows=[
                _row(1, "ATL", "ATL-SW1", "08/15/2025 10:30", occurrences=5),
                _row(2, "ARVA2001 - South Bell", "as1-arva2001", "08/15/2025 10:30"),
                _row(3, "Chicago Warehouse", "chi-sw4", None),
            ],
        )
        self.ports = Category.from_rows(
            category_name=CategoryKind.PORT_ERRORS.value,
            kind=CategoryKind.PORT_ERRORS,
            rows=[
                _row(4, UNKNOWN_SITE, "SFS-DEN", "08/16/2025 10:00"),
                _row(5, "London Hangar", "lhr-sw2", "08/15/2025 20:00"),
            ],
        )

    def _classified(self) -> list[Category]:
        return self.classifier.classify([self.interface, self.ports])

    def test_weekday_business_hour_at_airport_site_is_yes(self) -> None:
        row = self._classified()[0].findings[0]

        self.assertEqual(row.business_hours_impact, BusinessHoursImpact.YES)
        self.assertEqual(row.timezone, "America/New_York")
        self.assertEqual(row.local_time, "2025-08-15 10:30:00 EDT")
        self.assertEqual(row.site_location.identifier, "ATL")
        self.assertEqual(row.site_location.city, "Atlanta")
        self.assertEqual(row.impact_reason, failure_codes.IMPACT_IN_BUSINESS_HOURS)

    def test_unresolved_site_is_kept_with_impact_no(self) -> None:
        row = self._classified()[0].findings[1]

        self.assertEqual(row.business_hours_impact, BusinessHoursImpact.NO)
        self.assertIsNone(row.timezone)
        self.assertIsNone(row.site_location)
        self.assertEqual(row.impact_reason, failure_codes.IMPACT_TIMEZONE_UNRESOLVED)

    def test_missing_timestamp_is_no(self) -> None:
        row = self._classified()[0].findings[2]

        self.assertEqual(row.business_hours_impact, BusinessHoursImpact.NO)
        self.assertEqual(row.impact_reason, failure_codes.IMPACT_NO_TIMESTAMP)
        self.assertEqual(row.timezone, "America/Chicago")

    def test_device_label_is_used_when_site_is_unknown(self) -> None:
        row = self._classified()[1].findings[0]

        self.assertEqual(row.timezone, "America/Denver")
        self.assertEqual(row.impact_reason, failure_codes.IMPACT_WEEKEND)

    def test_evening_event_is_outside_window(self) -> None:
        row = self._classified()[1].findings[1]

        self.assertEqual(row.timezone, "Europe/London")
        self.assertEqual(row.site_location.source, "city")
        self.assertEqual(row.impact_reason, failure_codes.IMPACT_OUTSIDE_WINDOW)

    def test_classification_keeps_row_count_and_order(self) -> None:
        classified = self._classified()

        self.assertEqual([len(category.findings) for category in classified], [3, 2])
        self.assertEqual(
            [row.provenance.line_index for category in classified for row in category.findings],
            [1, 2, 3, 4, 5],
        )

    def test_summary_breakdowns(self) -> None:
        summary = BusinessImpactClassifier.summarize(self._classified())

        self.assertEqual(
            summary.by_category[0],
            ImpactBreakdown(
                key="Interface down events",
                total_events=3,
                timestamped_events=2,
                business_hours_events=1,
            ),
        )
        self.assertEqual(summary.by_category[0].percentage, 50)
        self.assertEqual(summary.by_category[1].percentage, 0)
        self.assertEqual([item.key for item in summary.by_airport], ["ATL", "DEN"])
        self.assertEqual([item.key for item in summary.by_city], ["Atlanta", "Chicago", "Denver", "London"])
        self.assertEqual(summary.unresolved_sites, ("ARVA2001 - South Bell",))
        self.assertEqual(summary.business_hours_events, 1)
        self.assertEqual(summary.total_events, 5)

    def test_unreadable_timestamp_does_not_dilute_percentage(self) -> None:
        self.interface = Category.from_rows(
            category_name=CategoryKind.INTERFACE_DOWN.value,
            kind=CategoryKind.INTERFACE_DOWN,
            rows=[
                _row(1, "ATL", "ATL-SW1", "08/15/2025 10:30"),
                _row(2, "ATL", "ATL-SW2", "TBD"),
            ],
        )

        summary = BusinessImpactClassifier.summarize(self._classified())

        interface = summary.by_category[0]
        self.assertEqual((interface.total_events, interface.timestamped_events), (2, 1))
        self.assertEqual(interface.percentage, 100)
        self.assertEqual(summary.by_airport[0].percentage, 100)


class TestImpactBreakdown(unittest.TestCase):
    def test_percentage_without_timestamps_is_zero(self) -> None:
        self.assertEqual(ImpactBreakdown("x", total_events=4, timestamped_events=0, business_hours_events=0).percentage, 0)

    def test_percentage_rounds(self) -> None:
        self.assertEqual(ImpactBreakdown("x", total_events=3, timestamped_events=3, business_hours_events=2).percentage, 67)


if __name__ == "__main__":
    unittest.main()
