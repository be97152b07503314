from __future__ import annotations

import unittest

from netops import failure_codes
from netops.domain.report import CanonicalRow, Category, CategoryKind, Provenance, TimeWindow
from netops.validators.guards import apply_filters, has_required_values, rejection_reason

AUGUST = TimeWindow.from_iso("2025-08-01", "2025-08-31")


def _row(line_index: int = 0, snippet: str | None = None, **overrides) -> CanonicalRow:
    values = {
        "site": "SFS-ATL",
        "device": "atl-sw1",
        "occurrences": 3,
        "last_occurred": "08/15/2025 10:30",
    }
    values.update(overrides)
    if "provenance" not in values:
        text = snippet if snippet is not None else f"row {line_index}"
        values["provenance"] = Provenance(page=1, line_index=line_index, snippet=text)
    return CanonicalRow(**values)


def _category(kind: CategoryKind, rows: list[CanonicalRow]) -> Category:
    return Category.from_rows(category_name=kind.value, rows=rows, kind=kind)


class TestNonZeroRules(unittest.TestCase):
    def test_device_families_need_occurrences(self) -> None:
        self.assertFalse(has_required_values(CategoryKind.INTERFACE_DOWN, _row(occurrences=0)))
        self.assertTrue(has_required_values(CategoryKind.INTERFACE_DOWN, _row(occurrences=1)))

    def test_port_errors_accept_error_metrics(self) -> None:
        row = _row(occurrences=0, metrics={"errors": 152.0})

        self.assertTrue(has_required_values(CategoryKind.PORT_ERRORS, row))
        self.assertFalse(has_required_values(CategoryKind.PORT_ERRORS, _row(occurrences=0)))

    def test_wifi_accepts_impacted_clients(self) -> None:
        self.assertTrue(has_required_values(CategoryKind.WIFI_ISSUES, _row(occurrences=0, impacted_clients=4)))

    def test_connected_clients_accept_weekly_counts_or_trend(self) -> None:
        self.assertTrue(
            has_required_values(CategoryKind.CONNECTED_CLIENTS, _row(occurrences=0, metrics={"clients_week2": 40.0}))
        )
        self.assertTrue(has_required_values(CategoryKind.CONNECTED_CLIENTS, _row(occurrences=0, trend="-10%")))
        self.assertFalse(has_required_values(CategoryKind.CONNECTED_CLIENTS, _row(occurrences=0)))

    def test_wan_accepts_utilization_averages(self) -> None:
        self.assertTrue(has_required_values(CategoryKind.WAN_UTILIZATION, _row(occurrences=0, metrics={"up_avg": 41.0})))


class TestRejectionReason(unittest.TestCase):
    def test_zero_rule_wins_over_period_rule(self) -> None:
        row = _row(occurrences=0, last_occurred="09/15/2025 10:00")

        self.assertEqual(
            rejection_reason(CategoryKind.INTERFACE_DOWN, row, AUGUST),
            failure_codes.DROPPED_ZERO,
        )

    def test_out_of_period(self) -> None:
        row = _row(last_occurred="09/15/2025 10:00")

        self.assertEqual(rejection_reason(CategoryKind.INTERFACE_DOWN, row, AUGUST), failure_codes.DROPPED_PERIOD)

    def test_missing_or_unparseable_timestamp_is_kept(self) -> None:
        self.assertIsNone(rejection_reason(CategoryKind.INTERFACE_DOWN, _row(last_occurred=None), AUGUST))
        self.assertIsNone(rejection_reason(CategoryKind.INTERFACE_DOWN, _row(last_occurred="last week"), AUGUST))

    def test_provenance_is_required(self) -> None:
        self.assertEqual(
            rejection_reason(CategoryKind.INTERFACE_DOWN, _row(provenance=None), AUGUST),
            failure_codes.DROPPED_NO_PROVENANCE,
        )
        self.assertEqual(
            rejection_reason(CategoryKind.INTERFACE_DOWN, _row(snippet="   "), AUGUST),
            failure_codes.DROPPED_NO_PROVENANCE,
        )

    def test_disabled_rules_do_not_reject(self) -> None:
        row = _row(occurrences=0, last_occurred="09/15/2025 10:00", provenance=None)

        self.assertIsNone(
            rejection_reason(
                CategoryKind.INTERFACE_DOWN,
                row,
                AUGUST,
                filter_zero=False,
                enforce_period=False,
                require_provenance=False,
            )
        )


class TestApplyFilters(unittest.TestCase):
    def setUp(self) -> None:
        self.interface = _category(
            CategoryKind.INTERFACE_DOWN,
            [
                _row(0),
                _row(1, occurrences=0),
                _row(2, last_occurred="09/15/2025 10:00"),
                _row(3, provenance=None),
            ],
        )
        self.empty_after_filter = _category(CategoryKind.SITE_UNREACHABLE, [_row(4, occurrences=0)])

    def test_counts_per_reason(self) -> None:
        result = apply_filters([self.interface, self.empty_after_filter], AUGUST)

        self.assertEqual(result.counts.kept, 1)
        self.assertEqual(result.counts.dropped_zero, 2)
        self.assertEqual(result.counts.dropped_period, 1)
        self.assertEqual(result.counts.dropped_no_provenance, 1)
        self.assertEqual(result.counts.dropped_total, 4)

    def test_empty_categories_removed_and_totals_recomputed(self) -> None:
        result = apply_filters([self.interface, self.empty_after_filter], AUGUST)

        self.assertEqual([category.category_name for category in result.categories], ["Interface down events"])
        self.assertEqual(result.categories[0].total_findings_count, 1)

    def test_inputs_are_not_changed(self) -> None:
        apply_filters([self.interface], AUGUST)

        self.assertEqual(len(self.interface.findings), 4)
        self.assertEqual(self.interface.total_findings_count, 4)

    def test_second_pass_drops_nothing(self) -> None:
        first = apply_filters([self.interface, self.empty_after_filter], AUGUST)
        second = apply_filters(first.categories, AUGUST)

        self.assertEqual(second.categories, first.categories)
        self.assertEqual(second.counts.dropped_total, 0)
        self.assertEqual(second.counts.kept, first.counts.kept)

    def test_without_window_period_rule_is_inactive(self) -> None:
        result = apply_filters([self.interface], None)

        self.assertEqual(result.counts.dropped_period, 0)
        self.assertEqual(result.counts.kept, 2)


if __name__ == "__main__":
    unittest.main()
