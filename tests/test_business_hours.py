from __future__ import annotations

import unittest
from datetime import datetime, timezone

from netops import failure_codes
from netops.domain.report import BusinessHoursImpact, TimeWindow
from netops.temporal.business_hours import BusinessWindow, is_business_hours, to_local_string
from netops.temporal.policies import BusinessHoursPolicy, PeriodBoundPolicy
from netops.temporal.timestamps import (
    NaiveTimestampPolicy,
    TimestampShape,
    is_missing_timestamp,
    parse_report_timestamp,
)

NEW_YORK = "America/New_York"


class TestParseReportTimestamp(unittest.TestCase):
    def test_iso_instant_with_z_is_aware_utc(self) -> None:
        parsed = parse_report_timestamp("2025-08-15T14:30:00Z")

        self.assertIsNotNone(parsed)
        self.assertEqual(parsed.shape, TimestampShape.ISO_INSTANT)
        self.assertEqual(parsed.as_utc(), datetime(2025, 8, 15, 14, 30, tzinfo=timezone.utc))

    def test_iso_without_offset_is_read_as_utc(self) -> None:
        parsed = parse_report_timestamp("2025-08-15T14:30:00")

        self.assertFalse(parsed.is_naive)
        self.assertEqual(parsed.as_utc().hour, 14)

    def test_month_day_year_with_time_stays_naive(self) -> None:
        parsed = parse_report_timestamp("08/15/2025 10:30")

        self.assertEqual(parsed.shape, TimestampShape.DATE_TIME)
        self.assertTrue(parsed.is_naive)
        self.assertTrue(parsed.has_time_of_day)

    def test_twelve_hour_clock(self) -> None:
        parsed = parse_report_timestamp("08/15/2025 02:15 PM")

        self.assertEqual(parsed.value.hour, 14)

    def test_date_only_has_no_time_of_day(self) -> None:
        parsed = parse_report_timestamp("08/15/2025")

        self.assertEqual(parsed.shape, TimestampShape.DATE_ONLY)
        self.assertFalse(parsed.has_time_of_day)

    def test_malformed_and_missing_values_return_none(self) -> None:
        for value in ("not a date", "13/45/2025 10:00", "", "N/A", None):
            with self.subTest(value=value):
                self.assertIsNone(parse_report_timestamp(value))

    def test_missing_markers(self) -> None:
        self.assertTrue(is_missing_timestamp("n/a"))
        self.assertTrue(is_missing_timestamp("  "))
        self.assertFalse(is_missing_timestamp("08/15/2025"))


class TestIsBusinessHours(unittest.TestCase):
    def test_window_start_is_positive(self) -> None:
        self.assertTrue(is_business_hours("08/18/2025 09:00", NEW_YORK))

    def test_one_minute_before_start_is_negative(self) -> None:
        self.assertFalse(is_business_hours("08/18/2025 08:59", NEW_YORK))

    def test_window_end_is_exclusive(self) -> None:
        self.assertTrue(is_business_hours("08/18/2025 17:59", NEW_YORK))
        self.assertFalse(is_business_hours("08/18/2025 18:00", NEW_YORK))

    def test_saturday_is_always_negative(self) -> None:
        self.assertFalse(is_business_hours("08/16/2025 10:00", NEW_YORK))

    def test_date_only_is_never_positive(self) -> None:
        self.assertFalse(is_business_hours("08/18/2025", NEW_YORK))

    def test_unknown_or_missing_zone_is_negative(self) -> None:
        self.assertFalse(is_business_hours("08/18/2025 10:00", "Mars/Olympus_Mons"))
        self.assertFalse(is_business_hours("08/18/2025 10:00", None))

    def test_malformed_timestamp_is_negative(self) -> None:
        self.assertFalse(is_business_hours("yesterday morning", NEW_YORK))

    def test_utc_instant_is_converted_to_local(self) -> None:
        # 13:30 UTC is 09:30 EDT; 12:30 UTC is 08:30 EDT.
        self.assertTrue(is_business_hours("2025-08-18T13:30:00Z", NEW_YORK))
        self.assertFalse(is_business_hours("2025-08-18T12:30:00Z", NEW_YORK))

    def test_naive_utc_policy_shifts_wall_clock(self) -> None:
        self.assertFalse(
            is_business_hours("08/18/2025 10:30", NEW_YORK, naive_policy=NaiveTimestampPolicy.UTC)
        )
        self.assertTrue(
            is_business_hours("08/18/2025 14:30", NEW_YORK, naive_policy=NaiveTimestampPolicy.UTC)
        )

    def test_custom_window(self) -> None:
        window = BusinessWindow(start=7, end=15)

        self.assertTrue(is_business_hours("08/18/2025 07:00", NEW_YORK, window))
        self.assertFalse(is_business_hours("08/18/2025 15:00", NEW_YORK, window))

    def test_invalid_window_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            BusinessWindow(start=18, end=9)


class TestToLocalString(unittest.TestCase):
    def test_formats_local_time_with_zone_abbreviation(self) -> None:
        self.assertEqual(
            to_local_string("2025-08-15T14:30:00Z", NEW_YORK),
            "2025-08-15 10:30:00 EDT",
        )

    def test_date_only_and_unknown_zone_return_none(self) -> None:
        self.assertIsNone(to_local_string("08/15/2025", NEW_YORK))
        self.assertIsNone(to_local_string("08/15/2025 10:30", "Nowhere/City"))


class TestPeriodBoundPolicy(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = PeriodBoundPolicy()
        self.window = TimeWindow.from_iso("2025-08-01", "2025-08-31")

    def test_end_date_is_rounded_to_end_of_day(self) -> None:
        self.assertTrue(self.policy.admits("08/31/2025 23:30", self.window))

    def test_outside_window_is_rejected(self) -> None:
        self.assertTrue(self.policy.is_out_of_bounds("09/15/2025", self.window))
        self.assertTrue(self.policy.is_out_of_bounds("07/31/2025 23:59", self.window))

    def test_missing_and_unparseable_fail_open(self) -> None:
        self.assertTrue(self.policy.admits(None, self.window))
        self.assertTrue(self.policy.admits("sometime last week", self.window))

    def test_no_window_admits_everything(self) -> None:
        self.assertTrue(self.policy.admits("01/01/1999", None))


class TestBusinessHoursPolicy(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = BusinessHoursPolicy()

    def test_weekday_business_hour_is_yes(self) -> None:
        decision = self.policy.classify("08/15/2025 10:30", NEW_YORK)

        self.assertEqual(decision.impact, BusinessHoursImpact.YES)
        self.assertEqual(decision.reason, failure_codes.IMPACT_IN_BUSINESS_HOURS)
        self.assertEqual(decision.local_time, "2025-08-15 10:30:00 EDT")

    def test_failures_are_closed_with_reason(self) -> None:
        cases = (
            (None, NEW_YORK, failure_codes.IMPACT_NO_TIMESTAMP),
            ("garbage", NEW_YORK, failure_codes.IMPACT_UNPARSEABLE_TIMESTAMP),
            ("08/15/2025", NEW_YORK, failure_codes.IMPACT_DATE_ONLY),
            ("08/15/2025 10:30", None, failure_codes.IMPACT_TIMEZONE_UNRESOLVED),
            ("08/15/2025 10:30", "Not/AZone", failure_codes.IMPACT_UNKNOWN_TIMEZONE),
            ("08/16/2025 10:30", NEW_YORK, failure_codes.IMPACT_WEEKEND),
            ("08/15/2025 20:30", NEW_YORK, failure_codes.IMPACT_OUTSIDE_WINDOW),
        )
        for last_occurred, zone, reason in cases:
            with self.subTest(last_occurred=last_occurred, zone=zone):
                decision = self.policy.classify(last_occurred, zone)
                self.assertEqual(decision.impact, BusinessHoursImpact.NO)
                self.assertEqual(decision.reason, reason)


if __name__ == "__main__":
    unittest.main()
