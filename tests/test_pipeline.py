"""
tests/test_pipeline.py

End-to-end pipeline tests over in-memory pages. The resolver uses the static
airport table, so nothing touches the network.
"""

from __future__ import annotations

import pytest

from netops.domain.report import BusinessHoursImpact, TimeWindow
from netops.resolvers.airport_resolver import AirportTimezoneResolver
from netops.resolvers.cache import TimezoneLookupCache
from netops.resolvers.city_matcher import CityMatcher
from netops.resolvers.site_resolver import SiteTimezoneResolver
from netops.services.pipeline_service import FindingsPipeline, MissingPagesError
from netops.services.report_metadata import ReportType

AUGUST = TimeWindow.from_iso("2025-08-01", "2025-08-31")
ATL_LINE = "ATL-SW1 experienced interface down, 5 occurrences, avg 12.3 min, 08/15/2025 10:30"


@pytest.fixture()
def pipeline() -> FindingsPipeline:
    resolver = SiteTimezoneResolver(
        city_matcher=CityMatcher(),
        airport_resolver=AirportTimezoneResolver(cache=TimezoneLookupCache()),
    )
    return FindingsPipeline(resolver=resolver)


def _interface_page(*lines: str) -> str:
    return "Interface down events\n" + "\n".join(lines) + "\n"


def test_interface_down_line_in_business_hours(pipeline: FindingsPipeline) -> None:
    result = pipeline.run([_interface_page(ATL_LINE)], AUGUST, document_id="doc-1")

    assert result.document_id == "doc-1"
    assert [category.category_name for category in result.categories] == ["Interface down events"]
    row = result.categories[0].findings[0]
    assert row.occurrences == 5
    assert row.avg_duration == pytest.approx(12.3)
    assert row.business_hours_impact is BusinessHoursImpact.YES
    assert row.timezone == "America/New_York"
    assert result.diagnostics.filter_counts.kept == 1
    assert result.diagnostics.filter_counts.dropped_total == 0


def test_row_outside_reporting_period_is_dropped(pipeline: FindingsPipeline) -> None:
    line = "ATL-SW1 experienced interface down, 5 occurrences, avg 12.3 min, 09/15/2025"

    result = pipeline.run([_interface_page(line)], AUGUST)

    assert result.categories == ()
    assert result.diagnostics.filter_counts.dropped_period == 1
    assert result.diagnostics.raw_rows == 1


def test_row_without_values_is_dropped(pipeline: FindingsPipeline) -> None:
    line = "ATL-SW1 experienced interface down, 0 occurrences, avg 12.3 min, 08/15/2025 10:30"

    result = pipeline.run([_interface_page(line)], AUGUST)

    assert result.categories == ()
    assert result.diagnostics.filter_counts.dropped_zero == 1


def test_missing_pages_is_the_only_hard_failure(pipeline: FindingsPipeline) -> None:
    with pytest.raises(MissingPagesError):
        pipeline.run(None)


def test_empty_document_produces_empty_result(pipeline: FindingsPipeline) -> None:
    result = pipeline.run([])

    assert result.categories == ()
    assert result.top_findings == ()
    assert result.diagnostics.tables_detected == 0
    assert len(result.diagnostics.missing_categories) == 11
    assert result.report_type is ReportType.GENERAL_NETWORK


def test_top_n_truncation_keeps_true_total(pipeline: FindingsPipeline) -> None:
    lines = [
        f"ATL-SW{index} experienced interface down, {index + 1} occurrences, avg 2.0 min, 08/1{index}/2025 10:30"
        for index in range(5)
    ]

    truncated = pipeline.run([_interface_page(*lines)], AUGUST)
    complete = pipeline.run([_interface_page(*lines)], AUGUST, untruncated=True)

    category = truncated.categories[0]
    assert [row.occurrences for row in category.findings] == [5, 4, 3]
    assert category.total_findings_count == 5
    assert len(truncated.all_categories[0].findings) == 5
    assert len(complete.categories[0].findings) == 5
    assert len(truncated.findings) == 3


def test_per_call_top_n(pipeline: FindingsPipeline) -> None:
    lines = [
        f"ATL-SW{index} experienced interface down, {index + 1} occurrences, avg 2.0 min, 08/1{index}/2025 10:30"
        for index in range(5)
    ]

    result = pipeline.run([_interface_page(*lines)], AUGUST, top_n=1)

    assert len(result.categories[0].findings) == 1


def test_unmappable_rows_are_counted_not_raised(pipeline: FindingsPipeline) -> None:
    result = pipeline.run([_interface_page(ATL_LINE, "NOTE SEE APPENDIX B")], AUGUST)

    assert result.diagnostics.raw_rows == 2
    assert result.diagnostics.mapped_rows == 1
    assert result.diagnostics.mapping_failure_count == 1
    assert result.diagnostics.mapping_failures[0].snippet == "NOTE SEE APPENDIX B"


def test_output_invariants_hold(pipeline: FindingsPipeline) -> None:
    pages = [
        _interface_page(ATL_LINE, "ARVA2001 - South Bell as1-arva2001-e1516Switch08/20/2025 10:2250%OPEN40.1 min.3"),
        "Site Unreachable events\nSFS-DEN  08/14/2025 22:10  INC0012345\n",
    ]

    result = pipeline.run(pages, AUGUST)

    for category in result.categories + result.all_categories:
        assert category.total_findings_count >= len(category.findings)
        for row in category.findings:
            assert row.provenance is not None
            assert row.provenance.snippet.strip()
    assert [category.category_name for category in result.categories] == [
        "Site Unreachable events",
        "Interface down events",
    ]
    assert result.impact.unresolved_sites == ("ARVA2001 - South Bell",)
    assert len(result.top_findings) == 3
    assert result.diagnostics_text.startswith("Parser Results:")


def test_aviation_report_resolves_airport_first_and_adds_kpis(pipeline: FindingsPipeline) -> None:
    line = "SFS-LHR lhr-sw1 experienced interface down, 7 occurrences, avg 3.5 min, 08/15/2025 10:30"

    result = pipeline.run([_interface_page(line)], AUGUST, file_name="Signature_Aviation_Aug.pdf")

    assert result.report_type is ReportType.SIGNATURE_AVIATION
    assert result.report_title == "Signature - Network Analysis Report"
    row = result.categories[0].findings[0]
    assert row.site_location.source == "airport"
    assert row.site_location.identifier == "LHR"
    assert row.business_hours_impact is BusinessHoursImpact.YES
    assert result.airport_kpis is not None
    assert result.airport_kpis.total_airports_with_issues == 1
    assert result.airport_kpis.airports_affected_during_business_hours == 1
    assert result.airport_kpis.airports_mentioned == ("LHR",)


def test_non_aviation_report_has_no_airport_kpis(pipeline: FindingsPipeline) -> None:
    result = pipeline.run([_interface_page(ATL_LINE)], AUGUST, file_name="Acme_report.pdf")

    assert result.airport_kpis is None
    assert result.report_title == "Acme - Network Analysis Report"
