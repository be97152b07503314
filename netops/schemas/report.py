"""
netops/schemas/report.py

Response schemas for a findings pipeline run.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from netops.domain.report import Category, CanonicalRow
from netops.services.airport_kpi_service import AirportKPIs, aviation_narrative, dashboard_table
from netops.services.business_impact_service import ImpactBreakdown
from netops.services.pipeline_service import PipelineResult
from netops.services.summaries import summary_line


class ProvenanceResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    page: int = Field(..., ge=1)
    line_index: int = Field(..., ge=0)
    snippet: str = Field(..., max_length=240)


class FindingResponse(BaseModel):
    """
    One finding as returned to callers.
    """

    model_config = ConfigDict(extra="forbid")

    site: str
    device: str
    interface: str
    occurrences: int = Field(..., ge=0)
    last_occurred: str | None = None
    trend: str
    avg_duration: float = Field(..., ge=0.0)
    error_type: str
    impacted_clients: int = Field(..., ge=0)
    business_hours_impact: Literal["YES", "NO"]
    impact_reason: str | None = None
    severity: Literal["critical", "major", "minor"] | None = None
    timezone: str | None = None
    local_time: str | None = None
    resolved_by: Literal["city", "airport"] | None = None
    summary_line: str
    metrics: dict[str, float] = Field(default_factory=dict)
    attributes: dict[str, str] = Field(default_factory=dict)
    provenance: ProvenanceResponse

    @classmethod
    def from_row(cls, row: CanonicalRow, category: Category) -> FindingResponse:
        if row.provenance is None:
            raise ValueError("Findings in a response must carry provenance.")
        return cls(
            site=row.site,
            device=row.device,
            interface=row.interface,
            occurrences=row.occurrences,
            last_occurred=row.last_occurred,
            trend=row.trend,
            avg_duration=row.avg_duration,
            error_type=row.error_type,
            impacted_clients=row.impacted_clients,
            business_hours_impact=row.business_hours_impact.value,
            impact_reason=row.impact_reason,
            severity=row.severity.value if row.severity is not None else None,
            timezone=row.timezone,
            local_time=row.local_time,
            resolved_by=row.site_location.source if row.site_location is not None else None,
            summary_line=summary_line(row, category.kind, category.category_name),
            metrics=dict(row.metrics),
            attributes={key: str(value) for key, value in row.attributes.items()},
            provenance=ProvenanceResponse(
                page=row.provenance.page,
                line_index=row.provenance.line_index,
                snippet=row.provenance.snippet,
            ),
        )


class CategoryResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category_name: str
    total_findings_count: int = Field(..., ge=0)
    findings: list[FindingResponse] = Field(default_factory=list)


class ImpactBreakdownResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    key: str
    total_events: int = Field(..., ge=0)
    timestamped_events: int = Field(..., ge=0)
    business_hours_events: int = Field(..., ge=0)
    percentage: int = Field(..., ge=0, le=100)

    @classmethod
    def from_breakdown(cls, breakdown: ImpactBreakdown) -> ImpactBreakdownResponse:
        return cls(
            key=breakdown.key,
            total_events=breakdown.total_events,
            timestamped_events=breakdown.timestamped_events,
            business_hours_events=breakdown.business_hours_events,
            percentage=breakdown.percentage,
        )


class BusinessImpactResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    by_category: list[ImpactBreakdownResponse] = Field(default_factory=list)
    by_site: list[ImpactBreakdownResponse] = Field(default_factory=list)
    by_city: list[ImpactBreakdownResponse] = Field(default_factory=list)
    by_airport: list[ImpactBreakdownResponse] = Field(default_factory=list)
    unresolved_sites: list[str] = Field(default_factory=list)


class DiagnosticsResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tables_detected: int = Field(..., ge=0)
    raw_rows: int = Field(..., ge=0)
    mapped_rows: int = Field(..., ge=0)
    mapping_failures: int = Field(..., ge=0)
    duplicates_removed: int = Field(..., ge=0)
    kept: int = Field(..., ge=0)
    dropped_zero: int = Field(..., ge=0)
    dropped_period: int = Field(..., ge=0)
    dropped_no_provenance: int = Field(..., ge=0)
    missing_categories: list[str] = Field(default_factory=list)
    text: str = ""


class AirportKPIResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_airports_with_issues: int = Field(..., ge=0)
    airports_affected_during_business_hours: int = Field(..., ge=0)
    airport_operations_priority_index: str
    tier_breakdown: dict[str, str] = Field(default_factory=dict)
    airports_mentioned: list[str] = Field(default_factory=list)
    narrative: str = ""
    dashboard_table: list[dict[str, str]] = Field(default_factory=list)

    @classmethod
    def from_kpis(cls, kpis: AirportKPIs) -> AirportKPIResponse:
        return cls(
            total_airports_with_issues=kpis.total_airports_with_issues,
            airports_affected_during_business_hours=kpis.airports_affected_during_business_hours,
            airport_operations_priority_index=kpis.airport_operations_priority_index,
            tier_breakdown=dict(kpis.tier_breakdown),
            airports_mentioned=list(kpis.airports_mentioned),
            narrative=aviation_narrative(kpis),
            dashboard_table=dashboard_table(kpis),
        )


class ReportResponse(BaseModel):
    """
    Full response for one analyzed report.
    """

    model_config = ConfigDict(extra="forbid")

    document_id: str | None = None
    report_title: str
    report_type: str
    categories: list[CategoryResponse] = Field(default_factory=list)
    top_findings: list[FindingResponse] = Field(default_factory=list)
    business_impact: BusinessImpactResponse
    diagnostics: DiagnosticsResponse
    airport_kpis: AirportKPIResponse | None = None

    @classmethod
    def from_result(cls, result: PipelineResult) -> ReportResponse:
        categories_by_name = {category.category_name: category for category in result.all_categories}
        counts = result.diagnostics.filter_counts
        return cls(
            document_id=result.document_id,
            report_title=result.report_title,
            report_type=result.report_type.value,
            categories=[
                CategoryResponse(
                    category_name=category.category_name,
                    total_findings_count=category.total_findings_count,
                    findings=[FindingResponse.from_row(row, category) for row in category.findings],
                )
                for category in result.categories
            ],
            top_findings=[
                FindingResponse.from_row(ranked.row, categories_by_name[ranked.category_name])
                for ranked in result.top_findings
            ],
            business_impact=BusinessImpactResponse(
                by_category=[ImpactBreakdownResponse.from_breakdown(item) for item in result.impact.by_category],
                by_site=[ImpactBreakdownResponse.from_breakdown(item) for item in result.impact.by_site],
                by_city=[ImpactBreakdownResponse.from_breakdown(item) for item in result.impact.by_city],
                by_airport=[ImpactBreakdownResponse.from_breakdown(item) for item in result.impact.by_airport],
                unresolved_sites=list(result.impact.unresolved_sites),
            ),
            diagnostics=DiagnosticsResponse(
                tables_detected=result.diagnostics.tables_detected,
                raw_rows=result.diagnostics.raw_rows,
                mapped_rows=result.diagnostics.mapped_rows,
                mapping_failures=result.diagnostics.mapping_failure_count,
                duplicates_removed=result.diagnostics.duplicates_removed,
                kept=counts.kept,
                dropped_zero=counts.dropped_zero,
                dropped_period=counts.dropped_period,
                dropped_no_provenance=counts.dropped_no_provenance,
                missing_categories=list(result.diagnostics.missing_categories),
                text=result.diagnostics_text,
            ),
            airport_kpis=AirportKPIResponse.from_kpis(result.airport_kpis) if result.airport_kpis else None,
        )
