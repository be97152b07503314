"""
netops/services/pipeline_service.py

End-to-end findings pipeline for one report document.

Stages
------
detect      registered tables and their data rows (parsing.detect)
map         rows to CanonicalRow per category family (mappers.row_mapper)
merge       same-named categories combined, provenance duplicates removed
filter      non-zero, reporting-period and provenance guards
classify    site timezone and business-hours impact per finding
finalize    severity, ordering, top-N truncation, category priority

Only an absent page sequence is a hard failure. Every other problem is
counted in PipelineDiagnostics and the run continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Sequence

import requests

from netops.config import (
    get_airport_lookup_settings,
    get_external_http_settings,
    get_parser_settings,
)
from netops.connectors.airport_dataset_connector import AirportDatasetConnector
from netops.connectors.airport_lookup_connector import AirportLookupConnector
from netops.domain.airport import AirportRecord
from netops.domain.diagnostics import MappingFailure, PipelineDiagnostics
from netops.domain.report import Category, CanonicalRow, Page, TimeWindow
from netops.logging_utils import log_event
from netops.mappers.row_mapper import RowMapper
from netops.parsing.detect import DEFAULT_HEADER_WINDOW, DetectionMode, detect_tables, missing_categories
from netops.parsing.pages import as_pages
from netops.parsing.registry import REGISTRY, TableDefinition
from netops.rate_limiter import ReservoirRateLimiter
from netops.resolvers.airport_index import build_airport_index, build_fallback_index
from netops.resolvers.airport_resolver import AirportTimezoneResolver
from netops.resolvers.cache import AirportCityMap, TimezoneLookupCache
from netops.resolvers.city_matcher import CityMatcher
from netops.resolvers.site_resolver import SiteTimezoneResolver
from netops.services.aggregation_service import DEFAULT_TOP_N, CategoryAggregator
from netops.services.airport_kpi_service import AirportKPIs, calculate_airport_kpis
from netops.services.business_impact_service import BusinessImpactClassifier, ImpactSummary
from netops.services.ranking import RankedFinding, rank_top_across_all
from netops.services.report_metadata import (
    ReportType,
    classify_report_type,
    format_parser_diagnostics,
    generate_report_title,
    strategy_order_for,
)
from netops.temporal.business_hours import BusinessWindow
from netops.temporal.policies import BusinessHoursPolicy
from netops.temporal.timestamps import NaiveTimestampPolicy
from netops.validators.guards import apply_filters

logger = logging.getLogger(__name__)


class MissingPagesError(ValueError):
    """
    Raised when the pipeline is called without a page sequence.
    """


@dataclass(frozen=True)
class PipelineResult:
    """
    Output of one pipeline run.

    `categories` is the finalized, truncated view; `all_categories` keeps
    every kept finding after classification.
    """

    document_id: str | None
    report_title: str
    report_type: ReportType
    categories: tuple[Category, ...]
    all_categories: tuple[Category, ...]
    top_findings: tuple[RankedFinding, ...]
    impact: ImpactSummary
    diagnostics: PipelineDiagnostics
    diagnostics_text: str
    airport_kpis: AirportKPIs | None = None

    @property
    def findings(self) -> list[CanonicalRow]:
        return [row for category in self.categories for row in category.findings]


class FindingsPipeline:
    """
    Wires detector, mapper, guards, classifier and aggregator for one run.

    Resolver caches are owned by the caller and shared across runs.
    """

    def __init__(
        self,
        *,
        resolver: SiteTimezoneResolver,
        mapper: RowMapper | None = None,
        aggregator: CategoryAggregator | None = None,
        business_hours_policy: BusinessHoursPolicy | None = None,
        registry: tuple[TableDefinition, ...] = REGISTRY,
        detection_mode: DetectionMode = DetectionMode.FLEXIBLE,
        header_window: int = DEFAULT_HEADER_WINDOW,
        top_n: int | None = DEFAULT_TOP_N,
        filter_zero: bool = True,
        enforce_period: bool = True,
        require_provenance: bool = True,
        airport_index: Mapping[str, AirportRecord] | None = None,
        airport_cities: AirportCityMap | None = None,
    ) -> None:
        self._resolver = resolver
        self._mapper = mapper or RowMapper()
        self._aggregator = aggregator or CategoryAggregator()
        self._policy = business_hours_policy or BusinessHoursPolicy()
        self._registry = registry
        self._detection_mode = detection_mode
        self._header_window = header_window
        self._top_n = top_n
        self._filter_zero = filter_zero
        self._enforce_period = enforce_period
        self._require_provenance = require_provenance
        self._airport_index = dict(airport_index) if airport_index is not None else build_fallback_index()
        self._airport_cities = airport_cities

    def run(
        self,
        pages: Sequence[Page | str] | None,
        time_window: TimeWindow | None = None,
        *,
        document_id: str | None = None,
        file_name: str = "",
        top_n: int | None = None,
        untruncated: bool = False,
    ) -> PipelineResult:
        if pages is None:
            raise MissingPagesError("A page sequence is required to run the findings pipeline.")
        page_list = as_pages(pages)
        limit = None if untruncated else (top_n if top_n is not None else self._top_n)

        tables = detect_tables(
            page_list,
            self._registry,
            mode=self._detection_mode,
            header_window=self._header_window,
        )
        raw_rows = sum(len(table.rows) for table in tables)

        mapped: list[Category] = []
        failures: list[MappingFailure] = []
        for table in tables:
            outcome = self._mapper.map_table(table)
            failures.extend(outcome.failures)
            if outcome.rows:
                mapped.append(
                    Category.from_rows(
                        category_name=outcome.category_name,
                        rows=outcome.rows,
                        kind=outcome.kind,
                    )
                )
        mapped_rows = sum(len(category.findings) for category in mapped)

        merge = self._aggregator.merge(mapped)
        filtered = apply_filters(
            merge.categories,
            time_window,
            filter_zero=self._filter_zero,
            enforce_period=self._enforce_period,
            require_provenance=self._require_provenance,
        )

        report_type = classify_report_type(filtered.categories, file_name)
        classifier = BusinessImpactClassifier(
            self._resolver.with_strategy_order(strategy_order_for(report_type)),
            self._policy,
        )
        classified = classifier.classify(filtered.categories)
        impact = classifier.summarize(classified)

        finalized = self._aggregator.finalize(classified, top_n=limit)
        all_findings = self._aggregator.finalize(classified, top_n=None)

        diagnostics = PipelineDiagnostics(
            tables_detected=len(tables),
            raw_rows=raw_rows,
            mapped_rows=mapped_rows,
            duplicates_removed=merge.duplicates_removed,
            filter_counts=filtered.counts,
            mapping_failures=tuple(failures),
            missing_categories=tuple(missing_categories(tables, self._registry)),
            unresolved_sites=impact.unresolved_sites,
        )

        airport_kpis = None
        if report_type is ReportType.SIGNATURE_AVIATION:
            airport_kpis = calculate_airport_kpis(
                all_findings,
                self._airport_index,
                airport_cities=self._airport_cities,
                document_text="\n".join(page.text for page in page_list),
            )

        result = PipelineResult(
            document_id=document_id,
            report_title=generate_report_title(file_name),
            report_type=report_type,
            categories=tuple(finalized),
            all_categories=tuple(all_findings),
            top_findings=tuple(rank_top_across_all(all_findings)),
            impact=impact,
            diagnostics=diagnostics,
            diagnostics_text=format_parser_diagnostics(finalized, raw_rows, filtered.counts),
            airport_kpis=airport_kpis,
        )

        log_event(
            logger,
            logging.INFO,
            "pipeline_completed",
            document_id=document_id,
            report_type=report_type.value,
            tables=len(tables),
            raw_rows=raw_rows,
            kept=filtered.counts.kept,
            mapping_failures=len(failures),
            business_hours=impact.business_hours_events,
        )
        return result


def build_default_pipeline(
    *,
    session: requests.Session | None = None,
    load_airport_dataset: bool = False,
) -> FindingsPipeline:
    """
    Build a pipeline from environment settings.

    The airport lookup connector is attached only when enabled and an API key
    is configured; otherwise airport codes resolve from the static table.
    """

    parser_settings = get_parser_settings()
    airport_settings = get_airport_lookup_settings()
    http_settings = get_external_http_settings()

    limiter = ReservoirRateLimiter(
        rate_limit_per_second=http_settings.rate_limit_per_second,
        reservoir=http_settings.burst_reservoir,
    )

    lookup = None
    if airport_settings.enabled and airport_settings.api_key:
        lookup = AirportLookupConnector(
            settings=airport_settings,
            http_settings=http_settings,
            session=session,
            rate_limiter=limiter,
        )
    else:
        logger.info("Airport lookup service disabled, using static airport table")

    dataset = None
    if load_airport_dataset:
        dataset = AirportDatasetConnector(
            settings=airport_settings,
            http_settings=http_settings,
            session=session,
            rate_limiter=limiter,
        )
    airport_index = build_airport_index(dataset)

    airport_cities = AirportCityMap()
    resolver = SiteTimezoneResolver(
        city_matcher=CityMatcher(),
        airport_resolver=AirportTimezoneResolver(
            cache=TimezoneLookupCache(),
            lookup=lookup,
            fallback_index=airport_index,
            airport_cities=airport_cities,
        ),
    )

    policy = BusinessHoursPolicy(
        window=BusinessWindow(
            start=parser_settings.business_hours_start,
            end=parser_settings.business_hours_end,
        ),
        naive_policy=NaiveTimestampPolicy(parser_settings.naive_timestamps),
    )

    return FindingsPipeline(
        resolver=resolver,
        business_hours_policy=policy,
        detection_mode=DetectionMode(parser_settings.detection_mode),
        header_window=parser_settings.header_window_lines,
        top_n=parser_settings.top_n,
        filter_zero=parser_settings.filter_zero,
        enforce_period=parser_settings.enforce_period,
        require_provenance=parser_settings.require_provenance,
        airport_index=airport_index,
        airport_cities=airport_cities,
    )


def run_pipeline(
    pages: Sequence[Page | str] | None,
    time_window: TimeWindow | None = None,
    *,
    document_id: str | None = None,
    file_name: str = "",
) -> PipelineResult:
    return build_default_pipeline().run(
        pages,
        time_window,
        document_id=document_id,
        file_name=file_name,
    )
