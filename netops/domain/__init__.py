"""
netops/domain package marker.
"""

from netops.domain.airport import AirportRecord
from netops.domain.diagnostics import FilterCounts, MappingFailure, PipelineDiagnostics
from netops.domain.report import (
    BusinessHoursImpact,
    CanonicalRow,
    Category,
    CategoryKind,
    DetectedTable,
    Page,
    Provenance,
    RawLine,
    Severity,
    SiteLocation,
    TimeWindow,
)

__all__ = [
    "AirportRecord",
    "BusinessHoursImpact",
    "CanonicalRow",
    "Category",
    "CategoryKind",
    "DetectedTable",
    "FilterCounts",
    "MappingFailure",
    "Page",
    "PipelineDiagnostics",
    "Provenance",
    "RawLine",
    "Severity",
    "SiteLocation",
    "TimeWindow",
]
