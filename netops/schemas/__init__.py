"""
netops/schemas package marker.
"""

from netops.schemas.report import (
    AirportKPIResponse,
    BusinessImpactResponse,
    CategoryResponse,
    DiagnosticsResponse,
    FindingResponse,
    ImpactBreakdownResponse,
    ProvenanceResponse,
    ReportResponse,
)

__all__ = [
    "AirportKPIResponse",
    "BusinessImpactResponse",
    "CategoryResponse",
    "DiagnosticsResponse",
    "FindingResponse",
    "ImpactBreakdownResponse",
    "ProvenanceResponse",
    "ReportResponse",
]
