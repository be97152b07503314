"""
netops/domain/diagnostics.py

Counters reported by each pipeline stage.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FilterCounts:
    """
    Outcome counts of one guard pass.
    """

    kept: int = 0
    dropped_zero: int = 0
    dropped_period: int = 0
    dropped_no_provenance: int = 0

    @property
    def dropped_total(self) -> int:
        return self.dropped_zero + self.dropped_period + self.dropped_no_provenance

    def to_dict(self) -> dict[str, int]:
        return {
            "kept": self.kept,
            "dropped_zero": self.dropped_zero,
            "dropped_period": self.dropped_period,
            "dropped_no_provenance": self.dropped_no_provenance,
        }


@dataclass(frozen=True)
class MappingFailure:
    """
    One captured line the row mapper could not convert.
    """

    category_name: str
    page: int
    line_index: int
    snippet: str


@dataclass(frozen=True)
class PipelineDiagnostics:
    """
    End-of-run diagnostics for one document.
    """

    tables_detected: int = 0
    raw_rows: int = 0
    mapped_rows: int = 0
    duplicates_removed: int = 0
    filter_counts: FilterCounts = field(default_factory=FilterCounts)
    mapping_failures: tuple[MappingFailure, ...] = ()
    missing_categories: tuple[str, ...] = ()
    unresolved_sites: tuple[str, ...] = ()

    @property
    def mapping_failure_count(self) -> int:
        return len(self.mapping_failures)
