"""
netops/services/aggregation_service.py

Category aggregation: merge, de-duplication, severity ordering and top-N.

Steps
-----
merge      same-named categories are combined in first-seen order; rows with
           the same provenance key (page:line_index:snippet) are kept once
finalize   severity assigned by the ranking policy, stable sort by severity
           rank desc then occurrences desc, true total recorded, findings
           truncated to top-N, categories ordered by fixed priority
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from netops.domain.report import Category, CanonicalRow, CategoryKind
from netops.services.ranking import (
    DefaultSeverityPolicy,
    SeverityPolicy,
    category_priority,
    severity_rank,
)

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3


@dataclass(frozen=True)
class MergeResult:
    categories: tuple[Category, ...]
    duplicates_removed: int


class CategoryAggregator:
    """
    Stateless aggregator; the severity policy is injected.
    """

    def __init__(self, severity_policy: SeverityPolicy | None = None) -> None:
        self._severity_policy = severity_policy or DefaultSeverityPolicy()

    def merge(self, categories: Sequence[Category]) -> MergeResult:
        order: list[str] = []
        kinds: dict[str, CategoryKind] = {}
        rows_by_name: dict[str, list[CanonicalRow]] = {}
        seen_by_name: dict[str, set[str]] = {}
        duplicates = 0

        for category in categories:
            name = category.category_name
            if name not in rows_by_name:
                order.append(name)
                kinds[name] = category.kind
                rows_by_name[name] = []
                seen_by_name[name] = set()
            for row in category.findings:
                key = row.provenance_key
                if key is not None:
                    if key in seen_by_name[name]:
                        duplicates += 1
                        continue
                    seen_by_name[name].add(key)
                rows_by_name[name].append(row)

        if duplicates:
            logger.info("Duplicate findings removed count=%s", duplicates)

        merged = tuple(
            Category.from_rows(category_name=name, rows=rows_by_name[name], kind=kinds[name])
            for name in order
            if rows_by_name[name]
        )
        return MergeResult(categories=merged, duplicates_removed=duplicates)

    def finalize(self, categories: Sequence[Category], top_n: int | None = DEFAULT_TOP_N) -> list[Category]:
        """
        Rank findings within each category and order the categories.

        `top_n=None` keeps every finding. `total_findings_count` always holds
        the pre-truncation count.
        """

        finalized: list[Category] = []
        for category in categories:
            rows = self._severity_policy.assign(category.kind, category.findings)
            rows.sort(key=lambda row: (-severity_rank(row), -row.occurrences))
            total = max(category.total_findings_count, len(rows))
            kept = rows if top_n is None else rows[: max(0, top_n)]
            finalized.append(
                Category(
                    category_name=category.category_name,
                    findings=tuple(kept),
                    total_findings_count=total,
                    kind=category.kind,
                )
            )

        # sorted() is stable: same-priority categories keep input order.
        return sorted(finalized, key=lambda category: category_priority(category.kind))

    def aggregate(self, categories: Sequence[Category], top_n: int | None = DEFAULT_TOP_N) -> list[Category]:
        return self.finalize(self.merge(categories).categories, top_n=top_n)
