"""
netops/services/report_metadata.py

Report-level metadata: report type, title, resolver strategy order and the
human-readable parser diagnostics block.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Sequence

from netops.domain.diagnostics import FilterCounts
from netops.domain.report import Category
from netops.resolvers.site_resolver import DEFAULT_STRATEGY_ORDER, ResolutionStrategy
from netops.services.ranking import CATEGORY_PRIORITY

DEFAULT_REPORT_TITLE = "Network Analysis Report"

_EXTENSION_RE = re.compile(r"\.(pdf|txt)$", re.IGNORECASE)
_COPY_SUFFIX_RE = re.compile(r"\s*\(\d+\)\s*$")
_CUSTOMER_RE = re.compile(r"^([^_-]+)")
_NAME_SUFFIXES = (
    re.compile(r"_short_executive_report$", re.IGNORECASE),
    re.compile(r"_executive_report$", re.IGNORECASE),
    re.compile(r"_report$", re.IGNORECASE),
    re.compile(r"_short$", re.IGNORECASE),
)


class ReportType(str, Enum):
    AVI_SPL = "AVI-SPL"
    SIGNATURE_AVIATION = "Signature Aviation"
    ELAUWIT_SITES = "ElauwitSites"
    WIFI_FOCUSED = "Wi-Fi Focused"
    NETWORK_INFRASTRUCTURE = "Network Infrastructure"
    GENERAL_NETWORK = "General Network"


def classify_report_type(categories: Sequence[Category], file_name: str = "") -> ReportType:
    """
    Classify a report from its file name first, then its category names.
    """

    lowered_file = (file_name or "").lower()
    names = [category.category_name.lower() for category in categories]

    if "avi-spl" in lowered_file or "avispl" in lowered_file or any("avi" in name for name in names):
        return ReportType.AVI_SPL
    if (
        "signature" in lowered_file
        or "aviation" in lowered_file
        or any("airport" in name or "flight" in name for name in names)
    ):
        return ReportType.SIGNATURE_AVIATION
    if "elauwit" in lowered_file or any("arva" in name for name in names):
        return ReportType.ELAUWIT_SITES
    if any("wifi" in name or "wi-fi" in name for name in names):
        return ReportType.WIFI_FOCUSED
    if any("port" in name or "interface" in name for name in names):
        return ReportType.NETWORK_INFRASTRUCTURE
    return ReportType.GENERAL_NETWORK


def strategy_order_for(report_type: ReportType) -> tuple[ResolutionStrategy, ...]:
    """
    Airport-coded sites resolve airport-first; every other report city-first.
    """

    if report_type is ReportType.SIGNATURE_AVIATION:
        return (ResolutionStrategy.AIRPORT, ResolutionStrategy.CITY)
    return DEFAULT_STRATEGY_ORDER


def generate_report_title(file_name: str | None) -> str:
    """
    "Acme_short_executive_report (7).pdf" -> "Acme - Network Analysis Report"
    """

    if not file_name or not file_name.strip():
        return DEFAULT_REPORT_TITLE
    name = _EXTENSION_RE.sub("", file_name.strip())
    name = _COPY_SUFFIX_RE.sub("", name)
    customer_match = _CUSTOMER_RE.match(name)
    customer = customer_match.group(1) if customer_match else name
    for suffix in _NAME_SUFFIXES:
        customer = suffix.sub("", customer)
    customer = customer.strip()
    if not customer:
        return DEFAULT_REPORT_TITLE
    return f"{customer} - {DEFAULT_REPORT_TITLE}"


def format_parser_diagnostics(
    categories: Sequence[Category],
    raw_count: int,
    filter_counts: FilterCounts,
) -> str:
    lines = [
        "Parser Results:",
        f"   - Tables detected: {len(categories)}",
        f"   - Total events found: {raw_count}",
        f"   - Events in final report: {filter_counts.kept}",
    ]
    if filter_counts.dropped_zero > 0:
        lines.append(f"   - Events filtered (zero values): {filter_counts.dropped_zero}")
    if filter_counts.dropped_period > 0:
        lines.append(f"   - Events filtered (out of period): {filter_counts.dropped_period}")
    if filter_counts.dropped_no_provenance > 0:
        lines.append(f"   - Events filtered (no source): {filter_counts.dropped_no_provenance}")

    if categories:
        lines.append("")
        lines.append("Categories found:")
        for index, category in enumerate(categories, start=1):
            priority = ""
            if category.kind in CATEGORY_PRIORITY:
                priority = f" (Priority {CATEGORY_PRIORITY.index(category.kind) + 1})"
            lines.append(
                f"   {index}. {category.category_name}{priority} - {category.total_findings_count} events"
            )
    return "\n".join(lines)
