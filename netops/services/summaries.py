"""
netops/services/summaries.py

Deterministic one-line summaries per finding.
"""

from __future__ import annotations

from netops.domain.report import CanonicalRow, CategoryKind

SNIPPET_PREVIEW_CHARS = 50


def _location_suffix(row: CanonicalRow) -> str:
    location = row.site_location
    if location is None:
        return ""
    if location.source == "airport":
        city = f", {location.city}" if location.city else ""
        return f" [{location.identifier}{city}]"
    if location.city:
        return f" [{location.city}]"
    return ""


def summary_line(row: CanonicalRow, kind: CategoryKind, category_name: str = "") -> str:
    """
    Build the summary sentence for a finding, worded for its category.
    """

    site, device, interface = row.site, row.device, row.interface

    if kind is CategoryKind.WIFI_ISSUES:
        if row.occurrences > 0:
            text = (
                f"{site} {device} experienced {row.error_type} errors "
                f"({row.occurrences} errors affecting {row.impacted_clients} clients)"
            )
        else:
            text = f"{site} {device} experienced {row.error_type} connectivity issues"
    elif kind is CategoryKind.PORT_ERRORS:
        text = (
            f"{site} {device} port {interface} experienced "
            f"In: {row.metric('in_avg_error'):.2f}%/{row.metric('in_max_error'):.2f}% "
            f"Out: {row.metric('out_avg_error'):.2f}%/{row.metric('out_max_error'):.2f}% error rates"
        )
    elif kind is CategoryKind.INTERFACE_DOWN:
        if row.occurrences > 0:
            text = (
                f"{site} {device} {interface} experienced {row.occurrences} downtime events "
                f"(avg {row.avg_duration:g} min)"
            )
        else:
            text = f"{site} {device} {interface} experienced connectivity issues"
    elif kind is CategoryKind.DEVICE_AVAILABILITY:
        if "availability" in row.metrics:
            text = f"{site} {device} availability: {row.metric('availability'):g}%"
        else:
            text = f"{site} {device} was unreachable {row.occurrences} times"
    elif kind is CategoryKind.CONNECTED_CLIENTS:
        if row.impacted_clients > 0:
            text = f"{site} peak concurrent clients: {row.impacted_clients}"
        else:
            text = f"{site} client connectivity analysis completed"
    elif kind is CategoryKind.SITE_UNREACHABLE:
        if row.occurrences > 0:
            text = f"{site} experienced {row.occurrences} unreachable events"
        else:
            text = f"{site} experienced connectivity issues"
    elif row.provenance is not None and row.provenance.has_snippet:
        snippet = row.provenance.snippet
        if len(snippet) > SNIPPET_PREVIEW_CHARS:
            snippet = f"{snippet[:SNIPPET_PREVIEW_CHARS]}..."
        text = f"{site} {device} {interface} - {snippet}"
    else:
        name = category_name or kind.value
        text = f"{site} {device} {interface} experienced {name.lower()}"

    return text + _location_suffix(row)
