"""
netops/parsing/registry.py

Registry of known report tables: title patterns and expected column headers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from netops.domain.report import CategoryKind

# Optional section numbering ("3.", "3.2)") and a trailing note in parentheses.
_TITLE_TEMPLATE = r"^\s*(?:\d+(?:\.\d+)*[.)]?\s+)?{body}\s*(?:\([^)]*\))?\s*:?\s*$"

END_OF_BLOCK_RE = re.compile(
    r"^\s*(?:\d+(?:\.\d+)*[.)]?\s+)?"
    r"(?:insights?|recommendations?|executive\s+summary|table\s+of\s+contents?|key\s+takeaways|next\s+steps)\b",
    re.IGNORECASE,
)

LIKELY_ROW_RE = re.compile(
    r"\d{2}:\d{2}|\d{1,3}%|\b[A-Z0-9]{4,}\b|\d+\.\d+|\d+\s*min\.|\d+\s*times"
)


@dataclass(frozen=True)
class TableDefinition:
    """
    One known table: its category, title matcher and header column names.
    """

    kind: CategoryKind
    title_pattern: re.Pattern[str]
    column_names: tuple[str, ...]

    @property
    def category_name(self) -> str:
        return self.kind.value

    def matches_title(self, line: str) -> bool:
        return bool(self.title_pattern.match(line))

    def header_hits(self, text: str) -> int:
        """
        Count expected column names present in `text` (case-insensitive).
        """

        lowered = text.lower()
        return sum(1 for name in self.column_names if name.lower() in lowered)


def _definition(kind: CategoryKind, body: str, columns: tuple[str, ...]) -> TableDefinition:
    return TableDefinition(
        kind=kind,
        title_pattern=re.compile(_TITLE_TEMPLATE.format(body=body), re.IGNORECASE),
        column_names=columns,
    )


REGISTRY: tuple[TableDefinition, ...] = (
    _definition(
        CategoryKind.INTERFACE_DOWN,
        r"interface\s+down(?:\s+events)?",
        ("Site", "Device", "Interface", "Info", "Trend", "Avg Duration", "Occurrences"),
    ),
    _definition(
        CategoryKind.DEVICE_AVAILABILITY,
        r"device\s+availability",
        ("Site", "Device", "Device Type", "Unreachable Count"),
    ),
    _definition(
        CategoryKind.VPN_TUNNEL_DOWN,
        r"vpn\s+tunnel\s+down(?:\s+anomalies)?",
        ("Site", "Device", "Tunnel Name", "Last Occurred", "Occurrences"),
    ),
    _definition(
        CategoryKind.SITE_UNREACHABLE,
        r"site\s+unreachable(?:\s+events)?",
        ("Site", "Last Occurred", "Incident ID"),
    ),
    _definition(
        CategoryKind.WIFI_ISSUES,
        r"wi[-\s]?fi\s+issues",
        ("Site", "Device", "Error Type", "Total", "Impacted Clients"),
    ),
    _definition(
        CategoryKind.PORT_ERRORS,
        r"port\s+errors",
        ("Site", "Device", "Port", "Errors", "In (Avg/Max)", "Out (Avg/Max)"),
    ),
    _definition(
        CategoryKind.CONNECTED_CLIENTS,
        r"connected\s+clients",
        ("Site", "Trend", "Clients Week1", "Clients Week2", "Clients Week3", "Clients Week4"),
    ),
    _definition(
        CategoryKind.WAN_UTILIZATION,
        r"wan\s+utili[sz]ation",
        ("Site", "Device", "Interface", "Trend", "Up Avg", "Down Avg"),
    ),
    _definition(
        CategoryKind.SERVICE_PERFORMANCE,
        r"service\s+performance(?:\s+incidents)?",
        ("Site", "Device", "Interface", "Last Occurred"),
    ),
    _definition(
        CategoryKind.NETWORK_UTILIZATION,
        r"network\s+utili[sz]ation(?:\s+incidents)?",
        ("Site", "Device", "Interface", "Last Occurred"),
    ),
    _definition(
        CategoryKind.SLA_PROFILES,
        r"sla\s+profiles",
        ("SLA", "Site", "Device", "Interface"),
    ),
)


def find_definition(line: str, registry: tuple[TableDefinition, ...] = REGISTRY) -> TableDefinition | None:
    for definition in registry:
        if definition.matches_title(line):
            return definition
    return None


def definition_for(kind: CategoryKind, registry: tuple[TableDefinition, ...] = REGISTRY) -> TableDefinition | None:
    for definition in registry:
        if definition.kind is kind:
            return definition
    return None


def is_likely_row(line: str) -> bool:
    """
    Heuristic for data rows: clock time, percentage, long code token,
    decimal, duration in minutes or "N times".
    """

    return bool(LIKELY_ROW_RE.search(line))


def is_end_of_block(line: str) -> bool:
    return bool(END_OF_BLOCK_RE.match(line))
