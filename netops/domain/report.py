"""
netops/domain/report.py

Domain models shared by detection, mapping, filtering and classification.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from enum import Enum
from typing import Any

SNIPPET_MAX_CHARS = 240

UNKNOWN_SITE = "Unknown Site"
UNKNOWN_DEVICE = "Unknown Device"
UNKNOWN_INTERFACE = "Unknown Interface"
UNKNOWN_ERROR_TYPE = "Unknown"
DEFAULT_TREND = "0%"


class CategoryKind(str, Enum):
    """
    Known report table families. The value is the canonical category name.
    """

    SITE_UNREACHABLE = "Site Unreachable events"
    DEVICE_AVAILABILITY = "Device Availability"
    VPN_TUNNEL_DOWN = "VPN Tunnel Down anomalies"
    INTERFACE_DOWN = "Interface down events"
    WIFI_ISSUES = "Wi-Fi Issues"
    PORT_ERRORS = "Port Errors"
    CONNECTED_CLIENTS = "Connected clients"
    WAN_UTILIZATION = "WAN Utilization"
    SERVICE_PERFORMANCE = "Service Performance incidents"
    NETWORK_UTILIZATION = "Network utilization incidents"
    SLA_PROFILES = "SLA Profiles"
    GENERIC = "Other findings"


class BusinessHoursImpact(str, Enum):
    YES = "YES"
    NO = "NO"


class Severity(str, Enum):
    """
    Finding severity with an ordering rank (higher is more severe).
    """

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.CRITICAL: 3,
    Severity.MAJOR: 2,
    Severity.MINOR: 1,
}


@dataclass(frozen=True)
class Page:
    """
    One page of extracted report text.
    """

    number: int
    text: str

    def lines(self) -> list[str]:
        return self.text.splitlines()


@dataclass(frozen=True)
class Provenance:
    """
    Trace from a finding back to the literal source line.
    """

    page: int
    line_index: int
    snippet: str

    @classmethod
    def from_line(cls, *, page: int, line_index: int, line: str) -> Provenance:
        return cls(page=page, line_index=line_index, snippet=line.strip()[:SNIPPET_MAX_CHARS])

    @property
    def key(self) -> str:
        return f"{self.page}:{self.line_index}:{self.snippet}"

    @property
    def has_snippet(self) -> bool:
        return bool(self.snippet and self.snippet.strip())


@dataclass(frozen=True)
class RawLine:
    """
    A captured line judged to be a data row.
    """

    content: str
    provenance: Provenance


@dataclass(frozen=True)
class DetectedTable:
    """
    A report table located by the detector, with its captured data rows.
    """

    title: str
    kind: CategoryKind
    rows: tuple[RawLine, ...]
    page_start: int
    page_end: int
    columns: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.rows:
            raise ValueError(f"DetectedTable '{self.title}' must capture at least one row.")

    @property
    def category_name(self) -> str:
        return self.kind.value if self.kind is not CategoryKind.GENERIC else self.title


@dataclass(frozen=True)
class SiteLocation:
    """
    Resolved timezone for a site label.

    `source` is "city" or "airport"; `identifier` is the matched city name or
    the IATA code.
    """

    identifier: str
    timezone: str
    source: str
    city: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class CanonicalRow:
    """
    One normalized finding.
    """

    site: str = UNKNOWN_SITE
    device: str = UNKNOWN_DEVICE
    interface: str = UNKNOWN_INTERFACE
    occurrences: int = 0
    last_occurred: str | None = None
    trend: str = DEFAULT_TREND
    avg_duration: float = 0.0
    error_type: str = UNKNOWN_ERROR_TYPE
    impacted_clients: int = 0
    business_hours_impact: BusinessHoursImpact = BusinessHoursImpact.NO
    provenance: Provenance | None = None
    severity: Severity | None = None
    timezone: str | None = None
    local_time: str | None = None
    site_location: SiteLocation | None = None
    impact_reason: str | None = None
    metrics: dict[str, float] = field(default_factory=dict)
    attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def provenance_key(self) -> str | None:
        return self.provenance.key if self.provenance is not None else None

    def metric(self, name: str, default: float = 0.0) -> float:
        return float(self.metrics.get(name, default))


@dataclass(frozen=True)
class Category:
    """
    Findings sharing one report table origin.

    `total_findings_count` keeps the true count when `findings` is truncated.
    """

    category_name: str
    findings: tuple[CanonicalRow, ...]
    total_findings_count: int
    kind: CategoryKind = CategoryKind.GENERIC

    def __post_init__(self) -> None:
        if self.total_findings_count < len(self.findings):
            raise ValueError(
                f"Category '{self.category_name}' total_findings_count "
                f"{self.total_findings_count} is below {len(self.findings)} findings."
            )

    @classmethod
    def from_rows(
        cls,
        *,
        category_name: str,
        rows: list[CanonicalRow] | tuple[CanonicalRow, ...],
        kind: CategoryKind = CategoryKind.GENERIC,
    ) -> Category:
        findings = tuple(rows)
        return cls(
            category_name=category_name,
            findings=findings,
            total_findings_count=len(findings),
            kind=kind,
        )


@dataclass(frozen=True)
class TimeWindow:
    """
    Reporting period. Both bounds are timezone-aware UTC instants.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeWindow bounds must be timezone-aware.")
        if self.end < self.start:
            raise ValueError("TimeWindow end must not precede start.")

    @classmethod
    def from_iso(cls, start: str, end: str) -> TimeWindow:
        """
        Build a window from ISO-8601 dates or instants (naive values are UTC).
        """

        return cls(start=_parse_iso_bound(start), end=_parse_iso_bound(end))

    @property
    def end_of_day(self) -> datetime:
        """
        End bound rounded up to the last microsecond of its UTC day.
        """

        end_utc = self.end.astimezone(timezone.utc)
        return datetime.combine(end_utc.date(), time.max, tzinfo=timezone.utc)

    def contains(self, instant: datetime) -> bool:
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return self.start <= instant <= self.end_of_day


def _parse_iso_bound(value: str) -> datetime:
    normalized = value.strip()
    normalized = normalized[:-1] + "+00:00" if normalized.endswith("Z") else normalized
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
