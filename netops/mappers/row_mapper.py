"""
netops/mappers/row_mapper.py

Dispatch from a table's CategoryKind to its row matcher.

Pipe-delimited lines are zipped onto the table header and mapped as field
sets. Other lines go to the kind's matcher, then to the generic matcher.

`RowMapper.map_line` never raises: a line no matcher accepts (or one that
breaks a matcher) comes back as None and is counted by `map_table`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from netops.domain.diagnostics import MappingFailure
from netops.domain.report import CanonicalRow, CategoryKind, DetectedTable, Provenance, RawLine
from netops.logging_utils import log_event
from netops.mappers.fields import build_canonical_row, canonical_field_for
from netops.mappers.matchers import (
    ConnectedClientsMatcher,
    DeviceDownMatcher,
    GenericMatcher,
    PortErrorMatcher,
    RowMatcher,
    UnreachableMatcher,
    WirelessMatcher,
    split_columns,
)
from netops.parsing.registry import definition_for

logger = logging.getLogger(__name__)


def default_matchers() -> dict[CategoryKind, RowMatcher]:
    generic = GenericMatcher()
    return {
        CategoryKind.INTERFACE_DOWN: DeviceDownMatcher("Interface Down"),
        CategoryKind.DEVICE_AVAILABILITY: DeviceDownMatcher("Device Unreachable"),
        CategoryKind.VPN_TUNNEL_DOWN: DeviceDownMatcher("VPN Tunnel Down"),
        CategoryKind.SERVICE_PERFORMANCE: DeviceDownMatcher("Service Performance"),
        CategoryKind.NETWORK_UTILIZATION: DeviceDownMatcher("Network Utilization"),
        CategoryKind.SLA_PROFILES: DeviceDownMatcher("SLA Violation"),
        CategoryKind.WAN_UTILIZATION: DeviceDownMatcher("WAN Utilization"),
        CategoryKind.SITE_UNREACHABLE: UnreachableMatcher(),
        CategoryKind.WIFI_ISSUES: WirelessMatcher(),
        CategoryKind.PORT_ERRORS: PortErrorMatcher(),
        CategoryKind.CONNECTED_CLIENTS: ConnectedClientsMatcher(),
        CategoryKind.GENERIC: generic,
    }


@dataclass(frozen=True)
class MappingOutcome:
    """
    Rows mapped from one table and the lines that could not be mapped.
    """

    category_name: str
    kind: CategoryKind
    rows: tuple[CanonicalRow, ...]
    failures: tuple[MappingFailure, ...]


class RowMapper:
    """
    Convert captured lines or pre-split field sets into CanonicalRows.
    """

    def __init__(self, matchers: Mapping[CategoryKind, RowMatcher] | None = None) -> None:
        self._matchers = dict(matchers) if matchers is not None else default_matchers()
        self._fallback = self._matchers.get(CategoryKind.GENERIC) or GenericMatcher()

    def matcher_for(self, kind: CategoryKind) -> RowMatcher:
        return self._matchers.get(kind, self._fallback)

    def map_line(
        self,
        kind: CategoryKind,
        raw_line: RawLine,
        columns: Sequence[str] = (),
    ) -> CanonicalRow | None:
        if not columns:
            definition = definition_for(kind)
            columns = definition.column_names if definition is not None else ()

        if columns and "|" in raw_line.content:
            cells = split_columns(raw_line.content)
            if len(cells) >= 2:
                return self.map_fields(kind, dict(zip(columns, cells)), raw_line.provenance)

        matcher = self.matcher_for(kind)
        try:
            fields = matcher.match(raw_line.content, columns)
            if fields is None and matcher is not self._fallback:
                fields = self._fallback.extract(raw_line.content, columns)
                if fields is not None:
                    fields = matcher.complete(fields, raw_line.content)
            if fields is None:
                logger.debug(
                    "No matcher accepted line kind=%s page=%s line_index=%s",
                    kind.name,
                    raw_line.provenance.page,
                    raw_line.provenance.line_index,
                )
                return None
            return build_canonical_row(fields, raw_line.provenance)
        except (ValueError, TypeError, IndexError, KeyError) as exc:
            logger.warning(
                "Row mapping failed kind=%s page=%s line_index=%s error=%s",
                kind.name,
                raw_line.provenance.page,
                raw_line.provenance.line_index,
                exc,
            )
            return None

    def map_fields(
        self,
        kind: CategoryKind,
        fields: Mapping[str, Any],
        provenance: Provenance | None,
    ) -> CanonicalRow | None:
        """
        Map a pre-split header -> value set (pipe tables, spreadsheet exports).

        Headers go through the alias table, so "Last Occurred", "Avg Duration"
        and "Unreachable Count" land on their canonical fields.
        """

        canonical: dict[str, Any] = {}
        for header, value in fields.items():
            if value is None:
                continue
            canonical.setdefault(canonical_field_for(str(header)), value)

        if not any(str(value).strip() for value in canonical.values()):
            return None

        snippet = provenance.snippet if provenance is not None else ""
        try:
            completed = self.matcher_for(kind).complete(canonical, snippet)
            return build_canonical_row(completed, provenance)
        except (ValueError, TypeError) as exc:
            logger.warning("Field-set mapping failed kind=%s error=%s", kind.name, exc)
            return None

    def map_table(self, table: DetectedTable) -> MappingOutcome:
        definition = definition_for(table.kind)
        registered = definition.column_names if definition is not None else ()
        columns = table.columns or registered

        rows: list[CanonicalRow] = []
        failures: list[MappingFailure] = []
        for raw_line in table.rows:
            row = self.map_line(table.kind, raw_line, columns)
            if row is None:
                failures.append(
                    MappingFailure(
                        category_name=table.category_name,
                        page=raw_line.provenance.page,
                        line_index=raw_line.provenance.line_index,
                        snippet=raw_line.provenance.snippet,
                    )
                )
                continue
            rows.append(row)

        log_event(
            logger,
            logging.INFO,
            "rows_mapped",
            category=table.category_name,
            captured=len(table.rows),
            mapped=len(rows),
            failed=len(failures),
        )
        return MappingOutcome(
            category_name=table.category_name,
            kind=table.kind,
            rows=tuple(rows),
            failures=tuple(failures),
        )


def map_line(kind: CategoryKind, raw_line: RawLine) -> CanonicalRow | None:
    """
    Module-level convenience using the default matcher table.
    """

    return _DEFAULT_MAPPER.map_line(kind, raw_line)


_DEFAULT_MAPPER = RowMapper()
