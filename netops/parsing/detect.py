"""
netops/parsing/detect.py

Table detection over paginated report text.

The scan runs line by line across the whole document so tables may continue
over page breaks. A registered title opens a table and closes the previous
one; lines that look like data rows are captured with provenance until the
next title or an end-of-block heading. Tables that captured nothing are
discarded.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from netops.domain.report import DetectedTable, Page, Provenance, RawLine
from netops.logging_utils import log_event
from netops.parsing.pages import as_pages
from netops.parsing.registry import (
    REGISTRY,
    TableDefinition,
    find_definition,
    is_end_of_block,
    is_likely_row,
)

logger = logging.getLogger(__name__)

DEFAULT_HEADER_WINDOW = 12

_HEADER_SPLIT_RE = re.compile(r"\s*\|\s*|\t+|\s{2,}")
_DIGIT_RE = re.compile(r"\d")


class DetectionMode(str, Enum):
    """
    FLEXIBLE accepts any title line. STRICT also requires the column header
    signature within a bounded window after the title.
    """

    FLEXIBLE = "flexible"
    STRICT = "strict"


@dataclass(frozen=True)
class _Line:
    page: int
    index: int
    text: str


@dataclass
class _OpenTable:
    definition: TableDefinition
    title: str
    page_start: int
    page_end: int
    rows: list[RawLine] = field(default_factory=list)
    columns: tuple[str, ...] = ()

    def build(self) -> DetectedTable | None:
        if not self.rows:
            return None
        return DetectedTable(
            title=self.title,
            kind=self.definition.kind,
            rows=tuple(self.rows),
            page_start=self.page_start,
            page_end=self.page_end,
            columns=self.columns,
        )


def detect_tables(
    pages: Sequence[Page | str],
    registry: tuple[TableDefinition, ...] = REGISTRY,
    *,
    mode: DetectionMode = DetectionMode.FLEXIBLE,
    header_window: int = DEFAULT_HEADER_WINDOW,
) -> list[DetectedTable]:
    """
    Locate registered tables and capture their data rows.
    """

    lines = _flatten(as_pages(pages))
    tables: list[DetectedTable] = []
    current: _OpenTable | None = None

    for position, line in enumerate(lines):
        definition = find_definition(line.text, registry)
        if definition is not None:
            if mode is DetectionMode.STRICT and not _has_header_signature(
                lines, position, definition, header_window
            ):
                logger.debug(
                    "Title without header signature ignored title=%r page=%s",
                    line.text,
                    line.page,
                )
                continue
            _commit(current, tables)
            current = _OpenTable(
                definition=definition,
                title=line.text,
                page_start=line.page,
                page_end=line.page,
            )
            continue

        if current is None:
            continue

        if is_end_of_block(line.text):
            _commit(current, tables)
            current = None
            continue

        if _is_header_line(line.text, current.definition):
            if not current.columns:
                current.columns = _split_header(line.text)
            continue

        if is_likely_row(line.text):
            current.rows.append(
                RawLine(
                    content=line.text,
                    provenance=Provenance.from_line(page=line.page, line_index=line.index, line=line.text),
                )
            )
            current.page_end = line.page

    _commit(current, tables)

    log_event(
        logger,
        logging.INFO,
        "tables_detected",
        mode=mode.value,
        tables=len(tables),
        rows=sum(len(table.rows) for table in tables),
    )
    return tables


def missing_categories(
    tables: Sequence[DetectedTable],
    registry: tuple[TableDefinition, ...] = REGISTRY,
) -> list[str]:
    """
    Registered categories that no detected table produced.
    """

    found = {table.kind for table in tables}
    return [definition.category_name for definition in registry if definition.kind not in found]


def _flatten(pages: list[Page]) -> list[_Line]:
    lines: list[_Line] = []
    for page in pages:
        for index, raw in enumerate(page.lines()):
            text = raw.strip()
            if text:
                lines.append(_Line(page=page.number, index=index, text=text))
    return lines


def _commit(current: _OpenTable | None, tables: list[DetectedTable]) -> None:
    if current is None:
        return
    table = current.build()
    if table is None:
        logger.debug("Discarding table without rows title=%r", current.title)
        return
    tables.append(table)


def _has_header_signature(
    lines: list[_Line],
    position: int,
    definition: TableDefinition,
    header_window: int,
) -> bool:
    window = " ".join(line.text for line in lines[position + 1 : position + 1 + header_window])
    required = min(2, len(definition.column_names))
    return definition.header_hits(window) >= required


def _is_header_line(text: str, definition: TableDefinition) -> bool:
    if definition.header_hits(text) < 2:
        return False
    remainder = text.lower()
    for name in sorted(definition.column_names, key=len, reverse=True):
        remainder = remainder.replace(name.lower(), " ")
    return not _DIGIT_RE.search(remainder)


def _split_header(text: str) -> tuple[str, ...]:
    cells = [cell.strip() for cell in _HEADER_SPLIT_RE.split(text.strip("| ")) if cell.strip()]
    return tuple(cells) if len(cells) >= 2 else ()
