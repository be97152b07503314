"""
tests/test_table_detector.py

Pytest unit tests for page handling and table detection.
"""

from __future__ import annotations

from netops.domain.report import CategoryKind, Page
from netops.parsing.detect import DetectionMode, detect_tables, missing_categories
from netops.parsing.pages import as_pages, simulate_pages, split_pages
from netops.parsing.registry import find_definition, is_end_of_block, is_likely_row

INTERFACE_ROW = "ATL-SW1 experienced interface down, 5 occurrences, avg 12.3 min, 08/15/2025 10:30"


def test_single_table_captures_row_with_provenance() -> None:
    tables = detect_tables(["Interface down events\n" + INTERFACE_ROW + "\n"])

    assert len(tables) == 1
    table = tables[0]
    assert table.kind is CategoryKind.INTERFACE_DOWN
    assert table.category_name == "Interface down events"
    assert len(table.rows) == 1
    provenance = table.rows[0].provenance
    assert provenance.page == 1
    assert provenance.line_index == 1
    assert provenance.snippet == INTERFACE_ROW


def test_table_continues_across_page_break() -> None:
    pages = [
        "Port Errors\nSFS-ATL  sw1  Gi1/0/1  1520\n",
        "SFS-LAX  sw2  Gi1/0/2  3000\n",
    ]

    tables = detect_tables(pages)

    assert len(tables) == 1
    assert [row.provenance.page for row in tables[0].rows] == [1, 2]
    assert tables[0].page_start == 1
    assert tables[0].page_end == 2


def test_end_of_block_heading_closes_table() -> None:
    text = (
        "Interface down events\n"
        f"{INTERFACE_ROW}\n"
        "Recommendations\n"
        "Replace ATL-SW1 optics before 09/01/2025 10:00\n"
    )

    tables = detect_tables([text])

    assert len(tables) == 1
    assert len(tables[0].rows) == 1


def test_prose_lines_are_not_captured() -> None:
    text = (
        "Interface down events\n"
        "The following events were observed across sites\n"
        f"{INTERFACE_ROW}\n"
    )

    tables = detect_tables([text])

    assert [row.content for row in tables[0].rows] == [INTERFACE_ROW]


def test_title_without_rows_is_discarded() -> None:
    text = "WAN Utilization\nPort Errors\nSFS-ATL  sw1  Gi1/0/1  1520\n"

    tables = detect_tables([text])

    assert [table.kind for table in tables] == [CategoryKind.PORT_ERRORS]


def test_next_title_closes_previous_table() -> None:
    text = (
        "Interface down events\n"
        f"{INTERFACE_ROW}\n"
        "Site Unreachable events\n"
        "SFS-DEN  08/14/2025 22:10  INC0012345\n"
    )

    tables = detect_tables([text])

    assert [table.kind for table in tables] == [CategoryKind.INTERFACE_DOWN, CategoryKind.SITE_UNREACHABLE]
    assert len(tables[0].rows) == 1
    assert len(tables[1].rows) == 1


def test_numbered_title_with_note_is_recognized() -> None:
    definition = find_definition("3.2 Interface Down Events (last 30 days):")

    assert definition is not None
    assert definition.kind is CategoryKind.INTERFACE_DOWN


def test_title_inside_sentence_is_not_a_title() -> None:
    assert find_definition("We saw many interface down events this month") is None


def test_header_line_is_recorded_as_columns_not_row() -> None:
    text = (
        "Interface down events\n"
        "Site  Device  Interface  Occurrences\n"
        "SFS-ATL  ATLCORE1  Gi1/0/1  12\n"
    )

    tables = detect_tables([text])

    assert tables[0].columns == ("Site", "Device", "Interface", "Occurrences")
    assert len(tables[0].rows) == 1


def test_strict_mode_requires_header_signature() -> None:
    without_header = "Interface down events\nSFS-ATL  ATLCORE1  Gi1/0/1  12\n"
    with_header = (
        "Interface down events\n"
        "Site  Device  Interface  Occurrences\n"
        "SFS-ATL  ATLCORE1  Gi1/0/1  12\n"
    )

    assert detect_tables([without_header], mode=DetectionMode.STRICT) == []
    assert len(detect_tables([with_header], mode=DetectionMode.STRICT)) == 1


def test_strict_header_outside_window_is_ignored() -> None:
    filler = "\n".join(f"note {index}" for index in range(5))
    text = f"Interface down events\n{filler}\nSite  Device  Interface  Occurrences\nSFS-ATL  ATL-SW1  Gi1/0/1  12\n"

    assert detect_tables([text], mode=DetectionMode.STRICT, header_window=3) == []


def test_missing_categories_lists_undetected_names() -> None:
    tables = detect_tables(["Interface down events\n" + INTERFACE_ROW + "\n"])

    missing = missing_categories(tables)

    assert "Interface down events" not in missing
    assert "Port Errors" in missing
    assert len(missing) == 10


def test_no_pages_no_tables() -> None:
    assert detect_tables([]) == []


def test_likely_row_heuristic() -> None:
    assert is_likely_row("SFS-ATL down at 10:30")
    assert is_likely_row("Utilization peaked at 97%")
    assert is_likely_row("Flapped 4 times")
    assert is_likely_row("avg 12 min.")
    assert not is_likely_row("See the appendix for details")


def test_end_of_block_headings() -> None:
    assert is_end_of_block("Key Takeaways")
    assert is_end_of_block("4. Recommendations")
    assert not is_end_of_block("Interface down events")


def test_split_pages_on_form_feeds() -> None:
    pages = split_pages("first\fsecond\f")

    assert [(page.number, page.text) for page in pages] == [(1, "first"), (2, "second")]


def test_simulate_pages_never_splits_lines() -> None:
    text = "aaaa\nbbbb\ncccc\ndddd\n"

    pages = simulate_pages(text, 2)

    assert "".join(page.text for page in pages) == text
    assert all(page.text.endswith("\n") for page in pages)
    assert simulate_pages("", 3) == []


def test_as_pages_numbers_bare_strings() -> None:
    pages = as_pages(["one", Page(number=7, text="seven")])

    assert [page.number for page in pages] == [1, 7]
