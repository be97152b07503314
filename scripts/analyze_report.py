"""
Analyze an extracted report text file from CLI.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from narrative_synthesis.service import get_narrative_service
from netops.domain.report import TimeWindow
from netops.logging_utils import configure_logging
from netops.parsing.pages import simulate_pages, split_pages
from netops.schemas.report import ReportResponse
from netops.services.pipeline_service import build_default_pipeline


def main() -> int:
    parser = argparse.ArgumentParser(description="Extract categorized findings from report text.")
    parser.add_argument("path", help="Text file with pages separated by form feeds (pdftotext output).")
    parser.add_argument("--start", default=None, help="Reporting period start (ISO-8601).")
    parser.add_argument("--end", default=None, help="Reporting period end (ISO-8601).")
    parser.add_argument(
        "--pages",
        dest="page_count",
        type=int,
        default=None,
        help="Simulate this many equal pages when the text has no page breaks.",
    )
    parser.add_argument("--document-id", dest="document_id", default=None)
    parser.add_argument("--all", dest="untruncated", action="store_true", help="Keep every finding per category.")
    parser.add_argument("--narrative", action="store_true", help="Also generate narrative prose.")
    parser.add_argument(
        "--airport-dataset",
        dest="airport_dataset",
        action="store_true",
        help="Download the airport dataset instead of using the static airport table.",
    )
    args = parser.parse_args()

    configure_logging()

    if (args.start is None) != (args.end is None):
        parser.error("--start and --end must be given together.")

    source = Path(args.path)
    text = source.read_text(encoding="utf-8", errors="replace")
    pages = split_pages(text)
    if args.page_count and len(pages) == 1:
        pages = simulate_pages(text, args.page_count)

    time_window = TimeWindow.from_iso(args.start, args.end) if args.start else None
    document_id = args.document_id or source.stem

    pipeline = build_default_pipeline(load_airport_dataset=args.airport_dataset)
    result = pipeline.run(
        pages,
        time_window,
        document_id=document_id,
        file_name=source.name,
        untruncated=args.untruncated,
    )
    payload = ReportResponse.from_result(result).model_dump(mode="json")

    if args.narrative:
        narrative = get_narrative_service().generate(payload["categories"], document_id)
        payload["narrative"] = narrative.model_dump(mode="json")

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
