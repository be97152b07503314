"""
netops/parsing/pages.py

Page sequences from extracted report text.
"""

from __future__ import annotations

import math
from typing import Sequence

from netops.domain.report import Page

PAGE_BREAK = "\f"


def split_pages(text: str) -> list[Page]:
    """
    Split text on form feeds (pdftotext page breaks) into numbered pages.

    A trailing empty page left by a final form feed is dropped.
    """

    chunks = text.split(PAGE_BREAK)
    if len(chunks) > 1 and not chunks[-1].strip():
        chunks = chunks[:-1]
    return [Page(number=index + 1, text=chunk) for index, chunk in enumerate(chunks)]


def simulate_pages(text: str, page_count: int) -> list[Page]:
    """
    Cut text into `page_count` equal-size pages when real page breaks are lost.

    Cuts are moved forward to the next newline so lines are never split.
    """

    if not text:
        return []
    page_size = max(1, math.ceil(len(text) / max(1, page_count)))
    pages: list[Page] = []
    start = 0
    while start < len(text):
        end = min(len(text), start + page_size)
        if end < len(text):
            newline = text.find("\n", end)
            end = len(text) if newline == -1 else newline + 1
        pages.append(Page(number=len(pages) + 1, text=text[start:end]))
        start = end
    return pages


def as_pages(pages: Sequence[Page | str]) -> list[Page]:
    """
    Accept Page objects or bare page strings in document order.
    """

    result: list[Page] = []
    for index, page in enumerate(pages):
        if isinstance(page, Page):
            result.append(page)
        else:
            result.append(Page(number=index + 1, text=str(page)))
    return result
