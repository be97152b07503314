"""
netops/parsing package marker.
"""

from netops.parsing.detect import DetectionMode, detect_tables, missing_categories
from netops.parsing.pages import as_pages, simulate_pages, split_pages
from netops.parsing.registry import REGISTRY, TableDefinition, is_likely_row

__all__ = [
    "REGISTRY",
    "DetectionMode",
    "TableDefinition",
    "as_pages",
    "detect_tables",
    "is_likely_row",
    "missing_categories",
    "simulate_pages",
    "split_pages",
]
