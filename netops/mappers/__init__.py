"""
netops/mappers package marker.
"""

from netops.mappers.fields import build_canonical_row, canonical_field_for
from netops.mappers.row_mapper import MappingOutcome, RowMapper, map_line

__all__ = [
    "MappingOutcome",
    "RowMapper",
    "build_canonical_row",
    "canonical_field_for",
    "map_line",
]
