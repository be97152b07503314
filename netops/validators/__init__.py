"""
netops/validators package marker.
"""

from netops.validators.guards import FilterResult, apply_filters, has_required_values, rejection_reason

__all__ = [
    "FilterResult",
    "apply_filters",
    "has_required_values",
    "rejection_reason",
]
