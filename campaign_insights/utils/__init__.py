"""
Formatting and input validation helpers.
"""

from .formatting import (
    format_number,
    format_prefixed_percentage,
    percentage,
    round_half_up,
    to_title_case,
)
from .validation import parse_stage_list, validate_total_audience

__all__ = [
    "to_title_case",
    "round_half_up",
    "percentage",
    "format_number",
    "format_prefixed_percentage",
    "validate_total_audience",
    "parse_stage_list",
]
