"""
Input validation utilities for values supplied from outside the engine.

Covers the manually entered total audience figure and funnel stage
selections coming from a CLI or report front-end.
"""

from typing import Any, Iterable

from campaign_insights.core.errors import ConfigurationError


def validate_total_audience(value: Any, field_name: str = "total_audience") -> int:
    """
    Validate a manually supplied total audience figure.

    Accepts integers and integer-valued strings (front-ends usually hand over
    the raw input text). Thousands separators are not accepted.

    Args:
        value: The raw override value
        field_name: Name of the field (for error messages)

    Returns:
        The validated audience as an int

    Raises:
        ConfigurationError: If the value is not a non-negative integer

    Examples:
        >>> validate_total_audience("2500")
        2500
        >>> validate_total_audience(-1)  # doctest: +SKIP
        ConfigurationError: total_audience must be a non-negative integer
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer, got bool")

    if isinstance(value, str):
        stripped = value.strip()
        if not (stripped.isascii() and stripped.isdigit()):
            raise ConfigurationError(f"{field_name} must be a non-negative integer, got '{value}'")
        value = int(stripped)

    if isinstance(value, float) and value.is_integer():
        value = int(value)

    if not isinstance(value, int):
        raise ConfigurationError(
            f"{field_name} must be an integer, got {type(value).__name__}"
        )

    if value < 0:
        raise ConfigurationError(f"{field_name} must be a non-negative integer, got {value}")

    return value


def parse_stage_list(raw: str | Iterable[str], field_name: str = "stages") -> list[str]:
    """
    Normalise a stage selection given as a comma-separated string or an iterable.

    Blank entries are dropped and surrounding whitespace removed; order is kept.

    Examples:
        >>> parse_stage_list("unique_visitors, unique_completions ,")
        ['unique_visitors', 'unique_completions']
    """
    if isinstance(raw, str):
        items = raw.split(",")
    else:
        items = list(raw)

    stages = []
    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise ConfigurationError(f"{field_name}[{i}] must be a string, got {type(item).__name__}")
        item = item.strip()
        if item:
            stages.append(item)
    return stages
