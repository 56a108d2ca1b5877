"""
Error taxonomy for the ingestion-and-metrics engine.

Every failure raised by the engine derives from IngestionError so callers can
reject a whole file with a single except clause. Absent-but-optional data is
never an error; it is represented as None / a missing key in the records.
"""

from typing import Iterable


class IngestionError(Exception):
    """Base class for all engine errors."""


class MalformedInputError(IngestionError):
    """Raised when the raw file cannot be split into header-aligned rows."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        self.message = message
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class SchemaResolutionError(IngestionError):
    """Raised when a required canonical field cannot be located in the header."""

    def __init__(self, field_name: str, header: Iterable[str] = ()):
        self.field_name = field_name
        self.header = tuple(header)
        super().__init__(
            f"Required column '{field_name}' not found in header: {list(self.header)}"
        )


class ConfigurationError(IngestionError, ValueError):
    """Raised for invalid engine configuration or override values."""


class FunnelSelectionError(IngestionError, ValueError):
    """Raised when a funnel stage selection cannot be built."""


class FunnelSizeError(FunnelSelectionError):
    """Raised when the number of selected stages is outside the configured bounds."""

    def __init__(self, stage_count: int, minimum: int, maximum: int):
        self.stage_count = stage_count
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"Funnel needs between {minimum} and {maximum} stages, got {stage_count}"
        )


class UnknownMetricError(FunnelSelectionError):
    """Raised when a funnel stage references a metric absent from the record."""

    def __init__(self, metric_name: str, available: Iterable[str] = ()):
        self.metric_name = metric_name
        self.available = tuple(available)
        super().__init__(
            f"Metric '{metric_name}' is not available; choose one of {list(self.available)}"
        )
