"""
Campaign metadata extraction from export filenames.
"""

from .extractor import MetadataExtractor
from .patterns import (
    DEFAULT_PATTERNS,
    DashedDateRangePattern,
    FilenamePattern,
    IsoDateRangePattern,
    QuarterRangePattern,
    RegexFilenamePattern,
    SheetExportPattern,
    SingleIsoDatePattern,
    SpacedDateRangePattern,
)

__all__ = [
    "MetadataExtractor",
    "FilenamePattern",
    "RegexFilenamePattern",
    "QuarterRangePattern",
    "DashedDateRangePattern",
    "SpacedDateRangePattern",
    "IsoDateRangePattern",
    "SheetExportPattern",
    "SingleIsoDatePattern",
    "DEFAULT_PATTERNS",
]
