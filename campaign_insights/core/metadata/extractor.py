"""
Metadata extraction from export filenames.
"""

import re
from typing import Sequence

from campaign_insights.core.models import CampaignMetadata
from campaign_insights.observability.logger import get_logger

from .patterns import DEFAULT_PATTERNS, FilenamePattern

logger = get_logger(__name__)

_EXTENSION = re.compile(r"\.csv$", re.IGNORECASE)


class MetadataExtractor:
    """
    Applies an ordered list of filename rules; the first rule that matches wins.

    Not matching any rule is not an error: the returned record simply has
    every field set to None.
    """

    def __init__(self, patterns: Sequence[FilenamePattern] | None = None):
        """
        Initialize metadata extractor.

        Args:
            patterns: Ordered filename rules (defaults to DEFAULT_PATTERNS)
        """
        self.patterns: tuple[FilenamePattern, ...] = tuple(
            DEFAULT_PATTERNS if patterns is None else patterns
        )

    def with_pattern(self, pattern: FilenamePattern, position: int | None = None) -> "MetadataExtractor":
        """
        Return a new extractor with an extra rule.

        Args:
            pattern: Rule to add
            position: Index to insert at; appended (lowest priority) when None
        """
        patterns = list(self.patterns)
        if position is None:
            patterns.append(pattern)
        else:
            patterns.insert(position, pattern)
        return MetadataExtractor(patterns)

    def extract(self, filename: str) -> CampaignMetadata:
        """
        Extract campaign metadata from a filename.

        Args:
            filename: Bare filename or path, with or without the .csv extension

        Returns:
            CampaignMetadata (all fields None when no rule matches)
        """
        stem = self.stem(filename)

        for pattern in self.patterns:
            metadata = pattern.match(stem)
            if metadata is not None:
                logger.debug(f"Filename '{stem}' matched rule {pattern.pattern_type}")
                return metadata

        logger.info(f"No filename rule matched '{stem}'; campaign metadata unknown")
        return CampaignMetadata()

    @staticmethod
    def stem(filename: str) -> str:
        """Drop any directory part and the .csv extension."""
        name = re.split(r"[\\/]", filename)[-1]
        return _EXTENSION.sub("", name.strip()).strip()
