"""
Schema resolution for analytics exports.

Maps a header row onto canonical fields through ordered synonym lists and
discovers dynamically named interaction columns by prefix.
"""

from typing import Sequence

from campaign_insights.core.config import EngineConfig
from campaign_insights.core.errors import SchemaResolutionError
from campaign_insights.core.models import USER_ID_FIELD, ColumnSchema
from campaign_insights.observability.logger import get_logger
from campaign_insights.utils.formatting import to_title_case

logger = get_logger(__name__)

# Canonical field -> accepted header spellings, compared case-insensitively
CANONICAL_FIELD_SYNONYMS: dict[str, tuple[str, ...]] = {
    USER_ID_FIELD: ("uniqueid", "unique_id", "userid", "user_id", "user id", "visitor_id"),
    "impressions": ("impression_count", "impressions", "views", "view_count"),
    "completions": ("event_count_finished", "completions", "completion_count", "finished_count"),
    "thumbnail_clicks": ("thumbnail_count", "thumbnail_clicks"),
    "visits": ("visit_count", "visits"),
    "plays": ("play_count", "plays"),
}

REQUIRED_FIELDS = (USER_ID_FIELD,)


class SchemaResolver:
    """
    Resolves an export header into a ColumnSchema.

    For each canonical field the first header in file order matching any of
    its synonyms wins. Headers claimed by a canonical field are never treated
    as interaction columns, so "event_count_finished" stays a completion
    count even though it carries the interaction prefix.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        synonyms: dict[str, tuple[str, ...]] | None = None,
    ):
        """
        Initialize schema resolver.

        Args:
            config: Engine configuration (interaction prefix)
            synonyms: Override of the canonical synonym table
        """
        self.config = config or EngineConfig()
        table = synonyms or CANONICAL_FIELD_SYNONYMS
        self._lookup = {
            field: frozenset(spelling.lower() for spelling in spellings)
            for field, spellings in table.items()
        }

    def resolve(self, header: Sequence[str]) -> ColumnSchema:
        """
        Resolve canonical fields and interaction columns.

        Args:
            header: Header row in file order

        Returns:
            ColumnSchema for the file

        Raises:
            SchemaResolutionError: If a required field has no matching header
        """
        canonical: dict[str, int] = {}
        claimed: set[int] = set()

        for position, raw in enumerate(header):
            normalized = self._normalize(raw)
            for field, spellings in self._lookup.items():
                if field not in canonical and normalized in spellings:
                    canonical[field] = position
                    claimed.add(position)
                    break

        for field in REQUIRED_FIELDS:
            if field not in canonical:
                raise SchemaResolutionError(field, header)

        reserved = set().union(*(self._lookup[field] for field in canonical))
        interaction_columns, interaction_labels = self._discover_interactions(header, claimed, reserved)

        ignored = [
            h for i, h in enumerate(header)
            if i not in claimed and h not in interaction_columns
        ]
        if ignored:
            logger.debug(f"Ignoring unrecognised columns: {ignored}")

        logger.debug(
            f"Resolved fields {sorted(canonical)} and "
            f"{len(interaction_columns)} interaction columns"
        )

        return ColumnSchema(
            canonical_fields=canonical,
            interaction_columns=interaction_columns,
            interaction_labels=interaction_labels,
        )

    def _discover_interactions(
        self,
        header: Sequence[str],
        claimed: set[int],
        reserved: set[str]
    ) -> tuple[dict[str, int], dict[str, str]]:
        """
        Find every header carrying the interaction prefix.

        Args:
            header: Header row in file order
            claimed: Positions already taken by canonical fields
            reserved: Spellings of resolved canonical fields; repeats of them are not interactions

        Returns:
            Tuple of (header -> position, header -> display label)
        """
        prefix = self.config.interaction_column_prefix.lower()
        columns: dict[str, int] = {}
        labels: dict[str, str] = {}

        for position, raw in enumerate(header):
            if position in claimed or self._normalize(raw) in reserved:
                continue

            name = raw.strip()
            if not name.lower().startswith(prefix):
                continue

            suffix = name[len(prefix):]
            if not suffix.strip("_ "):
                continue

            if name in columns:
                logger.warning(f"Duplicate interaction column '{name}' at position {position}; keeping the first")
                continue

            columns[name] = position
            labels[name] = to_title_case(suffix)

        return columns, labels

    @staticmethod
    def _normalize(header: str) -> str:
        return " ".join(header.strip().lower().split())
