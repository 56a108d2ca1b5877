"""
Metrics engine computing campaign metrics from resolved export rows.

Test users (and rows without an identity) are removed once, up front; every
metric is then computed over the same working set.
"""

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from campaign_insights.core.config import EngineConfig
from campaign_insights.core.models import ColumnSchema, MetricsRecord, ParsedTable
from campaign_insights.observability.logger import get_logger
from campaign_insights.utils.formatting import percentage

from .catalog import UNIQUE_COMPLETION_RATE, UNIQUE_INTERACTION_RATE

logger = get_logger(__name__)

# Canonical count field -> (total metric, unique metric)
COUNT_METRICS: dict[str, tuple[str, str]] = {
    "impressions": ("total_impressions", "unique_impressions"),
    "completions": ("total_completions", "unique_completions"),
    "thumbnail_clicks": ("total_thumbnail_clicks", "unique_thumbnail_clicks"),
    "visits": ("total_visits", "unique_visits"),
    "plays": ("total_plays", "unique_plays"),
}


@dataclass
class ExclusionSummary:
    """Rows removed before computation."""
    test_user_rows: int = 0
    blank_identity_rows: int = 0
    test_user_ids: list[str] = field(default_factory=list)


class MetricsEngine:
    """
    Computes the MetricsRecord of one export.

    Count cells are parsed leniently: blanks and non-numeric text count as 0,
    negatives are clamped to 0 and fractions are truncated. ``total_*``
    metrics sum a column, ``unique_*`` metrics count distinct identities with
    a positive value. The engine never writes total_audience.
    """

    def __init__(self, config: EngineConfig | None = None):
        """
        Initialize metrics engine.

        Args:
            config: Engine configuration (test users, missing-id prefix)
        """
        self.config = config or EngineConfig()

    def compute(self, table: ParsedTable, schema: ColumnSchema) -> MetricsRecord:
        """
        Compute metrics for a parsed export.

        Args:
            table: Header-aligned rows
            schema: Resolved column schema for the same header

        Returns:
            MetricsRecord; metrics for missing optional columns are omitted
        """
        record, _ = self.compute_detailed(table, schema)
        return record

    def compute_detailed(
        self,
        table: ParsedTable,
        schema: ColumnSchema
    ) -> tuple[MetricsRecord, ExclusionSummary]:
        """
        Compute metrics and report which rows were excluded.

        Args:
            table: Header-aligned rows
            schema: Resolved column schema for the same header

        Returns:
            Tuple of (metrics_record, exclusion_summary)
        """
        frame = pd.DataFrame(list(table.rows), columns=range(table.width), dtype=object)
        identities = frame[schema.user_id_position].astype(str).str.strip()

        blank = identities == ""
        is_test = identities.isin(list(self.config.test_user_ids))
        keep = ~blank & ~is_test

        exclusions = ExclusionSummary(
            test_user_rows=int(is_test.sum()),
            blank_identity_rows=int(blank.sum()),
            test_user_ids=sorted(set(identities[is_test])),
        )
        if exclusions.test_user_rows:
            logger.info(
                f"Excluding {exclusions.test_user_rows} rows from test users {exclusions.test_user_ids}"
            )

        working = frame[keep]
        ids = identities[keep]

        unique_visitors = int(ids.nunique())
        metrics: dict[str, int | float] = {
            "total_rows": int(len(working)),
            "unique_visitors": unique_visitors,
        }

        for field_name, (total_name, unique_name) in COUNT_METRICS.items():
            position = schema.position(field_name)
            if position is None:
                continue
            counts = self._to_counts(working[position])
            metrics[total_name] = sum(counts.tolist())
            metrics[unique_name] = int(ids[counts > 0].nunique())

        if "unique_completions" in metrics:
            metrics[UNIQUE_COMPLETION_RATE] = percentage(metrics["unique_completions"], unique_visitors)

        interaction_unique_users: dict[str, int] = {}
        interaction_totals: dict[str, int] = {}
        # counts are non-negative, so a positive sum means some positive count
        any_interaction = pd.Series(False, index=working.index)

        for header, position in schema.interaction_columns.items():
            cells = working[position].astype(str).str.strip()
            present = cells != ""
            counts = self._to_counts(working[position])
            interaction_unique_users[header] = int(ids[present].nunique())
            interaction_totals[header] = sum(counts.tolist())
            any_interaction = any_interaction | (counts > 0)

        if schema.interaction_columns:
            unique_interactions = int(ids[any_interaction].nunique())
            metrics["unique_interactions"] = unique_interactions
            metrics[UNIQUE_INTERACTION_RATE] = percentage(unique_interactions, unique_visitors)

        prefix = self.config.missing_id_prefix
        missing = ids[ids.str.startswith(prefix)]
        missing_ids = [value[len(prefix):] for value in missing.drop_duplicates().tolist()]

        logger.debug(
            f"Computed {len(metrics)} metrics over {metrics['total_rows']} rows "
            f"({unique_visitors} unique visitors)"
        )

        record = MetricsRecord(
            metrics=metrics,
            interaction_unique_users=interaction_unique_users,
            interaction_totals=interaction_totals,
            interaction_labels={
                h: schema.interaction_labels.get(h, h) for h in schema.interaction_columns
            },
            excluded_test_users=exclusions.test_user_ids,
            missing_ids=missing_ids,
        )
        return record, exclusions

    @staticmethod
    def _to_counts(column: pd.Series) -> pd.Series:
        """Parse a column of count cells into non-negative integers."""
        values = pd.to_numeric(column.astype(str).str.strip(), errors="coerce").astype("float64")
        values = values.replace([np.inf, -np.inf], np.nan).fillna(0)
        # float64 cannot hold int64 max exactly; the next float down keeps the cast in range
        upper = np.nextafter(float(np.iinfo("int64").max), 0)
        return values.clip(lower=0, upper=upper).astype("int64")
