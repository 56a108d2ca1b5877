"""
Funnel builder: ordered stage conversion from a metrics record.
"""

from typing import Sequence

from campaign_insights.core.config import EngineConfig
from campaign_insights.core.errors import FunnelSelectionError, FunnelSizeError, UnknownMetricError
from campaign_insights.core.models import FunnelRecord, FunnelStage, MetricsRecord
from campaign_insights.observability.logger import get_logger
from campaign_insights.utils.formatting import percentage

from .catalog import FUNNEL_PREFERENCE, RATE_METRICS, label_for

logger = get_logger(__name__)


class FunnelBuilder:
    """
    Builds a FunnelRecord from a caller-ordered stage selection.

    Stages are never re-sorted. The first stage is 100% of itself and has no
    previous-stage percentage; a zero denominator yields 0 instead of an error.
    """

    def __init__(self, config: EngineConfig | None = None):
        """
        Initialize funnel builder.

        Args:
            config: Engine configuration (funnel size bounds)
        """
        self.config = config or EngineConfig()

    @property
    def bounds(self):
        return self.config.funnel_size_bounds

    def build(self, metrics: MetricsRecord, stages: Sequence[str]) -> FunnelRecord:
        """
        Build a funnel.

        Args:
            metrics: Metrics record to read stage values from
            stages: Ordered metric names (or interaction headers)

        Returns:
            New FunnelRecord

        Raises:
            FunnelSizeError: If the stage count is outside the configured bounds
            FunnelSelectionError: If a stage is selected twice
            UnknownMetricError: If a stage is not available on the record
        """
        self.validate_selection(metrics, stages)

        first_value = metrics.get(stages[0])
        previous_value = None
        built: list[FunnelStage] = []

        for index, name in enumerate(stages):
            value = metrics.get(name)
            if index == 0:
                pct_of_first = 100.0
                pct_of_previous = None
            else:
                pct_of_first = percentage(value, first_value)
                pct_of_previous = percentage(value, previous_value)

            built.append(FunnelStage(
                metric=name,
                label=label_for(name, metrics),
                value=value,
                pct_of_first=pct_of_first,
                pct_of_previous=pct_of_previous,
            ))
            previous_value = value

        audience_reach = None
        if metrics.total_audience:
            audience_reach = percentage(first_value, metrics.total_audience)

        logger.debug(f"Built funnel {list(stages)}")
        return FunnelRecord(stages=tuple(built), audience_reach=audience_reach)

    def validate_selection(self, metrics: MetricsRecord, stages: Sequence[str]) -> None:
        """
        Check a stage selection without building the funnel.

        Raises:
            FunnelSizeError: If the stage count is outside the configured bounds
            FunnelSelectionError: If a stage is selected twice
            UnknownMetricError: If a stage is not available on the record
        """
        if not self.bounds.allows(len(stages)):
            raise FunnelSizeError(len(stages), self.bounds.min, self.bounds.max)

        seen: set[str] = set()
        for name in stages:
            if name in seen:
                raise FunnelSelectionError(f"Stage '{name}' selected more than once")
            seen.add(name)

        available = metrics.available_metrics()
        for name in stages:
            if name not in available:
                raise UnknownMetricError(name, available)

    def suggest_stages(self, metrics: MetricsRecord, count: int | None = None) -> list[str]:
        """
        Propose a default stage selection, widest engagement first.

        Picks from the catalog's funnel preference order, then fills up with
        interaction columns in file order. Rates are never suggested.

        Args:
            metrics: Metrics record to choose from
            count: Number of stages (defaults to the configured default)

        Returns:
            Up to ``count`` available metric names

        Raises:
            FunnelSizeError: If fewer stages than the configured minimum are available
        """
        count = count or self.bounds.default
        available = metrics.available_metrics()

        candidates = [name for name in FUNNEL_PREFERENCE if name in available]
        candidates.extend(
            name for name in metrics.interaction_unique_users if name not in candidates
        )
        candidates = [name for name in candidates if name not in RATE_METRICS]
        if len(candidates) < self.bounds.min:
            raise FunnelSizeError(len(candidates), self.bounds.min, self.bounds.max)
        return candidates[:count]
