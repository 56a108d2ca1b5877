"""
Metric computation, funnel building and the metric catalog.
"""

from .catalog import (
    FUNNEL_PREFERENCE,
    METRIC_LABELS,
    RATE_METRICS,
    display_summary,
    format_metric,
    interaction_summary,
    label_for,
)
from .engine import COUNT_METRICS, ExclusionSummary, MetricsEngine
from .funnel import FunnelBuilder

__all__ = [
    "MetricsEngine",
    "ExclusionSummary",
    "FunnelBuilder",
    "COUNT_METRICS",
    "METRIC_LABELS",
    "RATE_METRICS",
    "FUNNEL_PREFERENCE",
    "label_for",
    "format_metric",
    "display_summary",
    "interaction_summary",
]
