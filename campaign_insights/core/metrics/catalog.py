"""
Metric catalog: display labels, ordering and report-ready formatting.
"""

from campaign_insights.core.models import TOTAL_AUDIENCE, MetricsRecord
from campaign_insights.utils.formatting import (
    format_number,
    format_prefixed_percentage,
    to_title_case,
)

UNIQUE_COMPLETION_RATE = "unique_completion_rate"
UNIQUE_INTERACTION_RATE = "unique_interaction_rate"

# Summary order used by the report
METRIC_LABELS: dict[str, str] = {
    TOTAL_AUDIENCE: "Total Audience",
    "total_rows": "Total Rows",
    "unique_visitors": "Unique Visitors",
    "total_impressions": "Total Impressions",
    "unique_impressions": "Unique Impressions",
    UNIQUE_COMPLETION_RATE: "Unique Completion Rate",
    "total_completions": "Total Completions",
    "unique_completions": "Unique Completions",
    "total_visits": "Total Visits",
    "unique_visits": "Unique Visits",
    "total_plays": "Total Plays",
    "unique_plays": "Unique Plays",
    "total_thumbnail_clicks": "Total Thumbnail Clicks",
    "unique_thumbnail_clicks": "Unique Thumbnail Clicks",
    "unique_interactions": "Unique Interactions",
    UNIQUE_INTERACTION_RATE: "Unique Interaction Rate",
}

RATE_METRICS = frozenset({UNIQUE_COMPLETION_RATE, UNIQUE_INTERACTION_RATE})

# Widest to narrowest engagement, used to suggest a default funnel
FUNNEL_PREFERENCE: tuple[str, ...] = (
    TOTAL_AUDIENCE,
    "unique_visitors",
    "unique_impressions",
    "unique_visits",
    "unique_thumbnail_clicks",
    "unique_plays",
    "unique_interactions",
    "unique_completions",
)


def label_for(name: str, metrics: MetricsRecord | None = None) -> str:
    """
    Display label of a metric or interaction column.

    Interaction columns use the event name discovered by the schema resolver.
    """
    if name in METRIC_LABELS:
        return METRIC_LABELS[name]
    if metrics is not None and name in metrics.interaction_labels:
        return metrics.interaction_labels[name]
    return to_title_case(name)


def format_metric(name: str, value: int | float) -> str:
    """Report rendering of one metric value."""
    if name in RATE_METRICS:
        return format_prefixed_percentage(value)
    return format_number(value)


def display_summary(metrics: MetricsRecord) -> dict[str, str]:
    """
    Ordered label -> display string mapping for the report summary.

    Total Audience comes first and only when it was supplied manually.
    Metrics missing from the record are left out rather than shown as zero.
    """
    summary: dict[str, str] = {}
    for name, label in METRIC_LABELS.items():
        value = metrics.get(name)
        if value is None:
            continue
        summary[label] = format_metric(name, value)
    return summary


def interaction_summary(metrics: MetricsRecord) -> list[dict[str, str | int]]:
    """
    Per-interaction rows for the report: event name, unique users and total events.
    """
    rows = []
    for header, users in metrics.interaction_unique_users.items():
        rows.append({
            "column": header,
            "event": label_for(header, metrics),
            "unique_users": users,
            "total": metrics.interaction_totals.get(header, 0),
        })
    return rows
