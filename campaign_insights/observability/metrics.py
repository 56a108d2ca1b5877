"""
Prometheus metrics collection for campaign-insights

Operational counters for the ingestion pipeline (files, rows, exclusions,
errors, durations). These describe the engine's own behaviour and are
unrelated to the campaign metrics it computes.
"""
from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Engine-private registry, separate from the prometheus_client default
REGISTRY = CollectorRegistry()


# =======================
# PIPELINE METRICS
# =======================

files_processed_total = Counter(
    name="campaign_files_processed_total",
    documentation="Total number of export files run through the pipeline",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

rows_parsed_total = Counter(
    name="campaign_rows_parsed_total",
    documentation="Total number of data rows parsed from export files",
    registry=REGISTRY,
)

rows_excluded_total = Counter(
    name="campaign_rows_excluded_total",
    documentation="Rows left out of metric computation",
    labelnames=["reason"],  # reason: test_user, blank_identity
    registry=REGISTRY,
)

ingestion_duration_seconds = Histogram(
    name="campaign_ingestion_duration_seconds",
    documentation="Time spent on one pipeline stage in seconds",
    labelnames=["stage"],  # stage: parse, resolve, extract, compute, total
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)

interaction_columns_discovered = Histogram(
    name="campaign_interaction_columns_discovered",
    documentation="Number of interaction columns discovered per file",
    buckets=[0, 1, 2, 5, 10, 20, 50],
    registry=REGISTRY,
)

funnels_built_total = Counter(
    name="campaign_funnels_built_total",
    documentation="Total number of funnels built",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

# =======================
# ERROR METRICS
# =======================

errors_total = Counter(
    name="campaign_errors_total",
    documentation="Total number of errors raised by the engine",
    labelnames=["error_type", "component"],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """Current values of every engine metric in the Prometheus text exposition format."""
    return generate_latest(REGISTRY)


def _child(metric, labels: dict):
    return metric.labels(**labels) if labels else metric


class track_duration:
    """
    Time a block into a histogram, labelled or not.

    Usage:
        with track_duration(ingestion_duration_seconds, stage="parse"):
            table = parser.parse(text)
    """

    def __init__(self, histogram: Histogram, **labels):
        self._timer = _child(histogram, labels).time()

    def __enter__(self):
        self._timer.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._timer.__exit__(exc_type, exc_val, exc_tb)
        return False


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """Add ``value`` to a counter, selecting the labelled child when labels are given."""
    _child(counter, labels).inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """Record one observation, selecting the labelled child when labels are given."""
    _child(histogram, labels).observe(value)


def record_file_processed(
    rows_parsed: int,
    test_user_rows: int,
    blank_identity_rows: int,
    interaction_columns: int,
) -> None:
    """
    Record the counters for one successfully processed file.

    Args:
        rows_parsed: Data rows parsed from the file
        test_user_rows: Rows excluded because they belong to test users
        blank_identity_rows: Rows excluded because the identity cell is blank
        interaction_columns: Interaction columns discovered in the header
    """
    increment_counter(files_processed_total, status="success")
    increment_counter(rows_parsed_total, rows_parsed)
    for reason, count in (("test_user", test_user_rows), ("blank_identity", blank_identity_rows)):
        if count:
            increment_counter(rows_excluded_total, count, reason=reason)
    observe_histogram(interaction_columns_discovered, interaction_columns)


def record_error(error: BaseException, component: str) -> None:
    """
    Record an engine error.

    Args:
        error: The raised exception
        component: Pipeline component that raised it (reader, parser, schema, metadata, metrics, funnel)
    """
    increment_counter(errors_total, error_type=type(error).__name__, component=component)
