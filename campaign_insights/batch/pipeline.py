"""
Ingestion pipeline orchestration.

Coordinates the flow: parse → resolve schema → extract metadata → compute metrics
"""

from pathlib import Path
from typing import Any, Optional, Sequence

from campaign_insights.batch.readers import CSVRecordParser, FileReader
from campaign_insights.core.config import EngineConfig, EngineConfigLoader
from campaign_insights.core.errors import IngestionError
from campaign_insights.core.metadata import MetadataExtractor
from campaign_insights.core.metrics import FunnelBuilder, MetricsEngine
from campaign_insights.core.models import FunnelRecord, IngestionResult, MetricsRecord
from campaign_insights.core.schema import SchemaResolver
from campaign_insights.observability import metrics as ops_metrics
from campaign_insights.observability.logger import get_logger, log_operation
from campaign_insights.utils.validation import validate_total_audience

logger = get_logger(__name__)


class IngestionPipeline:
    """
    Orchestrates one synchronous run per export file.

    Flow:
    1. Parse the raw text into header-aligned rows
    2. Resolve the column schema from the header
    3. Extract campaign metadata from the filename
    4. Compute the metrics record (test users excluded)
    5. Optionally apply the manually supplied total audience

    The pipeline holds nothing but its read-only configuration, so one
    instance may serve concurrent invocations.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        extractor: MetadataExtractor | None = None,
    ):
        """
        Initialize ingestion pipeline.

        Args:
            config: Engine configuration (defaults apply when None)
            extractor: Metadata extractor (default filename rules when None)
        """
        self.config = config or EngineConfig()

        self.file_reader = FileReader()
        self.parser = CSVRecordParser()
        self.schema_resolver = SchemaResolver(self.config)
        self.metadata_extractor = extractor or MetadataExtractor()
        self.metrics_engine = MetricsEngine(self.config)
        self.funnel_builder = FunnelBuilder(self.config)

    @classmethod
    def from_config_file(cls, config_path: Optional[str | Path] = None) -> "IngestionPipeline":
        """
        Create a pipeline from a YAML configuration file.

        Args:
            config_path: Path to the YAML file; defaults to config/engine.yaml when it exists
        """
        path = Path(config_path or "config/engine.yaml")
        if config_path is None and not path.exists():
            logger.warning(f"Engine configuration file not found: {path}; using defaults")
            return cls()
        return cls(EngineConfigLoader(path).load())

    def process_file(self, file_path: str | Path, total_audience: Any = None) -> IngestionResult:
        """
        Process an export file from disk.

        Args:
            file_path: Path to the export
            total_audience: Optional manually supplied audience size

        Returns:
            IngestionResult for the file
        """
        try:
            text, filename = self.file_reader.read(file_path)
        except IngestionError as e:
            ops_metrics.record_error(e, component="reader")
            ops_metrics.increment_counter(ops_metrics.files_processed_total, 1, status="failure")
            raise
        return self.process_text(text, filename, total_audience=total_audience)

    def process_text(self, text: str, filename: str, total_audience: Any = None) -> IngestionResult:
        """
        Process export content already held in memory.

        Args:
            text: Whole file content
            filename: Original filename (drives metadata extraction)
            total_audience: Optional manually supplied audience size

        Returns:
            IngestionResult with metadata, schema and metrics

        Raises:
            MalformedInputError: If the rows cannot be parsed
            SchemaResolutionError: If the identity column is missing
            ConfigurationError: If total_audience is not a non-negative integer
        """
        if total_audience is not None:
            total_audience = validate_total_audience(total_audience)

        component = "parser"
        try:
            with ops_metrics.track_duration(ops_metrics.ingestion_duration_seconds, stage="total"), \
                    log_operation("Ingesting export", logger=logger, source_file=filename):
                with ops_metrics.track_duration(ops_metrics.ingestion_duration_seconds, stage="parse"):
                    table = self.parser.parse(text)
                logger.info(f"Parsed {table.row_count} rows with {table.width} columns")

                component = "schema"
                with ops_metrics.track_duration(ops_metrics.ingestion_duration_seconds, stage="resolve"):
                    schema = self.schema_resolver.resolve(table.header)

                component = "metadata"
                with ops_metrics.track_duration(ops_metrics.ingestion_duration_seconds, stage="extract"):
                    metadata = self.metadata_extractor.extract(filename)

                component = "metrics"
                with ops_metrics.track_duration(ops_metrics.ingestion_duration_seconds, stage="compute"):
                    metrics, exclusions = self.metrics_engine.compute_detailed(table, schema)
        except IngestionError as e:
            ops_metrics.record_error(e, component=component)
            ops_metrics.increment_counter(ops_metrics.files_processed_total, 1, status="failure")
            raise

        if total_audience is not None:
            metrics = metrics.with_total_audience(total_audience)

        ops_metrics.record_file_processed(
            rows_parsed=table.row_count,
            test_user_rows=exclusions.test_user_rows,
            blank_identity_rows=exclusions.blank_identity_rows,
            interaction_columns=len(schema.interaction_columns),
        )

        return IngestionResult(
            filename=filename,
            metadata=metadata,
            column_schema=schema,
            metrics=metrics,
            row_count=table.row_count,
        )

    def build_funnel(
        self,
        metrics: MetricsRecord | IngestionResult,
        stages: Sequence[str] | None = None
    ) -> FunnelRecord:
        """
        Build a funnel from a metrics record.

        Args:
            metrics: Metrics record, or an IngestionResult carrying one
            stages: Ordered stage names; a default selection is suggested when None

        Returns:
            New FunnelRecord

        Raises:
            FunnelSelectionError: If the selection is invalid (UnknownMetricError included)
        """
        if isinstance(metrics, IngestionResult):
            metrics = metrics.metrics

        try:
            if stages is None:
                stages = self.funnel_builder.suggest_stages(metrics)
                logger.info(f"No funnel stages selected; using suggestion {stages}")
            funnel = self.funnel_builder.build(metrics, list(stages))
        except IngestionError as e:
            ops_metrics.record_error(e, component="funnel")
            ops_metrics.increment_counter(ops_metrics.funnels_built_total, 1, status="failure")
            raise

        ops_metrics.increment_counter(ops_metrics.funnels_built_total, 1, status="success")
        return funnel
