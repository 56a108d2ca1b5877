"""
IngestionResult model bundling everything produced for one export file.
"""

from pydantic import BaseModel, ConfigDict, Field

from .campaign_metadata import CampaignMetadata
from .column_schema import ColumnSchema
from .metrics_record import MetricsRecord


class IngestionResult(BaseModel):
    """
    Outcome of running one file through the ingestion pipeline.

    Attributes:
        filename: Name the export was uploaded or stored under
        metadata: Campaign metadata extracted from the filename
        column_schema: Resolved column layout
        metrics: Metrics record (total_audience set only if supplied)
        row_count: Data rows parsed, before test-user exclusion
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    metadata: CampaignMetadata
    column_schema: ColumnSchema
    metrics: MetricsRecord
    row_count: int = Field(..., ge=0)
