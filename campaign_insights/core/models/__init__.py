"""
Value objects exchanged between the engine components.

All models use Pydantic and are frozen once built.
"""

from .campaign_metadata import CampaignMetadata
from .column_schema import USER_ID_FIELD, ColumnSchema
from .funnel_record import FunnelRecord, FunnelStage
from .ingestion_result import IngestionResult
from .metrics_record import TOTAL_AUDIENCE, MetricsRecord
from .parsed_table import ParsedTable

__all__ = [
    "ParsedTable",
    "ColumnSchema",
    "CampaignMetadata",
    "MetricsRecord",
    "FunnelStage",
    "FunnelRecord",
    "IngestionResult",
    "USER_ID_FIELD",
    "TOTAL_AUDIENCE",
]
