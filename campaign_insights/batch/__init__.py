"""
Batch ingestion of analytics export files.
"""

from .pipeline import IngestionPipeline
from .readers import CSVRecordParser, FileReader

__all__ = [
    "IngestionPipeline",
    "CSVRecordParser",
    "FileReader",
]
