"""
Readers turning export files into header-aligned rows.
"""

from .csv_reader import CSVRecordParser
from .file_reader import FileReader

__all__ = ["CSVRecordParser", "FileReader"]
