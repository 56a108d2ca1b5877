"""
CSV record parser for analytics exports.

Splits raw export text into a header and header-aligned rows.
"""

import csv
import io

from campaign_insights.core.errors import MalformedInputError
from campaign_insights.core.models import ParsedTable
from campaign_insights.observability.logger import get_logger

logger = get_logger(__name__)

BOM = "\ufeff"


class CSVRecordParser:
    """
    Parses comma-delimited export text into a ParsedTable.

    Quoted fields may contain the delimiter, doubled quotes and line breaks.
    Fully blank lines are skipped. Rows shorter than the header are padded
    with empty fields; rows longer than the header are accepted only when
    the surplus fields are blank.
    """

    def __init__(self, delimiter: str = ","):
        """
        Initialize CSV record parser.

        Args:
            delimiter: Field delimiter
        """
        self.delimiter = delimiter

    def parse(self, text: str) -> ParsedTable:
        """
        Parse export text.

        Args:
            text: Whole file content, already decoded

        Returns:
            ParsedTable with trimmed header and field values

        Raises:
            MalformedInputError: On an unterminated quote, broken quoting,
                a missing header or a row that cannot be aligned to the header
        """
        if text.startswith(BOM):
            text = text[len(BOM):]

        reader = csv.reader(
            io.StringIO(text, newline=""),
            delimiter=self.delimiter,
            skipinitialspace=True,
            strict=True,
        )

        header: tuple[str, ...] | None = None
        rows: list[tuple[str, ...]] = []
        padded = 0

        try:
            for fields in reader:
                if self._is_blank(fields):
                    continue

                if header is None:
                    header = tuple(field.strip() for field in fields)
                    if not any(header):
                        raise MalformedInputError("header row is empty", reader.line_num)
                    continue

                row, was_padded = self._align(fields, len(header), reader.line_num)
                padded += was_padded
                rows.append(row)
        except csv.Error as e:
            raise MalformedInputError(f"invalid CSV structure: {e}", reader.line_num) from e

        if header is None:
            raise MalformedInputError("file contains no header row")

        if padded:
            logger.debug(f"Padded {padded} short rows to header width {len(header)}")

        return ParsedTable(header=header, rows=tuple(rows))

    @staticmethod
    def _is_blank(fields: list[str]) -> bool:
        """A fully blank line: nothing at all, or only whitespace and no delimiter."""
        return not fields or (len(fields) == 1 and not fields[0].strip())

    @staticmethod
    def _align(fields: list[str], width: int, line_number: int) -> tuple[tuple[str, ...], bool]:
        """
        Align a row to the header width.

        Returns:
            Tuple of (aligned_row, whether_padding_was_needed)
        """
        values = [field.strip() for field in fields]

        if len(values) > width:
            surplus = values[width:]
            if any(surplus):
                raise MalformedInputError(
                    f"row has {len(values)} fields but header has {width}",
                    line_number,
                )
            return tuple(values[:width]), False

        if len(values) < width:
            values.extend([""] * (width - len(values)))
            return tuple(values), True

        return tuple(values), False
