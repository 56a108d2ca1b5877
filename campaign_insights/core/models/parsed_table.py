"""
ParsedTable model representing the header-aligned rows of one export (ephemeral).
"""

from pydantic import BaseModel, ConfigDict, model_validator


class ParsedTable(BaseModel):
    """
    Header row plus data rows produced by the record parser.

    Note: ParsedTable is held in memory only while the metrics engine runs.
    Every row is padded or trimmed to the header width by the parser.

    Attributes:
        header: Header strings in file order
        rows: Data rows in file order, one tuple of strings per row
    """

    model_config = ConfigDict(frozen=True)

    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    @model_validator(mode="after")
    def check_row_width(self) -> "ParsedTable":
        """Validate that every row is aligned to the header."""
        width = len(self.header)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"row {index} has {len(row)} fields, header has {width}"
                )
        return self

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.header)
