"""
File reader that loads an export from disk for the record parser.
"""

from pathlib import Path

from campaign_insights.core.errors import MalformedInputError

SUPPORTED_EXTENSIONS = (".csv", ".txt")


class FileReader:
    """
    Reads export files into text plus the filename metadata is extracted from.
    """

    def __init__(self, encoding: str = "utf-8-sig"):
        """
        Initialize file reader.

        Args:
            encoding: Text encoding; the default drops a UTF-8 byte-order mark
        """
        self.encoding = encoding

    def read(self, file_path: str | Path) -> tuple[str, str]:
        """
        Read a file into memory.

        Args:
            file_path: Path to the export

        Returns:
            Tuple of (text, filename)

        Raises:
            FileNotFoundError: If the path does not exist
            ValueError: If the file extension is unsupported
            MalformedInputError: If the bytes are not valid text in the configured encoding
        """
        path = Path(file_path)
        if not path.is_file():
            raise FileNotFoundError(f"Export file not found: {file_path}")

        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            raise ValueError(f"Unsupported file format: {path.suffix or '<none>'}")

        try:
            text = path.read_bytes().decode(self.encoding)
        except UnicodeDecodeError as e:
            raise MalformedInputError(f"file is not valid {self.encoding} text: {e.reason}") from e

        return text, path.name
