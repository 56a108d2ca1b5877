"""
Filename rules recognised by the metadata extractor.

Each rule turns a filename stem (directory and .csv extension removed) into
CampaignMetadata, or returns None so the next rule can be tried.
"""

import re
from abc import ABC, abstractmethod
from datetime import date
from re import Pattern

from campaign_insights.core.models import CampaignMetadata
from campaign_insights.utils.formatting import to_title_case

DMY_DATE = r"\d{1,2}_\d{1,2}_\d{4}"
ISO_DATE = r"\d{4}-\d{2}-\d{2}"


def parse_date_token(token: str) -> date:
    """
    Parse a filename date token.

    Accepts DD_MM_YYYY (day and month may be one digit) and YYYY-MM-DD.

    Raises:
        ValueError: If the token is not a valid calendar date
    """
    if "_" in token:
        day, month, year = token.split("_")
        return date(int(year), int(month), int(day))
    year, month, day = token.split("-")
    return date(int(year), int(month), int(day))


def clean_name(raw: str | None) -> str | None:
    """Trim separators left over around a name group; None if nothing remains."""
    if raw is None:
        return None
    cleaned = raw.strip().strip("-_ ").strip()
    return cleaned or None


class FilenamePattern(ABC):
    """
    Abstract base class for filename rules.
    """

    @abstractmethod
    def match(self, stem: str) -> CampaignMetadata | None:
        """
        Try to extract metadata from a filename stem.

        Args:
            stem: Filename without directory and extension

        Returns:
            Fully populated CampaignMetadata, or None when the rule does not apply
        """
        pass

    @property
    @abstractmethod
    def pattern_type(self) -> str:
        """Return the rule identifier."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.pattern_type})"


class RegexFilenamePattern(FilenamePattern):
    """
    Rule driven by a regular expression with named groups.

    Groups: ``campaign`` (or ``client``), ``start`` and optionally ``end``.
    A single date is used as both start and end. Invalid calendar dates or
    a reversed range make the rule not match.
    """

    regex: Pattern

    def match(self, stem: str) -> CampaignMetadata | None:
        found = self.regex.match(stem)
        if not found:
            return None

        groups = found.groupdict()
        try:
            start = parse_date_token(groups["start"])
            end = parse_date_token(groups.get("end") or groups["start"])
        except ValueError:
            return None

        if end < start:
            return None

        return self.build(groups, start, end)

    def build(self, groups: dict[str, str | None], start: date, end: date) -> CampaignMetadata | None:
        """Assemble the metadata record from the matched groups."""
        name = clean_name(groups.get("campaign"))
        if name is None:
            return None
        return CampaignMetadata(
            campaign_name=to_title_case(name),
            start_date=start,
            end_date=end,
            pattern=self.pattern_type,
        )


class QuarterRangePattern(RegexFilenamePattern):
    """<Client> - <YYYY> Q<n> <DD_MM_YYYY> - <DD_MM_YYYY>"""

    regex = re.compile(
        rf"^(?P<client>.+?)\s*-\s*(?P<year>\d{{4}})\s*Q(?P<quarter>[1-4])\s+"
        rf"(?P<start>{DMY_DATE})\s*-\s*(?P<end>{DMY_DATE})$",
        re.IGNORECASE,
    )

    def build(self, groups, start, end):
        client = clean_name(groups.get("client"))
        if client is None:
            return None
        client = to_title_case(client)
        return CampaignMetadata(
            campaign_name=client,
            client=client,
            start_date=start,
            end_date=end,
            quarter=f"{groups['year']} Q{groups['quarter']}",
            pattern=self.pattern_type,
        )

    @property
    def pattern_type(self) -> str:
        return "quarter_range"


class DashedDateRangePattern(RegexFilenamePattern):
    """<Campaign> - <DD_MM_YYYY> - <DD_MM_YYYY>"""

    regex = re.compile(
        rf"^(?P<campaign>.+?)\s*-\s*(?P<start>{DMY_DATE})\s*-\s*(?P<end>{DMY_DATE})$"
    )

    @property
    def pattern_type(self) -> str:
        return "dashed_date_range"


class SpacedDateRangePattern(RegexFilenamePattern):
    """<Campaign> <DD_MM_YYYY> - <DD_MM_YYYY>"""

    regex = re.compile(
        rf"^(?P<campaign>.+?)\s+(?P<start>{DMY_DATE})\s*-\s*(?P<end>{DMY_DATE})$"
    )

    @property
    def pattern_type(self) -> str:
        return "spaced_date_range"


class IsoDateRangePattern(RegexFilenamePattern):
    """<Campaign> <YYYY-MM-DD> - <YYYY-MM-DD>"""

    regex = re.compile(
        rf"^(?P<campaign>.+?)(?:\s*-)?\s+(?P<start>{ISO_DATE})\s*-\s*(?P<end>{ISO_DATE})$"
    )

    @property
    def pattern_type(self) -> str:
        return "iso_date_range"


class SheetExportPattern(RegexFilenamePattern):
    """<Campaign> <YYYY-MM-DD> Analytics - Sheet<n> (spreadsheet export naming)"""

    regex = re.compile(
        rf"^(?P<campaign>.+?)\s+(?P<start>{ISO_DATE})\s+Analytics\s*-\s*Sheet\d+$",
        re.IGNORECASE,
    )

    @property
    def pattern_type(self) -> str:
        return "sheet_export"


class SingleIsoDatePattern(RegexFilenamePattern):
    """<Campaign> <YYYY-MM-DD>"""

    regex = re.compile(
        rf"^(?P<campaign>.+?)(?:\s*-)?\s+(?P<start>{ISO_DATE})$"
    )

    @property
    def pattern_type(self) -> str:
        return "single_iso_date"


# Order matters: the quarter rule must run before the generic range rules,
# which would otherwise swallow "<Client> - <YYYY> Q<n>" into the campaign name.
DEFAULT_PATTERNS: tuple[FilenamePattern, ...] = (
    QuarterRangePattern(),
    DashedDateRangePattern(),
    SpacedDateRangePattern(),
    IsoDateRangePattern(),
    SheetExportPattern(),
    SingleIsoDatePattern(),
)
