"""
CampaignMetadata model holding what can be learned from an export's filename.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, model_validator


class CampaignMetadata(BaseModel):
    """
    Best-effort campaign description extracted from a filename.

    Every field is optional; None means "unknown", never "empty".

    Attributes:
        campaign_name: Title-cased campaign name
        client: Client identifier (quarter-style filenames only)
        start_date: First day of the reporting window
        end_date: Last day of the reporting window
        quarter: Reporting quarter label, e.g. "2025 Q1"
        pattern: Name of the filename rule that matched
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "campaign_name": "CCI",
                "client": "CCI",
                "start_date": "2025-05-13",
                "end_date": "2025-05-20",
                "quarter": "2025 Q1",
                "pattern": "quarter_range",
            }
        },
    )

    campaign_name: str | None = None
    client: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    quarter: str | None = None
    pattern: str | None = None

    @model_validator(mode="after")
    def check_date_order(self) -> "CampaignMetadata":
        """Validate that a date range is either complete and ordered, or absent."""
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be set together")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date precedes start_date")
        return self

    @property
    def date_range(self) -> str | None:
        """Canonical "YYYY-MM-DD / YYYY-MM-DD" rendering, or None when unknown."""
        if self.start_date is None or self.end_date is None:
            return None
        return f"{self.start_date.isoformat()} / {self.end_date.isoformat()}"

    @property
    def is_known(self) -> bool:
        return self.pattern is not None
