"""
Funnel models: ordered stages with conversion percentages.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FunnelStage(BaseModel):
    """
    One stage of a marketing funnel.

    Attributes:
        metric: Metric name or interaction header the stage reads
        label: Display label
        value: Absolute stage value
        pct_of_first: Value as a percentage of the first stage
        pct_of_previous: Value as a percentage of the previous stage (None on the first stage)
    """

    model_config = ConfigDict(frozen=True)

    metric: str = Field(..., min_length=1)
    label: str
    value: int | float = Field(..., ge=0)
    pct_of_first: float = Field(..., ge=0.0)
    pct_of_previous: float | None = Field(None, ge=0.0)


class FunnelRecord(BaseModel):
    """
    Ordered funnel built from a caller-chosen stage list.

    Stage percentages may exceed 100 because the caller picks the order.
    ``audience_reach`` compares the first stage with the manually supplied
    total audience and is likewise unbounded.
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "stages": [
                    {"metric": "unique_visitors", "label": "Unique Visitors", "value": 200,
                     "pct_of_first": 100.0, "pct_of_previous": None},
                    {"metric": "unique_plays", "label": "Unique Plays", "value": 150,
                     "pct_of_first": 75.0, "pct_of_previous": 75.0},
                    {"metric": "unique_completions", "label": "Unique Completions", "value": 60,
                     "pct_of_first": 30.0, "pct_of_previous": 40.0},
                ],
                "audience_reach": None,
            }
        },
    )

    stages: tuple[FunnelStage, ...]
    audience_reach: float | None = Field(None, ge=0.0)

    @model_validator(mode="after")
    def check_first_stage(self) -> "FunnelRecord":
        """Validate the first stage shape."""
        if self.stages:
            first = self.stages[0]
            if first.pct_of_previous is not None:
                raise ValueError("first stage has no previous stage")
            if first.pct_of_first != 100.0:
                raise ValueError("first stage must be 100% of itself")
        return self

    @property
    def metric_names(self) -> list[str]:
        return [stage.metric for stage in self.stages]

    def __len__(self) -> int:
        return len(self.stages)
