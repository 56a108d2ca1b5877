"""
MetricsRecord model holding the aggregate and per-interaction metrics of one export.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

TOTAL_AUDIENCE = "total_audience"


class MetricsRecord(BaseModel):
    """
    Metrics computed from one export after test-user exclusion.

    Metrics whose source column is missing are absent from ``metrics`` so the
    report layer can tell "zero" apart from "not available".

    ``total_audience`` is never computed from row data. It stays None until a
    caller supplies the manual figure through ``with_total_audience``.

    Attributes:
        metrics: Metric name -> count or rate (rates are percentages in [0, 100])
        interaction_unique_users: Interaction header -> distinct users with a value present
        interaction_totals: Interaction header -> summed event count
        interaction_labels: Interaction header -> display name
        excluded_test_users: Test identities found (and excluded) in the file
        missing_ids: Hash part of identities recorded as missing by the tracker
        total_audience: Manually supplied audience size, if any
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "metrics": {
                    "total_rows": 2,
                    "unique_visitors": 1,
                    "total_completions": 1,
                    "unique_completions": 1,
                    "unique_completion_rate": 100.0,
                },
                "interaction_unique_users": {"event_count_click": 1},
                "interaction_totals": {"event_count_click": 1},
                "interaction_labels": {"event_count_click": "Click"},
                "excluded_test_users": ["TESTUSER"],
                "missing_ids": [],
                "total_audience": None,
            }
        },
    )

    metrics: dict[str, int | float] = Field(default_factory=dict)
    interaction_unique_users: dict[str, int] = Field(default_factory=dict)
    interaction_totals: dict[str, int] = Field(default_factory=dict)
    interaction_labels: dict[str, str] = Field(default_factory=dict)
    excluded_test_users: list[str] = Field(default_factory=list)
    missing_ids: list[str] = Field(default_factory=list)
    total_audience: int | None = Field(None, ge=0)

    @field_validator("metrics", "interaction_unique_users", "interaction_totals")
    @classmethod
    def check_non_negative(cls, v):
        """Validate that no count or rate is negative."""
        for name, value in v.items():
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        return v

    @field_validator("metrics")
    @classmethod
    def check_rate_bounds(cls, v):
        """Validate that every rate is a percentage."""
        for name, value in v.items():
            if name.endswith("_rate") and value > 100:
                raise ValueError(f"{name} must lie in [0, 100], got {value}")
        return v

    def available_metrics(self) -> list[str]:
        """
        Names that can be selected as funnel stages, in a stable order.

        Returns:
            Computed metric names, then interaction headers, then
            total_audience when it has been supplied
        """
        names = list(self.metrics)
        names.extend(h for h in self.interaction_unique_users if h not in self.metrics)
        if self.total_audience is not None:
            names.append(TOTAL_AUDIENCE)
        return names

    def has_metric(self, name: str) -> bool:
        return name in self.available_metrics()

    def get(self, name: str) -> int | float | None:
        """Value of a metric or interaction column, or None when unavailable."""
        if name == TOTAL_AUDIENCE:
            return self.total_audience
        if name in self.metrics:
            return self.metrics[name]
        return self.interaction_unique_users.get(name)

    def with_total_audience(self, value: int) -> "MetricsRecord":
        """
        Return a copy carrying the manually supplied total audience.

        The value is validated like every other field; the original record
        is left untouched.
        """
        return MetricsRecord.model_validate(
            {**self.model_dump(), TOTAL_AUDIENCE: value}
        )
