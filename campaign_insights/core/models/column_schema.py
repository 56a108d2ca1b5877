"""
ColumnSchema model mapping canonical fields and interaction columns to positions.
"""

from pydantic import BaseModel, ConfigDict, Field

USER_ID_FIELD = "user_id"


class ColumnSchema(BaseModel):
    """
    Resolved column layout of one export file.

    Attributes:
        canonical_fields: Canonical field name -> column position. Absent fields are not keys.
        interaction_columns: Original header string -> column position, in file order
        interaction_labels: Original header string -> title-cased event name
    """

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "canonical_fields": {"user_id": 0, "completions": 1},
                "interaction_columns": {"event_count_click": 2},
                "interaction_labels": {"event_count_click": "Click"},
            }
        },
    )

    canonical_fields: dict[str, int] = Field(default_factory=dict)
    interaction_columns: dict[str, int] = Field(default_factory=dict)
    interaction_labels: dict[str, str] = Field(default_factory=dict)

    def has_field(self, field_name: str) -> bool:
        return field_name in self.canonical_fields

    def position(self, field_name: str) -> int | None:
        """Column position of a canonical field, or None when absent."""
        return self.canonical_fields.get(field_name)

    @property
    def user_id_position(self) -> int:
        return self.canonical_fields[USER_ID_FIELD]
