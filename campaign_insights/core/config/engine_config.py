"""
Engine configuration management.

Loads the engine configuration from YAML files and provides a builder
for assembling configurations programmatically.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from campaign_insights.core.errors import ConfigurationError

DEFAULT_TEST_USER_IDS = frozenset({"X001", "PH123", "OMMATEST"})
DEFAULT_INTERACTION_PREFIX = "event_count_"
DEFAULT_MISSING_ID_PREFIX = "MissingID-"


class FunnelSizeBounds(BaseModel):
    """Allowed number of funnel stages."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(3, ge=1)
    max: int = Field(6, ge=1)
    default: int = Field(4, ge=1)

    @model_validator(mode="after")
    def check_ordering(self) -> "FunnelSizeBounds":
        """Validate min <= default <= max."""
        if not self.min <= self.default <= self.max:
            raise ValueError(
                f"funnel bounds must satisfy min <= default <= max, "
                f"got min={self.min} default={self.default} max={self.max}"
            )
        return self

    def allows(self, stage_count: int) -> bool:
        return self.min <= stage_count <= self.max


class EngineConfig(BaseModel):
    """
    Read-only configuration passed into every pipeline invocation.

    Attributes:
        test_user_ids: Identities excluded from every metric
        interaction_column_prefix: Header prefix marking interaction/event columns
        funnel_size_bounds: Minimum, maximum and default funnel length
        missing_id_prefix: Identity prefix the tracker uses for users without an id
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "test_user_ids": ["X001", "PH123", "OMMATEST"],
                "interaction_column_prefix": "event_count_",
                "funnel_size_bounds": {"min": 3, "max": 6, "default": 4},
                "missing_id_prefix": "MissingID-",
            }
        },
    )

    test_user_ids: frozenset[str] = Field(DEFAULT_TEST_USER_IDS, alias="testUserIds")
    interaction_column_prefix: str = Field(
        DEFAULT_INTERACTION_PREFIX, min_length=1, alias="interactionColumnPrefix"
    )
    funnel_size_bounds: FunnelSizeBounds = Field(
        default_factory=FunnelSizeBounds, alias="funnelSizeBounds"
    )
    missing_id_prefix: str = Field(DEFAULT_MISSING_ID_PREFIX, min_length=1, alias="missingIdPrefix")

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "EngineConfig":
        """
        Build a configuration from a plain mapping (parsed YAML, CLI options).

        Raises:
            ConfigurationError: If the mapping does not describe a valid configuration
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid engine configuration: {e}") from e


class EngineConfigLoader:
    """
    Loads the engine configuration from a YAML file.

    Expected YAML format:
    ```yaml
    engine:
      test_user_ids:
        - X001
        - PH123
      interaction_column_prefix: event_count_
      funnel_size_bounds:
        min: 3
        max: 6
        default: 4
    ```

    Keys may also use the camelCase spelling (testUserIds, ...). Omitted
    keys fall back to the defaults.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Engine configuration file not found: {config_path}")

    def load(self) -> EngineConfig:
        """
        Load and parse the configuration.

        Returns:
            Validated EngineConfig

        Raises:
            ConfigurationError: If YAML is invalid or missing the 'engine' section
        """
        try:
            with open(self.config_path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if not isinstance(config, dict) or "engine" not in config:
            raise ConfigurationError("Configuration file must contain 'engine' section")

        section = config["engine"] or {}
        if not isinstance(section, dict):
            raise ConfigurationError("'engine' section must be a mapping")

        return EngineConfig.from_mapping(section)


class EngineConfigBuilder:
    """
    Programmatically build engine configurations (for testing or per-client overrides).
    """

    def __init__(self, base: EngineConfig | None = None):
        """Initialize from an existing configuration or the defaults."""
        base = base or EngineConfig()
        self._values: dict[str, Any] = base.model_dump()

    def with_test_user_ids(self, *user_ids: str) -> "EngineConfigBuilder":
        """Replace the test user list."""
        self._values["test_user_ids"] = frozenset(user_ids)
        return self

    def add_test_user_id(self, user_id: str) -> "EngineConfigBuilder":
        """Add one identity to the test user list."""
        self._values["test_user_ids"] = frozenset(self._values["test_user_ids"]) | {user_id}
        return self

    def with_interaction_prefix(self, prefix: str) -> "EngineConfigBuilder":
        """Set the interaction column naming convention."""
        self._values["interaction_column_prefix"] = prefix
        return self

    def with_funnel_bounds(
        self,
        min_stages: int,
        max_stages: int,
        default_stages: int | None = None
    ) -> "EngineConfigBuilder":
        """Set the funnel length bounds; default is clamped into range when omitted."""
        if default_stages is None:
            current = self._values["funnel_size_bounds"]["default"]
            default_stages = max(min_stages, min(current, max_stages))
        self._values["funnel_size_bounds"] = {
            "min": min_stages,
            "max": max_stages,
            "default": default_stages,
        }
        return self

    def with_missing_id_prefix(self, prefix: str) -> "EngineConfigBuilder":
        """Set the tracker's missing-identity prefix."""
        self._values["missing_id_prefix"] = prefix
        return self

    def build(self) -> EngineConfig:
        """Build and return the validated configuration."""
        return EngineConfig.from_mapping(self._values)
