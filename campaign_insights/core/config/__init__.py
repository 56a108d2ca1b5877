"""
Engine configuration: defaults, YAML loading and programmatic building.
"""

from .engine_config import (
    EngineConfig,
    EngineConfigBuilder,
    EngineConfigLoader,
    FunnelSizeBounds,
)

__all__ = [
    "EngineConfig",
    "EngineConfigLoader",
    "EngineConfigBuilder",
    "FunnelSizeBounds",
]
