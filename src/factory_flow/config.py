"""Configuration schemas - re-exports from loader for convenience."""

# Re-export config types from loader
from factory_flow.loader import (
    ConfigLoader,
    DefaultsConfig,
    EdgeConfig,
    LayoutConfig,
    NodeConfig,
    ResolvedConfig,
    ResolvedLayout,
    RunConfig,
)

__all__ = [
    "ConfigLoader",
    "DefaultsConfig",
    "RunConfig",
    "LayoutConfig",
    "NodeConfig",
    "EdgeConfig",
    "ResolvedLayout",
    "ResolvedConfig",
]
