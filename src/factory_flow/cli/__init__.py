"""CLI commands for factory-flow."""

from factory_flow.cli.analyze import analyze
from factory_flow.cli.simulate import simulate

__all__ = [
    "analyze",
    "simulate",
]
