"""Topology module for factory floor graph structure."""

from factory_flow.topology.graph import (
    Connection,
    FactoryGraph,
    FlowGraph,
    build_factory_graph,
)

__all__ = [
    "Connection",
    "FlowGraph",
    "FactoryGraph",
    "build_factory_graph",
]
