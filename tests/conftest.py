"""Shared test fixtures for factory-flow tests."""

from pathlib import Path
from typing import Callable, List, Tuple

import pytest

from factory_flow import ConfigLoader, EquipmentNode, EventKind, TransitEdge


def node(node_id: str, cycle_time: float = 10.0, max_capacity: int = 1) -> EquipmentNode:
    return EquipmentNode(id=node_id, cycle_time=cycle_time, max_capacity=max_capacity)


def edge(source: str, target: str, transit_time: float = 0.0) -> TransitEdge:
    return TransitEdge(
        id=TransitEdge.default_id(source, target),
        source=source,
        target=target,
        transit_time=transit_time,
    )


@pytest.fixture
def config_dir() -> Path:
    """Path to the bundled config directory."""
    return Path(__file__).parent.parent / "config"


@pytest.fixture
def loader(config_dir: Path) -> ConfigLoader:
    """ConfigLoader instance."""
    return ConfigLoader(config_dir)


@pytest.fixture
def fanout_layout() -> Tuple[List[EquipmentNode], List[TransitEdge]]:
    """A feeds B and C with zero transit time."""
    nodes = [node("A", 8.0), node("B", 4.0), node("C", 4.0)]
    edges = [edge("A", "B"), edge("A", "C")]
    return nodes, edges


@pytest.fixture
def event_log() -> Tuple[List[Tuple[EventKind, str]], Callable[[EventKind, str], None]]:
    """A list of (kind, message) and the callback that fills it."""
    events: List[Tuple[EventKind, str]] = []
    return events, lambda kind, message: events.append((kind, message))
