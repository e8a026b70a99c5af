"""Unit tokens and their per-frame state transitions.

A token is one simulated unit. It is either being processed at a node or
travelling along an edge, never both:

    Processing(node) --progress>=1--> InTransit(edge) for every outgoing edge
                                   \\-> terminal (no outgoing edges)
    InTransit(edge)  --transit_progress>=1--> Processing(target, 0)

Transitions are pure: ``advance_token`` returns new tokens and leaves its
input untouched.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple, Union

from factory_flow.topology import FactoryGraph

logger = logging.getLogger(__name__)

# Floor for cycle and transit durations; zero-time nodes and edges finish in one frame
MIN_DURATION_SEC = 0.1


@dataclass(frozen=True)
class Processing:
    """A unit being worked on at a node."""

    node_id: str
    progress: float = 0.0

    in_transit = False


@dataclass(frozen=True)
class InTransit:
    """A unit travelling along an edge from ``source_id`` to ``target_id``."""

    source_id: str
    target_id: str
    transit_time: float
    edge_id: str
    transit_progress: float = 0.0

    in_transit = True

    @property
    def node_id(self) -> str:
        """The node the unit left (where it is drawn until it arrives)."""
        return self.source_id


Token = Union[Processing, InTransit]


@dataclass
class TokenStep:
    """Outcome of advancing one token by one frame.

    Attributes:
        tokens: Successor tokens (empty when the unit finished)
        active_node_ids: Nodes that show activity this frame
        edge_progress: (edge_id, progress) to mark on a timed edge, if any
        completed_node_id: Node where the unit left the flow, if it did
    """

    tokens: List[Token] = field(default_factory=list)
    active_node_ids: List[str] = field(default_factory=list)
    edge_progress: Optional[Tuple[str, float]] = None
    completed_node_id: Optional[str] = None


def advance_token(
    token: Token, delta: float, speed: float, factory: FactoryGraph
) -> TokenStep:
    """Advance a token by ``delta`` wall-clock seconds at ``speed``.

    Args:
        token: Current token state
        delta: Elapsed seconds since the previous frame (already clamped)
        speed: Simulation speed multiplier
        factory: Classified factory graph

    Returns:
        TokenStep describing the successor state
    """
    if isinstance(token, InTransit):
        return _advance_transit(token, delta, speed)
    return _advance_processing(token, delta, speed, factory)


def _advance_transit(token: InTransit, delta: float, speed: float) -> TokenStep:
    duration = max(token.transit_time, MIN_DURATION_SEC)
    progress = min(1.0, token.transit_progress + (delta * speed) / duration)

    step = TokenStep()
    # Zero-time edges are not drawn as in transit
    if token.transit_time > 0:
        step.edge_progress = (token.edge_id, progress)

    if progress >= 1:
        # Arrival counts as activity at the target right away
        step.tokens.append(Processing(node_id=token.target_id))
        step.active_node_ids.append(token.target_id)
    else:
        step.tokens.append(replace(token, transit_progress=progress))
    return step


def _advance_processing(
    token: Processing, delta: float, speed: float, factory: FactoryGraph
) -> TokenStep:
    node = factory.get_node(token.node_id)
    if node is None:
        logger.warning("Dropping unit at unknown node %s", token.node_id)
        return TokenStep()

    duration = max(node.adjusted_cycle_time, MIN_DURATION_SEC)
    progress = min(1.0, token.progress + (delta * speed) / duration)

    step = TokenStep(active_node_ids=[token.node_id])
    if progress < 1:
        step.tokens.append(replace(token, progress=progress))
        return step

    downstream = factory.get_downstream(token.node_id)
    if not downstream:
        step.completed_node_id = token.node_id
        return step

    # Fan-out: one independent unit per outgoing edge
    for conn in downstream:
        step.tokens.append(
            InTransit(
                source_id=token.node_id,
                target_id=conn.target_id,
                transit_time=conn.transit_time,
                edge_id=conn.edge_id,
            )
        )
    return step
