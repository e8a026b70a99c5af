"""Play-by-play animation loop for units flowing through a layout.

The loop owns every piece of mutable run state (the token list and the
per-frame annotations). Each frame it advances all tokens from the previous
frame's list and replaces the list wholesale, so parallel tokens never see
each other's new state.

Usage:
    loop = AnimationLoop(
        nodes,
        edges,
        speed=1.0,
        scheduler=SimPyFrameScheduler(frame_rate=60),
        on_frame_update=render,
        on_unit_position_update=track,
        on_event=notify,
    )
    loop.start()
    loop.scheduler.env.run()
"""

import logging
from typing import Callable, Dict, List, Optional

from factory_flow.analysis import summarize
from factory_flow.errors import ConfigurationError
from factory_flow.models import (
    EdgeAnnotation,
    EquipmentNode,
    EventKind,
    NodeAnnotation,
    SystemStats,
    TransitEdge,
    UnitPosition,
)
from factory_flow.simulation.scheduler import FrameRequest, FrameScheduler
from factory_flow.simulation.token import Processing, Token, advance_token
from factory_flow.topology import FactoryGraph, build_factory_graph

logger = logging.getLogger(__name__)

# Longest step a single frame may take, in seconds
MAX_FRAME_DELTA_SEC = 0.1

# A run needs a start node and at least one downstream node
MIN_CONNECTED_NODES = 2

FrameUpdateCallback = Callable[
    [Dict[str, NodeAnnotation], Dict[str, EdgeAnnotation]], None
]
PositionCallback = Callable[[Optional[UnitPosition]], None]
EventCallback = Callable[[EventKind, str], None]

_WARNING_KINDS = {
    EventKind.SIMULATION_ERROR,
    EventKind.CYCLIC_FLOW_DETECTED,
    EventKind.DISCONNECTED_NODES_WARNING,
}


class AnimationLoop:
    """Frame-driven simulation of units travelling through the layout."""

    def __init__(
        self,
        nodes: List[EquipmentNode],
        edges: List[TransitEdge],
        speed: float = 1.0,
        scheduler: Optional[FrameScheduler] = None,
        on_frame_update: Optional[FrameUpdateCallback] = None,
        on_unit_position_update: Optional[PositionCallback] = None,
        on_event: Optional[EventCallback] = None,
    ):
        """Initialize the loop over a snapshot of the layout.

        Args:
            nodes: Equipment nodes in declaration order
            edges: Transit edges in declaration order
            speed: Simulation speed multiplier (must be > 0)
            scheduler: Frame source; if None, the caller drives ``tick``
            on_frame_update: Receives node and edge annotations every frame
            on_unit_position_update: Receives the primary unit position
            on_event: Receives user-visible notifications
        """
        if speed <= 0:
            raise ValueError(f"speed must be > 0, got {speed}")

        self.nodes = list(nodes)
        self.edges = list(edges)
        self.speed = speed
        self.scheduler = scheduler
        self.on_frame_update = on_frame_update
        self.on_unit_position_update = on_unit_position_update
        self.on_event = on_event

        self.factory: Optional[FactoryGraph] = None
        self.summary: Optional[SystemStats] = None
        self.units_completed = 0
        self.frame_count = 0
        self.elapsed_sec = 0.0  # Simulated seconds (wall delta * speed)

        self._tokens: List[Token] = []
        self._running = False
        self._has_run = False
        self._last_timestamp: Optional[float] = None
        self._pending: Optional[FrameRequest] = None

    # --- Lifecycle ---

    @property
    def running(self) -> bool:
        return self._running

    @property
    def tokens(self) -> List[Token]:
        """Copy of the current token list."""
        return list(self._tokens)

    def start(self) -> None:
        """Build the graph and launch one unit from every start node.

        Raises:
            ConfigurationError: If there is no start node or fewer than two
                connected nodes; nothing is started in that case
        """
        if self._running:
            self.stop()

        factory = build_factory_graph(self.nodes, self.edges)
        for warning in factory.warnings:
            self._emit(warning.kind, warning.message)

        if factory.error is not None:
            self._emit(factory.error.kind, factory.error.message)
            raise ConfigurationError(factory.error.message)

        if len(factory.connected_node_ids) < MIN_CONNECTED_NODES:
            message = (
                "At least two connected nodes are required to run a simulation."
            )
            self._emit(EventKind.SIMULATION_ERROR, message)
            raise ConfigurationError(message)

        self.factory = factory
        self.summary = None
        self.units_completed = 0
        self.frame_count = 0
        self.elapsed_sec = 0.0
        self._tokens = [Processing(node_id=nid) for nid in factory.start_node_ids]
        self._last_timestamp = None
        self._running = True
        self._has_run = True

        logger.info(
            "Starting playback from %s (%d connected nodes, speed %.2fx)",
            ", ".join(factory.start_node_ids),
            len(factory.connected_node_ids),
            self.speed,
        )
        self._request_frame()

    def stop(self) -> None:
        """Cancel the run and clear every annotation."""
        if self._pending is not None and self.scheduler is not None:
            self.scheduler.cancel(self._pending)
        self._pending = None
        self._running = False
        self._tokens = []

        if not self._has_run:
            return
        self._has_run = False

        if self.on_unit_position_update:
            self.on_unit_position_update(None)
        if self.on_frame_update:
            self.on_frame_update(
                {n.id: NodeAnnotation() for n in self.nodes},
                {e.id: EdgeAnnotation() for e in self.edges},
            )

    # --- Frames ---

    def tick(self, timestamp_ms: float) -> None:
        """Advance the simulation to ``timestamp_ms``.

        The first frame after ``start`` only records the baseline timestamp.
        The frame after the last unit leaves the flow shows the post-run
        summary instead of advancing.
        """
        self._pending = None
        if not self._running:
            return

        if not self._tokens:
            self._finish()
            return

        if self._last_timestamp is None:
            self._last_timestamp = timestamp_ms
            self._request_frame()
            return

        delta = min((timestamp_ms - self._last_timestamp) / 1000.0, MAX_FRAME_DELTA_SEC)
        delta = max(delta, 0.0)
        self._last_timestamp = timestamp_ms

        next_tokens: List[Token] = []
        active_node_ids = set()
        transit_edges: Dict[str, float] = {}

        for token in self._tokens:
            step = advance_token(token, delta, self.speed, self.factory)
            next_tokens.extend(step.tokens)
            active_node_ids.update(step.active_node_ids)
            if step.edge_progress is not None:
                edge_id, progress = step.edge_progress
                transit_edges[edge_id] = progress
            if step.completed_node_id is not None:
                self._complete_unit(step.completed_node_id)

        self._tokens = next_tokens
        self.frame_count += 1
        self.elapsed_sec += delta * self.speed

        if self.on_frame_update:
            self.on_frame_update(
                self._node_annotations(active_node_ids),
                self._edge_annotations(transit_edges),
            )
        if self.on_unit_position_update:
            self.on_unit_position_update(self.primary_position())

        self._request_frame()

    def primary_position(self) -> Optional[UnitPosition]:
        """Position of the first token, or None while it is in transit.

        Only one cursor is reported; see ``positions`` for every unit.
        """
        if not self._tokens:
            return None
        primary = self._tokens[0]
        if primary.in_transit:
            return None
        return UnitPosition(node_id=primary.node_id, progress=primary.progress)

    def positions(self) -> List[UnitPosition]:
        """Positions of every unit currently being processed."""
        return [
            UnitPosition(node_id=t.node_id, progress=t.progress)
            for t in self._tokens
            if not t.in_transit
        ]

    # --- Internals ---

    def _request_frame(self) -> None:
        if self.scheduler is not None:
            self._pending = self.scheduler.request(self.tick)

    def _node_annotations(self, active_node_ids) -> Dict[str, NodeAnnotation]:
        progress_by_node: Dict[str, float] = {}
        for token in self._tokens:
            if not token.in_transit and token.node_id not in progress_by_node:
                progress_by_node[token.node_id] = token.progress

        return {
            n.id: NodeAnnotation(
                active=n.id in active_node_ids,
                progress=progress_by_node.get(n.id),
            )
            for n in self.nodes
        }

    def _edge_annotations(self, transit_edges: Dict[str, float]) -> Dict[str, EdgeAnnotation]:
        return {
            e.id: EdgeAnnotation(
                transit_in_progress=e.id in transit_edges,
                transit_progress=transit_edges.get(e.id, 0.0),
            )
            for e in self.edges
        }

    def _complete_unit(self, node_id: str) -> None:
        self.units_completed += 1
        node = self.factory.get_node(node_id)
        self._emit(
            EventKind.UNIT_COMPLETE,
            f"A unit has completed processing at {node.name if node else node_id}",
        )

    def _finish(self) -> None:
        self._running = False
        self.summary = summarize(self.nodes, self.factory.connected_node_ids)
        self._emit(
            EventKind.SIMULATION_COMPLETE,
            "All units have completed the process flow.",
        )

        if self.on_frame_update:
            self.on_frame_update(
                {
                    n.id: NodeAnnotation(
                        active=False,
                        utilization=self.summary.utilization_by_node.get(n.id, 0),
                        bottleneck=n.id == self.summary.bottleneck_node_id,
                    )
                    for n in self.nodes
                },
                {e.id: EdgeAnnotation() for e in self.edges},
            )

    def _emit(self, kind: EventKind, message: str) -> None:
        if kind in _WARNING_KINDS:
            logger.warning("%s: %s", kind.value, message)
        else:
            logger.info("%s: %s", kind.value, message)
        if self.on_event:
            self.on_event(kind, message)
