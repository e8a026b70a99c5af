"""Editable factory layout with live statistics.

The layout owns its nodes and edges. All changes go through explicit
setters, and each change recomputes the live critical-path statistics and
hands them to the optional ``on_stats_change`` listener.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from factory_flow.analysis import analyze
from factory_flow.models import EquipmentNode, EquipmentSpec, LiveStats, TransitEdge
from factory_flow.simulation import AnimationLoop, FrameScheduler
from factory_flow.topology import FlowGraph

logger = logging.getLogger(__name__)

StatsCallback = Callable[[LiveStats], None]


class FactoryLayout:
    """Ordered collection of equipment nodes and transit edges."""

    def __init__(
        self,
        nodes: Optional[List[EquipmentNode]] = None,
        edges: Optional[List[TransitEdge]] = None,
        on_stats_change: Optional[StatsCallback] = None,
    ):
        self._nodes: Dict[str, EquipmentNode] = {}
        self._edges: Dict[str, TransitEdge] = {}
        self.on_stats_change = on_stats_change
        self.live_stats = LiveStats()

        for node in nodes or []:
            self._add_node(node)
        for edge in edges or []:
            self._add_edge(edge)
        self._refresh()

    @property
    def nodes(self) -> List[EquipmentNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[TransitEdge]:
        return list(self._edges.values())

    def get_node(self, node_id: str) -> Optional[EquipmentNode]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[TransitEdge]:
        return self._edges.get(edge_id)

    # --- Mutations ---

    def add_node(self, node: EquipmentNode) -> EquipmentNode:
        """Place a node on the floor."""
        self._add_node(node)
        self._refresh()
        return node

    def add_equipment(
        self, spec: EquipmentSpec, node_id: Optional[str] = None
    ) -> EquipmentNode:
        """Place a library item on the floor under a fresh node id."""
        node = spec.to_node(node_id or self._next_node_id(spec.id))
        return self.add_node(node)

    def connect(
        self, source: str, target: str, transit_time: float = 0.0
    ) -> TransitEdge:
        """Connect two nodes with a transit edge.

        Raises:
            ValueError: If a node is unknown or the pair is already connected
        """
        edge = TransitEdge(
            id=self._next_edge_id(source, target),
            source=source,
            target=target,
            transit_time=transit_time,
        )
        self._add_edge(edge)
        if self.to_graph().find_path(target, source):
            logger.info("Connection %s -> %s closes a loop", source, target)
        self._refresh()
        return edge

    def add_connected_equipment(
        self, source_id: str, spec: EquipmentSpec
    ) -> EquipmentNode:
        """Place a library item and connect it downstream of ``source_id``."""
        if source_id not in self._nodes:
            raise ValueError(f"Node not found: {source_id}")
        node = spec.to_node(self._next_node_id(spec.id))
        self._add_node(node)
        self._add_edge(
            TransitEdge(
                id=self._next_edge_id(source_id, node.id),
                source=source_id,
                target=node.id,
            )
        )
        logger.info("Added %s downstream of %s", node.name, source_id)
        self._refresh()
        return node

    def set_transit_time(self, edge_id: str, seconds: float) -> TransitEdge:
        """Change the transit time of an edge."""
        edge = self._edges.get(edge_id)
        if edge is None:
            raise ValueError(f"Edge not found: {edge_id}")
        data = edge.model_dump()
        data["transit_time"] = seconds
        self._edges[edge_id] = TransitEdge(**data)
        self._refresh()
        return self._edges[edge_id]

    def update_node(self, node_id: str, **changes: Any) -> EquipmentNode:
        """Change equipment parameters (name, cycle_time, max_capacity)."""
        node = self._nodes.get(node_id)
        if node is None:
            raise ValueError(f"Node not found: {node_id}")
        if "id" in changes:
            raise ValueError("Node ids cannot be changed")
        unknown = sorted(set(changes) - set(EquipmentNode.model_fields))
        if unknown:
            raise ValueError(f"Unknown node field(s): {', '.join(unknown)}")
        data = node.model_dump()
        data.update(changes)
        self._nodes[node_id] = EquipmentNode(**data)
        self._refresh()
        return self._nodes[node_id]

    def remove_node(self, node_id: str) -> None:
        """Remove a node together with every edge touching it."""
        if node_id not in self._nodes:
            raise ValueError(f"Node not found: {node_id}")
        del self._nodes[node_id]
        self._edges = {
            eid: e
            for eid, e in self._edges.items()
            if e.source != node_id and e.target != node_id
        }
        self._refresh()

    def remove_edge(self, edge_id: str) -> None:
        if edge_id not in self._edges:
            raise ValueError(f"Edge not found: {edge_id}")
        del self._edges[edge_id]
        self._refresh()

    # --- Simulation ---

    def simulator(
        self,
        speed: float = 1.0,
        scheduler: Optional[FrameScheduler] = None,
        **callbacks: Any,
    ) -> AnimationLoop:
        """Create an animation loop over a snapshot of the current layout."""
        return AnimationLoop(
            self.nodes, self.edges, speed=speed, scheduler=scheduler, **callbacks
        )

    def to_graph(self) -> FlowGraph:
        graph = FlowGraph()
        for node in self._nodes.values():
            graph.add_node(node)
        for edge in self._edges.values():
            graph.add_edge(edge)
        return graph

    # --- Internals ---

    def _add_node(self, node: EquipmentNode) -> None:
        if node.id in self._nodes:
            raise ValueError(f"Node already exists: {node.id}")
        self._nodes[node.id] = node

    def _add_edge(self, edge: TransitEdge) -> None:
        for node_id in (edge.source, edge.target):
            if node_id not in self._nodes:
                raise ValueError(f"Node not found: {node_id}")
        if edge.id in self._edges:
            raise ValueError(f"Edge already exists: {edge.id}")
        if any(
            e.source == edge.source and e.target == edge.target
            for e in self._edges.values()
        ):
            raise ValueError(f"Already connected: {edge.source} -> {edge.target}")

        self._edges[edge.id] = edge

    def _next_node_id(self, base: str) -> str:
        index = 1
        while f"{base}-{index}" in self._nodes:
            index += 1
        return f"{base}-{index}"

    def _next_edge_id(self, source: str, target: str) -> str:
        edge_id = TransitEdge.default_id(source, target)
        index = 2
        while edge_id in self._edges:
            edge_id = f"{TransitEdge.default_id(source, target)}_{index}"
            index += 1
        return edge_id

    def _refresh(self) -> None:
        self.live_stats = analyze(self.nodes, self.edges)
        if self.on_stats_change:
            self.on_stats_change(self.live_stats)
