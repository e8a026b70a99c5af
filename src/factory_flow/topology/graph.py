"""Graph-based topology for factory floor layouts.

Supports:
- Branching (one node feeding several downstream nodes)
- Merging (several nodes feeding one node)
- Cycles (rework loops), entered through a fallback start node
- Disconnected nodes, which are reported and excluded from analytics
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, NamedTuple, Optional, Set

from factory_flow.models import (
    EquipmentNode,
    EventKind,
    SimulationEvent,
    TransitEdge,
)

logger = logging.getLogger(__name__)


class Connection(NamedTuple):
    """An outgoing adjacency entry: where a unit goes next and how long it takes."""

    target_id: str
    transit_time: float
    edge_id: str


class FlowGraph:
    """Directed graph of equipment nodes and transit edges.

    Provides:
    - Node and edge management
    - Upstream/downstream traversal in edge declaration order
    - Path search
    """

    def __init__(self) -> None:
        """Initialize empty flow graph."""
        self._nodes: Dict[str, EquipmentNode] = {}
        self._edges: List[TransitEdge] = []

        # Adjacency lists for traversal
        self._outgoing: Dict[str, List[Connection]] = {}
        self._incoming: Dict[str, List[TransitEdge]] = {}

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def add_node(self, node: EquipmentNode) -> None:
        """Add an equipment node to the graph.

        Args:
            node: The node to add

        Raises:
            ValueError: If a node with the same id already exists
        """
        if node.id in self._nodes:
            raise ValueError(f"Node already exists: {node.id}")

        self._nodes[node.id] = node
        self._outgoing[node.id] = []
        self._incoming[node.id] = []

    def add_edge(self, edge: TransitEdge) -> None:
        """Add a transit edge between two existing nodes.

        Args:
            edge: The edge to add

        Raises:
            ValueError: If source or target node doesn't exist
        """
        for node_id in (edge.source, edge.target):
            if node_id not in self._nodes:
                raise ValueError(f"Node not found: {node_id}")

        self._edges.append(edge)
        self._outgoing[edge.source].append(
            Connection(edge.target, edge.transit_time, edge.id)
        )
        self._incoming[edge.target].append(edge)

    def get_node(self, node_id: str) -> Optional[EquipmentNode]:
        """Get a node by id."""
        return self._nodes.get(node_id)

    def get_nodes(self) -> List[EquipmentNode]:
        """Get all nodes in declaration order."""
        return list(self._nodes.values())

    def get_downstream(self, node_id: str) -> List[Connection]:
        """Get outgoing connections from a node, in edge declaration order."""
        return self._outgoing.get(node_id, [])

    def has_outgoing(self, node_id: str) -> bool:
        return bool(self._outgoing.get(node_id))

    def has_incoming(self, node_id: str) -> bool:
        return bool(self._incoming.get(node_id))

    @property
    def adjacency(self) -> Dict[str, List[Connection]]:
        """Source id -> outgoing connections, only for nodes that have any."""
        return {
            node_id: list(conns) for node_id, conns in self._outgoing.items() if conns
        }

    def reachable_from(self, start_ids: Iterable[str]) -> Set[str]:
        """Collect every node reachable from the given start nodes.

        Uses a single visited set, so cycles are walked once.
        """
        visited: Set[str] = set()
        for start_id in start_ids:
            stack = [start_id]
            while stack:
                node_id = stack.pop()
                if node_id in visited:
                    continue
                visited.add(node_id)
                for conn in reversed(self.get_downstream(node_id)):
                    if conn.target_id not in visited:
                        stack.append(conn.target_id)
        return visited

    def find_path(
        self, start: str, end: str, visited: Optional[Set[str]] = None
    ) -> Optional[List[str]]:
        """Find a path between two nodes using DFS.

        Args:
            start: Starting node id
            end: Ending node id
            visited: Set of already visited nodes (for recursion)

        Returns:
            List of node ids representing the path, or None if no path exists
        """
        if visited is None:
            visited = set()

        if start == end:
            return [start]

        if start in visited:
            return None

        visited.add(start)

        for conn in self.get_downstream(start):
            path = self.find_path(conn.target_id, end, visited)
            if path:
                return [start] + path

        return None

    def __repr__(self) -> str:
        return f"FlowGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"


@dataclass
class FactoryGraph:
    """Result of classifying a layout for simulation and analytics.

    Attributes:
        graph: The underlying flow graph
        start_node_ids: Nodes where units enter, in node declaration order
        connected_node_ids: Nodes reachable from any start node
        warnings: Non-fatal topology notifications
        error: Set when no starting point could be identified
    """

    graph: FlowGraph
    start_node_ids: List[str] = field(default_factory=list)
    connected_node_ids: Set[str] = field(default_factory=set)
    warnings: List[SimulationEvent] = field(default_factory=list)
    error: Optional[SimulationEvent] = None

    @property
    def adjacency(self) -> Dict[str, List[Connection]]:
        return self.graph.adjacency

    @property
    def is_cyclic_entry(self) -> bool:
        """True when the start node was picked by the cycle fallback."""
        return any(w.kind == EventKind.CYCLIC_FLOW_DETECTED for w in self.warnings)

    @property
    def disconnected_node_ids(self) -> List[str]:
        return [
            n.id for n in self.graph.get_nodes() if n.id not in self.connected_node_ids
        ]

    def get_downstream(self, node_id: str) -> List[Connection]:
        return self.graph.get_downstream(node_id)

    def get_node(self, node_id: str) -> Optional[EquipmentNode]:
        return self.graph.get_node(node_id)


def build_factory_graph(
    nodes: List[EquipmentNode], edges: List[TransitEdge]
) -> FactoryGraph:
    """Build and classify a factory graph from flat node and edge lists.

    Args:
        nodes: Equipment nodes in declaration order
        edges: Transit edges in declaration order

    Returns:
        FactoryGraph with start nodes, connected nodes and warnings
    """
    graph = FlowGraph()
    for node in nodes:
        graph.add_node(node)
    for edge in edges:
        if edge.source not in graph or edge.target not in graph:
            logger.warning(
                "Ignoring edge %s: %s -> %s references an unknown node",
                edge.id,
                edge.source,
                edge.target,
            )
            continue
        graph.add_edge(edge)

    result = FactoryGraph(graph=graph)

    # Start nodes have outgoing edges but are nobody's target
    result.start_node_ids = [
        n.id
        for n in graph.get_nodes()
        if graph.has_outgoing(n.id) and not graph.has_incoming(n.id)
    ]

    if not result.start_node_ids and nodes:
        cycle_starts = [
            n.id
            for n in graph.get_nodes()
            if graph.has_outgoing(n.id) and graph.has_incoming(n.id)
        ]
        if cycle_starts:
            result.start_node_ids.append(cycle_starts[0])
            result.warnings.append(
                SimulationEvent(
                    kind=EventKind.CYCLIC_FLOW_DETECTED,
                    message=(
                        "Starting simulation from an arbitrary node in the "
                        f"cycle: {graph.get_node(cycle_starts[0]).name}"
                    ),
                )
            )
        else:
            result.error = SimulationEvent(
                kind=EventKind.SIMULATION_ERROR,
                message=(
                    "Could not identify the starting point of your process "
                    "flow. Ensure nodes are connected properly."
                ),
            )

    result.connected_node_ids = graph.reachable_from(result.start_node_ids)

    disconnected = result.disconnected_node_ids
    if disconnected:
        result.warnings.append(
            SimulationEvent(
                kind=EventKind.DISCONNECTED_NODES_WARNING,
                message=(
                    f"{len(disconnected)} node(s) are not connected to the main "
                    f"flow and will be ignored: {', '.join(disconnected)}"
                ),
            )
        )

    return result
