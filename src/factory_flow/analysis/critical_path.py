"""Critical path analysis for live (static) layout statistics.

Computes the longest accumulated path through the layout and the bottleneck
node without animating anything. Safe to call on every graph change: the
analysis is pure and leaves nodes and edges untouched.
"""

import math
from typing import FrozenSet, List, Optional

from factory_flow.models import EquipmentNode, LiveStats, TransitEdge
from factory_flow.topology import FactoryGraph, build_factory_graph

SECONDS_PER_HOUR = 3600


class _LongestPathSearch:
    """Depth-first longest-path search that also tracks the bottleneck.

    Each branch carries its own visited set, so diamonds are explored along
    every route and only true cycles are cut short. Runtime grows
    exponentially with the number of diamonds in the layout.
    """

    def __init__(self, factory: FactoryGraph):
        self.factory = factory
        self.bottleneck_id: Optional[str] = None
        self.max_adjusted_cycle_time = 0.0

    def path_time(
        self, node_id: str, accumulated: float, visited: FrozenSet[str]
    ) -> float:
        if node_id in visited:
            return accumulated

        node = self.factory.get_node(node_id)
        adjusted = node.adjusted_cycle_time if node else 0.0

        # First node to reach a new maximum keeps the title
        if adjusted > self.max_adjusted_cycle_time:
            self.max_adjusted_cycle_time = adjusted
            self.bottleneck_id = node_id

        new_accumulated = accumulated + adjusted
        downstream = self.factory.get_downstream(node_id)
        if not downstream:
            return new_accumulated

        branch_visited = visited | {node_id}
        return max(
            self.path_time(conn.target_id, new_accumulated + conn.transit_time, branch_visited)
            for conn in downstream
        )


def analyze_graph(factory: FactoryGraph) -> LiveStats:
    """Compute live statistics for an already-built factory graph."""
    if not factory.graph.get_nodes():
        return LiveStats()

    search = _LongestPathSearch(factory)
    total_cycle_time = 0.0
    for start_id in factory.start_node_ids:
        total_cycle_time = max(
            total_cycle_time, search.path_time(start_id, 0.0, frozenset())
        )

    bottleneck = (
        factory.get_node(search.bottleneck_id) if search.bottleneck_id else None
    )
    bottleneck_time = search.max_adjusted_cycle_time
    throughput = (
        math.floor(SECONDS_PER_HOUR / bottleneck_time) if bottleneck_time > 0 else 0
    )

    return LiveStats(
        total_cycle_time=total_cycle_time,
        estimated_throughput_per_hour=throughput,
        bottleneck_node_id=bottleneck.id if bottleneck else None,
        bottleneck_name=bottleneck.name if bottleneck else None,
        bottleneck_adjusted_cycle_time=bottleneck_time,
    )


def analyze(nodes: List[EquipmentNode], edges: List[TransitEdge]) -> LiveStats:
    """Compute critical-path statistics for a layout.

    Args:
        nodes: Equipment nodes in declaration order
        edges: Transit edges in declaration order

    Returns:
        LiveStats with total cycle time, estimated throughput and bottleneck
    """
    if not nodes:
        return LiveStats()
    return analyze_graph(build_factory_graph(nodes, edges))
