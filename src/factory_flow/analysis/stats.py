"""Post-run utilization and bottleneck summary."""

import math
from typing import Collection, Dict, List, Optional

from factory_flow.models import EquipmentNode, SystemStats


def summarize(
    nodes: List[EquipmentNode], connected_node_ids: Collection[str]
) -> SystemStats:
    """Derive per-node utilization relative to the bottleneck.

    Disconnected nodes report 0% and never become the bottleneck. Among
    connected nodes the highest adjusted cycle time wins, first in node
    order on ties, and sets the 100% reference for everyone else.

    Args:
        nodes: Equipment nodes in declaration order
        connected_node_ids: Nodes reachable from a start node

    Returns:
        SystemStats with the bottleneck id and utilization percentages
    """
    bottleneck_id: Optional[str] = None
    max_adjusted = 0.0

    for node in nodes:
        if node.id not in connected_node_ids:
            continue
        if node.adjusted_cycle_time > max_adjusted:
            max_adjusted = node.adjusted_cycle_time
            bottleneck_id = node.id

    utilization: Dict[str, int] = {}
    for node in nodes:
        if node.id not in connected_node_ids or max_adjusted <= 0:
            utilization[node.id] = 0
            continue
        percent = node.adjusted_cycle_time / max_adjusted * 100
        # Halves round up
        utilization[node.id] = min(100, math.floor(percent + 0.5))

    return SystemStats(bottleneck_node_id=bottleneck_id, utilization_by_node=utilization)
