"""Analyze command: print live critical-path statistics for a run's layout."""

from factory_flow.analysis import analyze_graph
from factory_flow.loader import ConfigLoader
from factory_flow.models import LiveStats
from factory_flow.topology import build_factory_graph


def analyze(run_name: str, config_dir: str = "config") -> LiveStats:
    """Compute and print live statistics for a run's layout.

    Args:
        run_name: Name of the run config (without .yaml extension)
        config_dir: Path to config directory

    Returns:
        LiveStats for the resolved layout
    """
    loader = ConfigLoader(config_dir)
    resolved = loader.resolve_run(run_name)
    factory = build_factory_graph(resolved.nodes, resolved.edges)
    stats = analyze_graph(factory)

    print(f"Layout: {resolved.layout.name}")
    print(f"  Nodes: {len(resolved.nodes)}  Edges: {len(resolved.edges)}")
    print(f"  Start nodes: {', '.join(factory.start_node_ids) or '(none)'}")
    for warning in factory.warnings:
        print(f"  [{warning.kind.value}] {warning.message}")
    if factory.error:
        print(f"  [{factory.error.kind.value}] {factory.error.message}")

    print("\n--- LIVE STATS ---")
    print(f"Total Cycle Time:      {stats.total_cycle_time:,.1f} s")
    print(f"Estimated Throughput:  {stats.estimated_throughput_per_hour:,} units/hr")
    if stats.bottleneck_node_id:
        print(
            f"Bottleneck:            {stats.bottleneck_name} "
            f"({stats.bottleneck_adjusted_cycle_time:,.1f} s/unit)"
        )
    else:
        print("Bottleneck:            (none)")

    return stats
