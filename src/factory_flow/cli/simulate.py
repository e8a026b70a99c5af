"""Simulate command: play a run's layout headless and report the outcome."""

from datetime import datetime
from pathlib import Path
from typing import Optional

from factory_flow.loader import ConfigLoader
from factory_flow.simulation import PlaybackResult, run_playback


def simulate(
    run_name: str,
    config_dir: str = "config",
    speed: Optional[float] = None,
    frame_rate: Optional[float] = None,
    max_duration_sec: Optional[float] = None,
    export: bool = False,
    output_dir: str = "output",
) -> PlaybackResult:
    """Run a play-by-play simulation of a run config.

    Args:
        run_name: Name of the run config (without .yaml extension)
        config_dir: Path to config directory
        speed: Override the run's speed multiplier
        frame_rate: Override the run's frame rate
        max_duration_sec: Override the run's playback clock limit
        export: If True, export timeline and events to CSV files
        output_dir: Output directory for CSV export

    Returns:
        PlaybackResult of the run
    """
    loader = ConfigLoader(config_dir)
    resolved = loader.resolve_run(run_name)
    run = resolved.run

    speed = speed if speed is not None else run.speed
    frame_rate = frame_rate if frame_rate is not None else run.frame_rate
    max_duration_sec = (
        max_duration_sec if max_duration_sec is not None else run.max_duration_sec
    )

    print(f"Starting Playback: {run.name} (layout {resolved.layout.name}, {speed}x)...")
    result = run_playback(
        resolved.nodes,
        resolved.edges,
        speed=speed,
        frame_rate=frame_rate,
        max_duration_sec=max_duration_sec,
    )

    print("\n--- SIMULATION COMPLETE ---" if result.completed else "\n--- SIMULATION STOPPED ---")
    print(f"Frames:            {len(result.timeline):,}")
    print(f"Simulated Time:    {result.elapsed_sec:,.1f} s")
    print(f"Units Completed:   {result.units_completed:,}")

    if not result.events.empty:
        print("\n--- NOTIFICATIONS ---")
        for row in result.events.itertuples(index=False):
            print(f"[{row.sim_time_sec:8.2f}s] {row.kind}: {row.message}")

    if result.summary is not None:
        names = {n.id: n.name for n in resolved.nodes}
        print("\n--- UTILIZATION ---")
        for node_id, pct in result.summary.utilization_by_node.items():
            marker = "  <- bottleneck" if node_id == result.summary.bottleneck_node_id else ""
            print(f"{names.get(node_id, node_id):<30} {pct:>3}%{marker}")

    if export:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        timeline_path = out / f"timeline_{run.name}_{timestamp}.csv"
        events_path = out / f"events_{run.name}_{timestamp}.csv"
        result.timeline.to_csv(timeline_path, index=False)
        result.events.to_csv(events_path, index=False)

        print(f"\nExported: {timeline_path} ({len(result.timeline)} rows)")
        print(f"Exported: {events_path} ({len(result.events)} rows)")

    return result
