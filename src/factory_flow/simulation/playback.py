"""Headless playback: drive an AnimationLoop on a SimPy clock and record it."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from factory_flow.analysis import analyze
from factory_flow.models import (
    EdgeAnnotation,
    EquipmentNode,
    EventKind,
    LiveStats,
    NodeAnnotation,
    SystemStats,
    TransitEdge,
    UnitPosition,
)
from factory_flow.simulation.animation import AnimationLoop
from factory_flow.simulation.scheduler import SimPyFrameScheduler

logger = logging.getLogger(__name__)


@dataclass
class PlaybackResult:
    """Outcome of a headless playback run.

    Attributes:
        timeline: One row per frame (tokens, active nodes, primary cursor)
        events: One row per notification
        live_stats: Critical-path statistics of the layout
        summary: Post-run utilization (None if the run hit the time limit)
        units_completed: Units that left the flow
        elapsed_sec: Simulated seconds covered by the run
        completed: True if every unit finished before the time limit
    """

    timeline: pd.DataFrame
    events: pd.DataFrame
    live_stats: LiveStats
    summary: Optional[SystemStats] = None
    units_completed: int = 0
    elapsed_sec: float = 0.0
    completed: bool = False


@dataclass
class _Recorder:
    """Collects loop callbacks into rows."""

    loop: Optional[AnimationLoop] = None
    frames: List[dict] = field(default_factory=list)
    events: List[dict] = field(default_factory=list)
    position: Optional[UnitPosition] = None

    def on_frame_update(
        self,
        node_annotations: Dict[str, NodeAnnotation],
        edge_annotations: Dict[str, EdgeAnnotation],
    ) -> None:
        if self.loop is None or not self.loop.running:
            return
        self.frames.append(
            {
                "frame": self.loop.frame_count,
                "sim_time_sec": round(self.loop.elapsed_sec, 6),
                "active_tokens": len(self.loop.tokens),
                "active_nodes": ",".join(
                    nid for nid, a in node_annotations.items() if a.active
                ),
                "edges_in_transit": ",".join(
                    eid for eid, a in edge_annotations.items() if a.transit_in_progress
                ),
            }
        )

    def on_unit_position_update(self, position: Optional[UnitPosition]) -> None:
        self.position = position
        if self.frames and self.loop is not None and self.loop.running:
            self.frames[-1]["primary_node"] = position.node_id if position else None
            self.frames[-1]["primary_progress"] = position.progress if position else None

    def on_event(self, kind: EventKind, message: str) -> None:
        self.events.append(
            {
                "frame": self.loop.frame_count if self.loop else 0,
                "sim_time_sec": round(self.loop.elapsed_sec, 6) if self.loop else 0.0,
                "kind": kind.value,
                "message": message,
            }
        )


def run_playback(
    nodes: List[EquipmentNode],
    edges: List[TransitEdge],
    speed: float = 1.0,
    frame_rate: float = 60.0,
    max_duration_sec: float = 3600.0,
) -> PlaybackResult:
    """Play a layout frame by frame until every unit finishes.

    Args:
        nodes: Equipment nodes in declaration order
        edges: Transit edges in declaration order
        speed: Simulation speed multiplier
        frame_rate: Frames per second of the playback clock
        max_duration_sec: Limit on the SimPy frame clock in seconds (not real
            time); the loop is stopped when reached

    Returns:
        PlaybackResult with timeline and events DataFrames

    Raises:
        ConfigurationError: If the layout has no usable start node
        ValueError: If max_duration_sec is not positive
    """
    if max_duration_sec <= 0:
        raise ValueError(f"max_duration_sec must be > 0, got {max_duration_sec}")

    scheduler = SimPyFrameScheduler(frame_rate=frame_rate)
    recorder = _Recorder()
    loop = AnimationLoop(
        nodes,
        edges,
        speed=speed,
        scheduler=scheduler,
        on_frame_update=recorder.on_frame_update,
        on_unit_position_update=recorder.on_unit_position_update,
        on_event=recorder.on_event,
    )
    recorder.loop = loop

    loop.start()
    scheduler.env.run(until=max_duration_sec)

    completed = loop.summary is not None
    units_completed = loop.units_completed
    elapsed_sec = loop.elapsed_sec
    if not completed:
        logger.warning(
            "Playback stopped at the %.1fs limit with %d unit(s) still in flow",
            max_duration_sec,
            len(loop.tokens),
        )
        loop.stop()

    timeline = pd.DataFrame(
        recorder.frames,
        columns=[
            "frame",
            "sim_time_sec",
            "active_tokens",
            "active_nodes",
            "edges_in_transit",
            "primary_node",
            "primary_progress",
        ],
    )
    events = pd.DataFrame(
        recorder.events, columns=["frame", "sim_time_sec", "kind", "message"]
    )

    return PlaybackResult(
        timeline=timeline,
        events=events,
        live_stats=analyze(nodes, edges),
        summary=loop.summary,
        units_completed=units_completed,
        elapsed_sec=elapsed_sec,
        completed=completed,
    )
