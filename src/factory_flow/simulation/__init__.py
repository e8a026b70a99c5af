"""Simulation module for play-by-play factory flow animation."""

from factory_flow.simulation.animation import (
    MAX_FRAME_DELTA_SEC,
    AnimationLoop,
)
from factory_flow.simulation.playback import PlaybackResult, run_playback
from factory_flow.simulation.scheduler import (
    FrameRequest,
    FrameScheduler,
    SimPyFrameScheduler,
)
from factory_flow.simulation.token import (
    MIN_DURATION_SEC,
    InTransit,
    Processing,
    Token,
    TokenStep,
    advance_token,
)

__all__ = [
    "AnimationLoop",
    "MAX_FRAME_DELTA_SEC",
    "MIN_DURATION_SEC",
    "FrameRequest",
    "FrameScheduler",
    "SimPyFrameScheduler",
    "Processing",
    "InTransit",
    "Token",
    "TokenStep",
    "advance_token",
    "PlaybackResult",
    "run_playback",
]
