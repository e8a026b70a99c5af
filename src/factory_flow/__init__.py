"""Factory floor flow simulation: live critical path and play-by-play playback."""

from factory_flow.analysis import analyze, analyze_graph, summarize
from factory_flow.cli import simulate
from factory_flow.config import (
    ConfigLoader,
    DefaultsConfig,
    EdgeConfig,
    LayoutConfig,
    NodeConfig,
    ResolvedConfig,
    ResolvedLayout,
    RunConfig,
)
from factory_flow.editor import FactoryLayout
from factory_flow.errors import ConfigurationError, FactoryFlowError
from factory_flow.models import (
    EdgeAnnotation,
    EquipmentNode,
    EquipmentSpec,
    EventKind,
    LiveStats,
    NodeAnnotation,
    SimulationEvent,
    SystemStats,
    TransitEdge,
    UnitPosition,
)
from factory_flow.simulation import (
    AnimationLoop,
    FrameScheduler,
    InTransit,
    PlaybackResult,
    Processing,
    SimPyFrameScheduler,
    advance_token,
    run_playback,
)
from factory_flow.topology import (
    Connection,
    FactoryGraph,
    FlowGraph,
    build_factory_graph,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "EquipmentNode",
    "TransitEdge",
    "EquipmentSpec",
    "NodeAnnotation",
    "EdgeAnnotation",
    "UnitPosition",
    "LiveStats",
    "SystemStats",
    "EventKind",
    "SimulationEvent",
    # Errors
    "FactoryFlowError",
    "ConfigurationError",
    # Config
    "ConfigLoader",
    "DefaultsConfig",
    "RunConfig",
    "LayoutConfig",
    "NodeConfig",
    "EdgeConfig",
    "ResolvedLayout",
    "ResolvedConfig",
    # Topology
    "FlowGraph",
    "FactoryGraph",
    "Connection",
    "build_factory_graph",
    # Analysis
    "analyze",
    "analyze_graph",
    "summarize",
    # Simulation
    "AnimationLoop",
    "FrameScheduler",
    "SimPyFrameScheduler",
    "Processing",
    "InTransit",
    "advance_token",
    "PlaybackResult",
    "run_playback",
    # Editor
    "FactoryLayout",
    # CLI
    "simulate",
]
