"""Pydantic schemas for factory flow models."""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class EventKind(str, Enum):
    """User-visible notification kinds emitted by the engine."""

    SIMULATION_ERROR = "simulation-error"
    CYCLIC_FLOW_DETECTED = "cyclic-flow-detected"
    DISCONNECTED_NODES_WARNING = "disconnected-nodes-warning"
    UNIT_COMPLETE = "unit-complete"
    SIMULATION_COMPLETE = "simulation-complete"


class SimulationEvent(BaseModel):
    """A notification handed to the presentation layer."""

    kind: EventKind
    message: str


# --- Graph inputs ---


class EquipmentNode(BaseModel):
    """A piece of equipment placed on the factory floor."""

    id: str
    name: str = ""
    cycle_time: float = Field(default=0.0, ge=0)  # Seconds per unit
    max_capacity: int = Field(default=1, ge=1)  # Units processed concurrently

    @model_validator(mode="after")
    def _default_name(self) -> "EquipmentNode":
        if not self.name:
            self.name = self.id
        return self

    @property
    def adjusted_cycle_time(self) -> float:
        """Effective per-unit occupancy time (cycle time / capacity)."""
        if self.max_capacity > 1:
            return self.cycle_time / self.max_capacity
        return self.cycle_time


class TransitEdge(BaseModel):
    """A directed transit connection between two pieces of equipment."""

    id: str
    source: str
    target: str
    transit_time: float = Field(default=0.0, ge=0)  # Seconds

    @field_validator("source", "target")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Edge endpoints cannot be empty")
        return value

    @staticmethod
    def default_id(source: str, target: str) -> str:
        """Generate an edge id from source and target."""
        return f"e_{source}_{target}"


class EquipmentSpec(BaseModel):
    """An entry in the equipment library."""

    id: str
    name: str
    type: str = ""
    description: str = ""
    cycle_time: float = Field(default=0.0, ge=0)
    throughput: float = 0.0  # Units per hour (catalog figure)
    max_capacity: int = Field(default=1, ge=1)
    maintenance_interval_hours: Optional[float] = None
    setup_time_min: Optional[float] = None
    energy_kw: Optional[float] = None

    def to_node(self, node_id: str, name: Optional[str] = None) -> EquipmentNode:
        """Place this equipment on the floor as a node."""
        return EquipmentNode(
            id=node_id,
            name=name or self.name,
            cycle_time=self.cycle_time,
            max_capacity=self.max_capacity,
        )


# --- Engine outputs ---


class NodeAnnotation(BaseModel):
    """Per-node display state computed by the engine."""

    active: bool = False
    progress: Optional[float] = None
    utilization: Optional[int] = None
    bottleneck: bool = False


class EdgeAnnotation(BaseModel):
    """Per-edge transit display state computed by the engine."""

    transit_in_progress: bool = False
    transit_progress: float = 0.0


class UnitPosition(BaseModel):
    """Position of the tracked unit while it is being processed."""

    node_id: str
    progress: float


class LiveStats(BaseModel):
    """Critical-path statistics recomputed on every graph change."""

    total_cycle_time: float = 0.0
    estimated_throughput_per_hour: int = 0
    bottleneck_node_id: Optional[str] = None
    bottleneck_name: Optional[str] = None
    bottleneck_adjusted_cycle_time: float = 0.0


class SystemStats(BaseModel):
    """Post-run utilization summary."""

    bottleneck_node_id: Optional[str] = None
    utilization_by_node: Dict[str, int] = Field(default_factory=dict)
