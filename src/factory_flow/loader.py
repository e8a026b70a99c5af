"""YAML configuration loader with name-based resolution."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from factory_flow.errors import ConfigurationError
from factory_flow.models import EquipmentNode, EquipmentSpec, TransitEdge


@dataclass
class DefaultsConfig:
    """Global defaults loaded from config/defaults.yaml."""

    simulation: Dict[str, Any] = field(default_factory=dict)
    equipment: Dict[str, Any] = field(default_factory=dict)


class ConfigLoader:
    """Loads and resolves YAML configuration files."""

    def __init__(self, config_dir: Path | str = "config"):
        self.config_dir = Path(config_dir)
        self.defaults = self.load_defaults()

    def load_defaults(self) -> DefaultsConfig:
        """Load global defaults from config/defaults.yaml."""
        path = self.config_dir / "defaults.yaml"
        if not path.exists():
            return DefaultsConfig()
        data = self._load_yaml(path)
        return DefaultsConfig(
            simulation=data.get("simulation", {}),
            equipment=data.get("equipment", {}),
        )

    def load_equipment(self, name: str) -> EquipmentSpec:
        """Load an equipment library entry by id."""
        # Try lowercase filename first, then original
        path = self.config_dir / "equipment" / f"{name.lower()}.yaml"
        if not path.exists():
            path = self.config_dir / "equipment" / f"{name}.yaml"
        data = self._load_yaml(path)
        equip_defaults = self.defaults.equipment
        return EquipmentSpec(
            id=data.get("id", name),
            name=data.get("name", name),
            type=data.get("type", ""),
            description=data.get("description", ""),
            cycle_time=data.get("cycle_time", equip_defaults.get("cycle_time", 0.0)),
            throughput=data.get("throughput", 0.0),
            max_capacity=data.get(
                "max_capacity", equip_defaults.get("max_capacity", 1)
            ),
            maintenance_interval_hours=data.get("maintenance_interval_hours"),
            setup_time_min=data.get("setup_time_min"),
            energy_kw=data.get("energy_kw"),
        )

    def list_equipment(self) -> List[EquipmentSpec]:
        """Load every entry in config/equipment/, sorted by file name."""
        equipment_dir = self.config_dir / "equipment"
        if not equipment_dir.exists():
            return []
        return [self.load_equipment(p.stem) for p in sorted(equipment_dir.glob("*.yaml"))]

    def load_layout(self, name: str) -> "LayoutConfig":
        """Load a layout configuration by name."""
        path = self.config_dir / "layouts" / f"{name}.yaml"
        data = self._load_yaml(path)
        nodes = [
            NodeConfig(
                id=n["id"],
                equipment=n.get("equipment"),
                name=n.get("name"),
                cycle_time=n.get("cycle_time"),
                max_capacity=n.get("max_capacity"),
            )
            for n in data.get("nodes", [])
        ]
        edges = [
            EdgeConfig(
                source=e["source"],
                target=e["target"],
                transit_time=e.get("transit_time", 0.0),
                id=e.get("id"),
            )
            for e in data.get("edges", [])
        ]
        return LayoutConfig(
            name=data["name"],
            description=data.get("description", ""),
            nodes=nodes,
            edges=edges,
        )

    def load_run(self, name: str) -> "RunConfig":
        """Load a run configuration by name.

        Raises:
            ConfigurationError: If speed, frame_rate or max_duration_sec is
                not positive
        """
        path = self.config_dir / "runs" / f"{name}.yaml"
        data = self._load_yaml(path)

        # Use defaults from defaults.yaml
        sim_defaults = self.defaults.simulation
        run = RunConfig(
            name=data["name"],
            layout=data["layout"],
            speed=data.get("speed", sim_defaults.get("speed", 1.0)),
            frame_rate=data.get("frame_rate", sim_defaults.get("frame_rate", 60.0)),
            max_duration_sec=data.get(
                "max_duration_sec", sim_defaults.get("max_duration_sec", 3600.0)
            ),
        )
        for key in ("speed", "frame_rate", "max_duration_sec"):
            if getattr(run, key) <= 0:
                raise ConfigurationError(
                    f"Run {run.name}: {key} must be > 0, got {getattr(run, key)}"
                )
        return run

    def resolve_layout(self, layout: "LayoutConfig") -> "ResolvedLayout":
        """Turn a layout config into concrete nodes and edges.

        Raises:
            ConfigurationError: If a node id repeats or an edge references an
                unknown node
        """
        nodes: List[EquipmentNode] = []
        equipment: Dict[str, EquipmentSpec] = {}
        seen_ids = set()
        for node_cfg in layout.nodes:
            if node_cfg.id in seen_ids:
                raise ConfigurationError(
                    f"Layout {layout.name}: duplicate node id {node_cfg.id}"
                )
            seen_ids.add(node_cfg.id)
            spec = None
            if node_cfg.equipment:
                if node_cfg.equipment not in equipment:
                    equipment[node_cfg.equipment] = self.load_equipment(
                        node_cfg.equipment
                    )
                spec = equipment[node_cfg.equipment]
            nodes.append(self._build_node(node_cfg, spec))

        node_ids = {n.id for n in nodes}
        edges: List[TransitEdge] = []
        for edge_cfg in layout.edges:
            for node_id in (edge_cfg.source, edge_cfg.target):
                if node_id not in node_ids:
                    raise ConfigurationError(
                        f"Layout {layout.name}: edge references unknown node {node_id}"
                    )
            edges.append(
                TransitEdge(
                    id=edge_cfg.id
                    or TransitEdge.default_id(edge_cfg.source, edge_cfg.target),
                    source=edge_cfg.source,
                    target=edge_cfg.target,
                    transit_time=edge_cfg.transit_time,
                )
            )

        return ResolvedLayout(
            layout=layout, nodes=nodes, edges=edges, equipment=equipment
        )

    def resolve_run(self, run_name: str) -> "ResolvedConfig":
        """Fully resolve a run config into its layout and parameters."""
        run = self.load_run(run_name)
        layout = self.load_layout(run.layout)
        resolved = self.resolve_layout(layout)
        return ResolvedConfig(
            run=run,
            layout=layout,
            nodes=resolved.nodes,
            edges=resolved.edges,
            equipment=resolved.equipment,
        )

    def _build_node(
        self, cfg: "NodeConfig", spec: Optional[EquipmentSpec]
    ) -> EquipmentNode:
        """Apply per-node overrides on top of the equipment entry."""
        equip_defaults = self.defaults.equipment
        cycle_time = cfg.cycle_time
        if cycle_time is None:
            cycle_time = spec.cycle_time if spec else equip_defaults.get("cycle_time", 0.0)
        max_capacity = cfg.max_capacity
        if max_capacity is None:
            max_capacity = (
                spec.max_capacity if spec else equip_defaults.get("max_capacity", 1)
            )
        return EquipmentNode(
            id=cfg.id,
            name=cfg.name or (spec.name if spec else cfg.id),
            cycle_time=cycle_time,
            max_capacity=max_capacity,
        )

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load a YAML file."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            return yaml.safe_load(f) or {}


# --- Config dataclasses ---


@dataclass
class NodeConfig:
    """Node placement in a layout, optionally overriding its equipment."""

    id: str
    equipment: Optional[str] = None  # Reference to config/equipment/*.yaml
    name: Optional[str] = None
    cycle_time: Optional[float] = None
    max_capacity: Optional[int] = None


@dataclass
class EdgeConfig:
    """Transit edge in a layout."""

    source: str
    target: str
    transit_time: float = 0.0
    id: Optional[str] = None


@dataclass
class LayoutConfig:
    """Layout configuration."""

    name: str
    description: str = ""
    nodes: List[NodeConfig] = field(default_factory=list)
    edges: List[EdgeConfig] = field(default_factory=list)


@dataclass
class RunConfig:
    """Run-level configuration."""

    name: str
    layout: str
    speed: float = 1.0
    frame_rate: float = 60.0
    max_duration_sec: float = 3600.0


@dataclass
class ResolvedLayout:
    """Layout with equipment applied."""

    layout: LayoutConfig
    nodes: List[EquipmentNode] = field(default_factory=list)
    edges: List[TransitEdge] = field(default_factory=list)
    equipment: Dict[str, EquipmentSpec] = field(default_factory=dict)


@dataclass
class ResolvedConfig:
    """Fully resolved configuration ready for simulation."""

    run: RunConfig
    layout: LayoutConfig
    nodes: List[EquipmentNode] = field(default_factory=list)
    edges: List[TransitEdge] = field(default_factory=list)
    equipment: Dict[str, EquipmentSpec] = field(default_factory=dict)
