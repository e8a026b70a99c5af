"""Unit tests for pydantic models."""

import pytest
from pydantic import ValidationError

from factory_flow import EquipmentNode, EquipmentSpec, TransitEdge


class TestEquipmentNode:
    """Tests for EquipmentNode."""

    def test_name_defaults_to_id(self):
        assert EquipmentNode(id="mill").name == "mill"

    def test_adjusted_cycle_time_divides_by_capacity(self):
        assert EquipmentNode(id="mill", cycle_time=60, max_capacity=2).adjusted_cycle_time == 30

    def test_adjusted_cycle_time_single_capacity(self):
        assert EquipmentNode(id="mill", cycle_time=60).adjusted_cycle_time == 60

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValidationError):
            EquipmentNode(id="mill", cycle_time=60, max_capacity=0)

    def test_rejects_negative_cycle_time(self):
        with pytest.raises(ValidationError):
            EquipmentNode(id="mill", cycle_time=-1)


class TestTransitEdge:
    """Tests for TransitEdge."""

    def test_default_id(self):
        assert TransitEdge.default_id("a", "b") == "e_a_b"

    def test_transit_time_defaults_to_zero(self):
        assert TransitEdge(id="e", source="a", target="b").transit_time == 0.0

    def test_rejects_empty_endpoint(self):
        with pytest.raises(ValidationError):
            TransitEdge(id="e", source="", target="b")

    def test_rejects_negative_transit_time(self):
        with pytest.raises(ValidationError):
            TransitEdge(id="e", source="a", target="b", transit_time=-2)


class TestEquipmentSpec:
    """Tests for EquipmentSpec."""

    def test_to_node_copies_timing(self):
        spec = EquipmentSpec(id="cnc_mill", name="CNC Mill", cycle_time=180, max_capacity=2)
        node = spec.to_node("cnc_mill-1")

        assert node.id == "cnc_mill-1"
        assert node.name == "CNC Mill"
        assert node.cycle_time == 180
        assert node.max_capacity == 2

    def test_to_node_name_override(self):
        spec = EquipmentSpec(id="cnc_mill", name="CNC Mill")
        assert spec.to_node("m", name="Mill 2").name == "Mill 2"
