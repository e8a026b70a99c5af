"""Tests for per-token state transitions."""

import pytest

from factory_flow import InTransit, Processing, advance_token, build_factory_graph

from conftest import edge, node


@pytest.fixture
def fanout(fanout_layout):
    nodes, edges = fanout_layout
    return build_factory_graph(nodes, edges)


class TestProcessing:
    """Tests for tokens being processed at a node."""

    def test_progress_increment(self, fanout):
        step = advance_token(Processing("A"), delta=0.1, speed=1.0, factory=fanout)

        assert step.tokens == [Processing("A", progress=pytest.approx(0.0125))]
        assert step.active_node_ids == ["A"]
        assert step.completed_node_id is None

    def test_speed_multiplies_progress(self, fanout):
        step = advance_token(Processing("A"), delta=0.1, speed=5.0, factory=fanout)
        assert step.tokens[0].progress == pytest.approx(0.0625)

    def test_capacity_speeds_up_processing(self):
        factory = build_factory_graph(
            [node("A", 60, max_capacity=2), node("B")], [edge("A", "B")]
        )
        step = advance_token(Processing("A"), delta=0.1, speed=1.0, factory=factory)
        assert step.tokens[0].progress == pytest.approx(0.1 / 30)

    def test_zero_cycle_time_finishes_in_one_frame(self):
        factory = build_factory_graph([node("A", 0), node("B")], [edge("A", "B")])
        step = advance_token(Processing("A"), delta=0.1, speed=1.0, factory=factory)

        assert len(step.tokens) == 1
        assert isinstance(step.tokens[0], InTransit)

    def test_fan_out_one_token_per_edge(self, fanout):
        """Completing A spawns one unit towards B and one towards C."""
        step = advance_token(
            Processing("A", progress=0.999), delta=0.1, speed=1.0, factory=fanout
        )

        assert [t.target_id for t in step.tokens] == ["B", "C"]
        assert all(isinstance(t, InTransit) for t in step.tokens)
        assert all(t.transit_progress == 0 for t in step.tokens)
        assert all(t.source_id == "A" for t in step.tokens)
        assert step.active_node_ids == ["A"]

    def test_terminal_node_completes_unit(self, fanout):
        step = advance_token(
            Processing("B", progress=0.99), delta=0.1, speed=1.0, factory=fanout
        )

        assert step.tokens == []
        assert step.completed_node_id == "B"
        assert step.active_node_ids == ["B"]

    def test_unknown_node_dropped(self, fanout):
        step = advance_token(Processing("ghost"), delta=0.1, speed=1.0, factory=fanout)
        assert step.tokens == []
        assert step.completed_node_id is None

    def test_input_token_unchanged(self, fanout):
        token = Processing("A", progress=0.5)
        advance_token(token, delta=0.1, speed=1.0, factory=fanout)
        assert token.progress == 0.5


class TestInTransit:
    """Tests for tokens travelling along an edge."""

    def test_partial_transit_marks_edge(self, fanout):
        token = InTransit("A", "B", transit_time=2.0, edge_id="e_A_B")
        step = advance_token(token, delta=0.1, speed=1.0, factory=fanout)

        assert step.tokens[0].transit_progress == pytest.approx(0.05)
        assert step.edge_progress == ("e_A_B", pytest.approx(0.05))
        assert step.active_node_ids == []

    def test_arrival_starts_processing_at_target(self, fanout):
        token = InTransit("A", "B", transit_time=2.0, edge_id="e_A_B", transit_progress=0.99)
        step = advance_token(token, delta=0.1, speed=1.0, factory=fanout)

        assert step.tokens == [Processing("B", progress=0.0)]
        assert step.active_node_ids == ["B"]

    def test_zero_transit_not_drawn(self, fanout):
        token = InTransit("A", "B", transit_time=0.0, edge_id="e_A_B")
        step = advance_token(token, delta=0.05, speed=1.0, factory=fanout)

        assert step.edge_progress is None
        assert step.tokens[0].transit_progress == pytest.approx(0.5)

    def test_transit_progress_clamped(self, fanout):
        token = InTransit("A", "B", transit_time=0.0, edge_id="e_A_B")
        step = advance_token(token, delta=0.1, speed=10.0, factory=fanout)
        assert step.tokens == [Processing("B")]

    def test_in_transit_reports_source_as_node(self):
        token = InTransit("A", "B", transit_time=1.0, edge_id="e")
        assert token.node_id == "A"
        assert token.in_transit
        assert not Processing("A").in_transit
