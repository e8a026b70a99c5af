"""Tests for live critical-path statistics."""

from factory_flow import LiveStats, analyze

from conftest import edge, node


class TestAnalyze:
    """Tests for analyze()."""

    def test_empty_layout_is_all_zero(self):
        assert analyze([], []) == LiveStats()

    def test_linear_chain_adds_cycle_and_transit(self):
        stats = analyze(
            [node("A", 10), node("B", 20)], [edge("A", "B", transit_time=5)]
        )

        assert stats.total_cycle_time == 35
        assert stats.bottleneck_node_id == "B"
        assert stats.bottleneck_name == "B"
        assert stats.bottleneck_adjusted_cycle_time == 20
        assert stats.estimated_throughput_per_hour == 180

    def test_throughput_formula(self):
        """A 30s bottleneck yields floor(3600 / 30) = 120 units per hour."""
        stats = analyze([node("A", 10), node("B", 30)], [edge("A", "B")])
        assert stats.estimated_throughput_per_hour == 120

    def test_throughput_floors(self):
        stats = analyze([node("A", 7), node("B", 1)], [edge("A", "B")])
        assert stats.estimated_throughput_per_hour == 514

    def test_capacity_divides_cycle_time(self):
        stats = analyze(
            [node("A", 10), node("B", 60, max_capacity=2)], [edge("A", "B")]
        )

        assert stats.total_cycle_time == 40
        assert stats.bottleneck_adjusted_cycle_time == 30
        assert stats.estimated_throughput_per_hour == 120

    def test_zero_cycle_times_give_zero_throughput(self):
        stats = analyze([node("A", 0), node("B", 0)], [edge("A", "B", 3)])

        assert stats.total_cycle_time == 3
        assert stats.bottleneck_node_id is None
        assert stats.estimated_throughput_per_hour == 0

    def test_longest_branch_wins(self):
        nodes = [node("A", 10), node("B", 5), node("C", 20), node("D", 1)]
        edges = [edge("A", "B"), edge("A", "C"), edge("B", "D"), edge("C", "D", 2)]

        stats = analyze(nodes, edges)

        # A(10) -> C(20) -> 2s -> D(1)
        assert stats.total_cycle_time == 33
        assert stats.bottleneck_node_id == "C"

    def test_max_over_start_nodes(self):
        nodes = [node("S1", 5), node("S2", 40), node("T", 1)]
        edges = [edge("S1", "T"), edge("S2", "T")]

        stats = analyze(nodes, edges)

        assert stats.total_cycle_time == 41
        assert stats.bottleneck_node_id == "S2"

    def test_cycle_is_truncated(self):
        nodes = [node("A", 2), node("B", 1)]
        edges = [edge("A", "B", 1), edge("B", "A", 1)]

        stats = analyze(nodes, edges)

        # A(2) + 1 + B(1) + 1, then A is already on the path
        assert stats.total_cycle_time == 5
        assert stats.bottleneck_node_id == "A"
        assert stats.estimated_throughput_per_hour == 1800

    def test_tie_break_first_seen_wins(self):
        nodes = [node("A", 50), node("B", 50)]
        stats = analyze(nodes, [edge("A", "B")])
        assert stats.bottleneck_node_id == "A"

    def test_disconnected_node_ignored(self):
        nodes = [node("A", 10), node("B", 20), node("Z", 999)]
        stats = analyze(nodes, [edge("A", "B")])

        assert stats.bottleneck_node_id == "B"
        assert stats.total_cycle_time == 30

    def test_no_start_point(self):
        stats = analyze([node("A", 10), node("B", 20)], [])

        assert stats.total_cycle_time == 0
        assert stats.bottleneck_node_id is None
        assert stats.estimated_throughput_per_hour == 0

    def test_idempotent_and_side_effect_free(self):
        nodes = [node("A", 10), node("B", 60, max_capacity=2), node("C", 5)]
        edges = [edge("A", "B", 1), edge("B", "C", 2), edge("A", "C")]
        before = [n.model_dump() for n in nodes], [e.model_dump() for e in edges]

        first = analyze(nodes, edges)
        second = analyze(nodes, edges)

        assert first == second
        assert ([n.model_dump() for n in nodes], [e.model_dump() for e in edges]) == before

    def test_bottleneck_name_uses_node_name(self):
        nodes = [node("A", 10), node("B", 20).model_copy(update={"name": "Mill"})]
        stats = analyze(nodes, [edge("A", "B")])
        assert stats.bottleneck_name == "Mill"
