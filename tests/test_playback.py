"""Tests for headless playback runs."""

import pytest

from factory_flow import ConfigurationError, EventKind, run_playback

from conftest import edge, node


class TestRunPlayback:
    """Tests for run_playback()."""

    def test_completes_fan_out_layout(self, fanout_layout):
        nodes, edges = fanout_layout
        result = run_playback(nodes, edges, speed=10.0, frame_rate=20)

        assert result.completed
        assert result.units_completed == 2
        assert result.summary.bottleneck_node_id == "A"
        assert result.summary.utilization_by_node == {"A": 100, "B": 50, "C": 50}
        # A(8) then B and C in parallel (4)
        assert result.elapsed_sec == pytest.approx(12.5, abs=1.0)

    def test_live_stats_attached(self, fanout_layout):
        nodes, edges = fanout_layout
        result = run_playback(nodes, edges, speed=10.0, frame_rate=20)

        assert result.live_stats.total_cycle_time == 12
        assert result.live_stats.estimated_throughput_per_hour == 450

    def test_timeline_frame(self, fanout_layout):
        nodes, edges = fanout_layout
        result = run_playback(nodes, edges, speed=10.0, frame_rate=20)
        timeline = result.timeline

        assert list(timeline.columns) == [
            "frame",
            "sim_time_sec",
            "active_tokens",
            "active_nodes",
            "edges_in_transit",
            "primary_node",
            "primary_progress",
        ]
        assert timeline["frame"].tolist() == list(range(1, len(timeline) + 1))
        assert timeline["active_tokens"].max() == 2
        assert timeline.iloc[0]["primary_node"] == "A"
        assert timeline["sim_time_sec"].is_monotonic_increasing

    def test_events_frame(self, fanout_layout):
        nodes, edges = fanout_layout
        result = run_playback(nodes, edges, speed=10.0, frame_rate=20)
        kinds = result.events["kind"].tolist()

        assert kinds == [
            EventKind.UNIT_COMPLETE.value,
            EventKind.UNIT_COMPLETE.value,
            EventKind.SIMULATION_COMPLETE.value,
        ]
        assert list(result.events.columns) == ["frame", "sim_time_sec", "kind", "message"]

    def test_endless_loop_hits_time_limit(self):
        nodes = [node("A", 2), node("B", 1)]
        edges = [edge("A", "B", 1), edge("B", "A", 1)]

        result = run_playback(nodes, edges, speed=1.0, frame_rate=30, max_duration_sec=5)

        assert not result.completed
        assert result.summary is None
        assert result.units_completed == 0
        assert result.events.iloc[0]["kind"] == EventKind.CYCLIC_FLOW_DETECTED.value
        assert len(result.timeline) > 0

    def test_time_limit_must_be_positive(self, fanout_layout):
        nodes, edges = fanout_layout
        with pytest.raises(ValueError, match="max_duration_sec"):
            run_playback(nodes, edges, max_duration_sec=0)

    def test_unusable_layout_raises(self):
        with pytest.raises(ConfigurationError):
            run_playback([node("A"), node("B")], [])
