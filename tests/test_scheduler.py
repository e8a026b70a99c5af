"""Tests for SimPy-backed frame scheduling."""

import pytest
import simpy

from factory_flow import SimPyFrameScheduler


class TestSimPyFrameScheduler:
    """Tests for SimPyFrameScheduler."""

    def test_fires_after_one_interval(self):
        scheduler = SimPyFrameScheduler(frame_rate=10)
        fired = []

        request = scheduler.request(fired.append)
        assert scheduler.has_pending
        scheduler.env.run()

        assert fired == [pytest.approx(100.0)]
        assert request.fired
        assert not request.pending
        assert not scheduler.has_pending

    def test_cancelled_request_never_fires(self):
        scheduler = SimPyFrameScheduler(frame_rate=10)
        fired = []

        request = scheduler.request(fired.append)
        scheduler.cancel(request)
        scheduler.env.run()

        assert fired == []
        assert request.cancelled
        assert not request.fired

    def test_chained_requests_advance_clock(self):
        scheduler = SimPyFrameScheduler(frame_rate=4)
        timestamps = []

        def on_frame(ts):
            timestamps.append(ts)
            if len(timestamps) < 3:
                scheduler.request(on_frame)

        scheduler.request(on_frame)
        scheduler.env.run()

        assert timestamps == [250.0, 500.0, 750.0]
        assert scheduler.now_ms == 750.0

    def test_uses_given_environment(self):
        env = simpy.Environment(initial_time=2)
        scheduler = SimPyFrameScheduler(env=env, frame_rate=2)
        fired = []

        scheduler.request(fired.append)
        env.run()

        assert scheduler.env is env
        assert fired == [2500.0]

    @pytest.mark.parametrize("frame_rate", [0, -30])
    def test_frame_rate_must_be_positive(self, frame_rate):
        with pytest.raises(ValueError, match="frame_rate"):
            SimPyFrameScheduler(frame_rate=frame_rate)
