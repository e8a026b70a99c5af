"""Frame scheduling primitives for the animation loop.

The loop never sleeps or blocks; it asks a scheduler for "the next frame"
and is called back with a millisecond timestamp. ``SimPyFrameScheduler``
provides that primitive on a SimPy clock so playback can run headless and
deterministically.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional

import simpy

FrameCallback = Callable[[float], None]


class FrameRequest:
    """Handle for one pending next-frame request."""

    def __init__(self, callback: FrameCallback):
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)


class FrameScheduler(ABC):
    """Source of animation frames."""

    @abstractmethod
    def request(self, callback: FrameCallback) -> FrameRequest:
        """Schedule ``callback(timestamp_ms)`` for the next frame."""
        pass

    def cancel(self, request: FrameRequest) -> None:
        """Cancel a pending request; a cancelled request never fires."""
        request.cancelled = True


class SimPyFrameScheduler(FrameScheduler):
    """Delivers frames at a fixed rate on a SimPy environment clock.

    Timestamps are ``env.now`` expressed in milliseconds.
    """

    def __init__(
        self,
        env: Optional[simpy.Environment] = None,
        frame_rate: float = 60.0,
    ):
        """Initialize the scheduler.

        Args:
            env: SimPy environment (a fresh one is created if None)
            frame_rate: Frames per simulated second
        """
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be > 0, got {frame_rate}")
        self.env = env or simpy.Environment()
        self.frame_rate = frame_rate
        self.frame_interval = 1.0 / frame_rate
        self._requests: List[FrameRequest] = []

    def request(self, callback: FrameCallback) -> FrameRequest:
        request = FrameRequest(callback)
        self._requests.append(request)
        self.env.process(self._deliver(request))
        return request

    def _deliver(self, request: FrameRequest):
        yield self.env.timeout(self.frame_interval)
        self._requests.remove(request)
        if request.cancelled:
            return
        request.fired = True
        request.callback(self.env.now * 1000.0)

    @property
    def has_pending(self) -> bool:
        return any(r.pending for r in self._requests)

    @property
    def now_ms(self) -> float:
        return self.env.now * 1000.0
