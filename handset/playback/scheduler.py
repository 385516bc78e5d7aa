"""Single-threaded frame scheduling for the reveal player.

The host owns the display refresh: once per frame it calls
FrameScheduler.run_frame(now). Players ask for their next step with
request_frame() and cancel by handle, which removes the pending task
outright instead of leaving a stale callback that checks a flag.

Example:
    >>> clock = ManualClock()
    >>> scheduler = FrameScheduler()
    >>> calls = []
    >>> handle = scheduler.request_frame(calls.append)
    >>> scheduler.run_frame(clock.advance(16))
    1
    >>> calls
    [16.0]
"""

from __future__ import annotations

import itertools
import logging
import time
from collections import OrderedDict
from typing import Callable

from ..config import FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


def monotonic_ms() -> float:
    """Wall-clock timestamp in milliseconds for live playback."""
    return time.monotonic() * 1000.0


class ManualClock:
    """Deterministic millisecond clock for tests and headless replay."""

    def __init__(self, start_ms: float = 0.0):
        self.now = float(start_ms)

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float = FRAME_INTERVAL_MS) -> float:
        """Move time forward and return the new timestamp."""
        self.now += ms
        return self.now


class FrameScheduler:
    """Queue of callbacks to run on the next display frame.

    Callbacks requested while a frame is running are deferred to the
    following frame, so a player that reschedules itself runs once per frame.
    """

    def __init__(self):
        self._pending: OrderedDict[int, FrameCallback] = OrderedDict()
        self._handles = itertools.count(1)

    def request_frame(self, callback: FrameCallback) -> int:
        """Schedule callback(now) for the next frame and return its handle."""
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> bool:
        """Remove a pending callback. Returns False if it already ran or was cancelled."""
        return self._pending.pop(handle, None) is not None

    def is_pending(self, handle: int) -> bool:
        return handle in self._pending

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def run_frame(self, now: float) -> int:
        """Run every callback queued before this call.

        Returns:
            Number of callbacks executed.
        """
        batch = list(self._pending.keys())
        ran = 0
        for handle in batch:
            # An earlier callback in this batch may have cancelled this one
            callback = self._pending.pop(handle, None)
            if callback is None:
                continue
            callback(now)
            ran += 1
        return ran

    def run_until_idle(self, clock: ManualClock, interval_ms: float = FRAME_INTERVAL_MS,
                       max_frames: int = 100_000) -> int:
        """Advance a manual clock frame by frame until nothing is pending.

        Returns:
            Number of frames run.

        Raises:
            RuntimeError: If callbacks are still pending after max_frames.
        """
        frames = 0
        while self._pending:
            if frames >= max_frames:
                raise RuntimeError(f"scheduler still busy after {max_frames} frames")
            self.run_frame(clock.advance(interval_ms))
            frames += 1
        logger.debug("Scheduler idle after %d frames at t=%.1f ms", frames, clock.now)
        return frames
