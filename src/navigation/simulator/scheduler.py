# scheduler.py
# Frame schedulers: "call this once, on the next display tick".
# The session reschedules itself after every frame, so a scheduler only
# ever needs one-shot callbacks and a way to cancel them.

import asyncio
import itertools
import logging
from collections import OrderedDict
from typing import Callable, Dict, Optional, Protocol

logger = logging.getLogger(__name__)

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    """
    Protocol for the host's frame source.
    """
    def schedule(self, callback: FrameCallback) -> object:
        ...

    def cancel(self, handle: object) -> None:
        ...


# ---------------------------------------------------------------------------
# asyncio
# ---------------------------------------------------------------------------

class AsyncioFrameScheduler:
    """
    Runs frame callbacks on an asyncio event loop at a fixed interval.

    Args:
        interval_s: Seconds between frames (1/60 for a 60 Hz display).
        loop:       Event loop to use; defaults to the running loop at
                    the time of the first schedule() call.
    """

    def __init__(self, interval_s: float, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self.interval_s = interval_s
        self._loop = loop

    def schedule(self, callback: FrameCallback) -> asyncio.TimerHandle:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop.call_later(self.interval_s, callback)

    def cancel(self, handle: object) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()


# ---------------------------------------------------------------------------
# Manual (headless / tests)
# ---------------------------------------------------------------------------

class ManualFrameScheduler:
    """
    Queues callbacks until advance() is called.

    Usage:
        scheduler = ManualFrameScheduler()
        session = NavigationSession(scheduler=scheduler)
        session.start(route)
        scheduler.advance(20)    # fire 20 frames
    """

    def __init__(self) -> None:
        self._pending: "OrderedDict[int, FrameCallback]" = OrderedDict()
        self._cancelled: Dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)

    def schedule(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: object) -> None:
        callback = self._pending.pop(handle, None)
        if callback is not None:
            self._cancelled[handle] = callback

    @property
    def pending(self) -> int:
        return len(self._pending)

    @property
    def cancelled(self) -> int:
        return len(self._cancelled)

    def fire(self, handle: int) -> None:
        """
        Run one specific callback, even if it was cancelled. Mimics a host
        whose timer had already fired when cancel() arrived.
        """
        callback = self._pending.pop(handle, None) or self._cancelled.pop(handle, None)
        if callback is not None:
            callback()

    def advance(self, frames: int = 1) -> int:
        """
        Fire up to `frames` ticks. Each tick runs every callback that was
        pending when the tick began.

        Returns:
            Number of ticks that ran at least one callback.
        """
        # A tick that has passed can no longer deliver a late callback.
        self._cancelled.clear()
        ticks = 0
        for _ in range(frames):
            if not self._pending:
                break
            due = list(self._pending.items())
            self._pending.clear()
            for _, callback in due:
                callback()
            ticks += 1
        logger.debug(f"Advanced {ticks} frame(s); {self.pending} pending.")
        return ticks

    def run_until_idle(self, max_frames: int = 1_000_000) -> int:
        """Fire ticks until nothing is scheduled or max_frames is reached."""
        return self.advance(max_frames)
