# tts.py
# Speaks turn-by-turn directions as the simulated traversal reaches them.
# Speech runs on its own worker thread so a slow engine never stalls frames.

import logging
import queue
import threading
from typing import Any, Callable, Optional

import pyttsx3

from navigation.simulator.models import FrameState, SessionStatus

logger = logging.getLogger(__name__)


def init_engine(rate: int = 150) -> Any:
    engine = pyttsx3.init()
    engine.setProperty("rate", rate)
    engine.setProperty("volume", 1.0)
    return engine


class DirectionAnnouncer:
    """
    Frame listener that announces each new current direction once.

    Usage:
        announcer = DirectionAnnouncer()
        announcer.start()
        session.add_listener(announcer.on_frame)
        ...
        announcer.shutdown()

    Args:
        rate:           Speech rate in words per minute.
        engine_factory: Builds the speech engine inside the worker thread;
                        defaults to pyttsx3.
    """

    def __init__(
        self,
        rate: int = 150,
        engine_factory: Optional[Callable[[int], Any]] = None,
    ) -> None:
        self.rate = rate
        self._engine_factory = engine_factory or init_engine
        self._queue: "queue.Queue[Optional[str]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._last_step: Optional[int] = None
        self._last_status: Optional[SessionStatus] = None

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._worker, name="TTSWorker", daemon=True)
        self._thread.start()

    def _worker(self) -> None:
        try:
            engine = self._engine_factory(self.rate)
        except Exception as e:
            logger.error(f"TTS engine unavailable, directions will not be spoken: {e}")
            self._drain()
            return

        while True:
            text = self._queue.get()
            try:
                if text is None:
                    break
                engine.say(text)
                engine.runAndWait()
            except RuntimeError as e:
                logger.error(f"TTS failed for '{text}': {e}")
            finally:
                self._queue.task_done()

    def _drain(self) -> None:
        # Keep acknowledging queued text so shutdown() can still join.
        while True:
            text = self._queue.get()
            self._queue.task_done()
            if text is None:
                break

    def speak(self, text: str) -> None:
        text = (text or "").strip()
        if text:
            self._queue.put(text)

    def shutdown(self, timeout: float = 5.0) -> None:
        """Let queued speech finish, then stop the worker."""
        if self._thread is None:
            return
        self._queue.join()
        self._queue.put(None)
        self._thread.join(timeout=timeout)
        self._thread = None

    # ------------------------------------------------------------------
    # Session listener
    # ------------------------------------------------------------------

    def on_frame(self, frame: FrameState) -> None:
        status_changed = frame.status != self._last_status
        self._last_status = frame.status

        if frame.status == SessionStatus.STOPPED:
            if status_changed:
                self.speak("Navigation stopped")
            self._last_step = None
            return

        if frame.status not in (SessionStatus.RUNNING, SessionStatus.COMPLETED):
            return
        if frame.current_step_index == self._last_step:
            return

        self._last_step = frame.current_step_index
        direction = frame.current_direction
        if direction is None:
            return
        if direction.distance and direction.distance != "0m":
            self.speak(f"{direction.instruction} for {direction.distance}")
        else:
            self.speak(direction.instruction)
