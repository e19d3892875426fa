# session.py
# State machine that animates a simulated traversal of one route.
# Call start() once, then let the scheduler drive step() every frame.

import dataclasses
import logging
from collections import deque
from typing import Callable, Deque, List, Optional, Tuple, Union

from .models import Coord, Direction, FrameState, Route, SessionStatus, SpeedMode
from .exceptions import InvalidRoute
from .directions import synthesize
from .geo_utils import interpolate, round_half_up
from .nav_config import NavConfig
from .scheduler import FrameScheduler, ManualFrameScheduler
from .speed_policy import parse_speed, step_size

logger = logging.getLogger(__name__)

FrameListener = Callable[[FrameState], None]

# Float accumulation of step sizes (0.1 * 10 == 0.9999...) must still
# close a segment on the expected frame.
_SEGMENT_EPSILON = 1e-9


class NavigationSession:
    """
    Stateful simulator for a single route.

    Lifecycle:
        IDLE -> RUNNING <-> PAUSED -> COMPLETED
                        \\-> STOPPED (restartable with start())

    Usage:
        session = NavigationSession(scheduler, config)
        session.add_listener(render)
        session.start(route)
        ...
        session.pause(); session.resume(); session.set_speed("fast")
        session.stop()

    Args:
        scheduler: Frame source; defaults to a ManualFrameScheduler.
        config:    Optional NavConfig; defaults to NavConfig().
    """

    def __init__(
        self,
        scheduler: Optional[FrameScheduler] = None,
        config: Optional[NavConfig] = None,
    ) -> None:
        self.config = config or NavConfig()
        self.scheduler = scheduler if scheduler is not None else ManualFrameScheduler()

        self._route: Optional[Route] = None
        self._directions: List[Direction] = []
        self._status = SessionStatus.IDLE
        self._speed = self.config.default_speed

        self.segment_index: int = 0
        self.segment_progress: float = 0.0
        self.overall_progress: int = 0
        self.current_step_index: int = 0
        self.current_position: Optional[Coord] = None
        self._traveled: Deque[Coord] = deque(maxlen=self.config.traveled_path_limit)

        # Loop bookkeeping
        self._handle: Optional[object] = None
        self._generation: int = 0
        self._listeners: List[FrameListener] = []

    # ------------------------------------------------------------------
    # Read-only properties
    # ------------------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def route(self) -> Optional[Route]:
        return self._route

    @property
    def directions(self) -> Tuple[Direction, ...]:
        return tuple(self._directions)

    @property
    def traveled_path(self) -> Tuple[Coord, ...]:
        return tuple(self._traveled)

    @property
    def speed_mode(self) -> SpeedMode:
        return self._speed

    @property
    def is_active(self) -> bool:
        return self._status in (SessionStatus.RUNNING, SessionStatus.PAUSED)

    def snapshot(self) -> FrameState:
        # Directions are copied so a delivered frame never changes afterwards.
        return FrameState(
            status=self._status,
            current_position=self.current_position,
            traveled_path=tuple(self._traveled),
            overall_progress=self.overall_progress,
            current_step_index=self.current_step_index,
            directions=tuple(dataclasses.replace(d) for d in self._directions),
        )

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def add_listener(self, listener: FrameListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FrameListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self) -> None:
        if not self._listeners:
            return
        frame = self.snapshot()
        for listener in list(self._listeners):
            listener(frame)

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def start(self, route: Route) -> None:
        """
        Begin animating `route` from its first coordinate.

        Raises:
            InvalidRoute: route has fewer than 2 coordinates. The session
                          is left exactly as it was.
        """
        if len(route.coordinates) < 2:
            raise InvalidRoute(route.name, len(route.coordinates))

        self._cancel_loop()

        self._route = route
        self._directions = synthesize(route.coordinates, route.name)
        self.segment_index = 0
        self.segment_progress = 0.0
        self.overall_progress = 0
        self.current_step_index = 0
        self.current_position = route.coordinates[0]
        self._traveled.clear()
        self._traveled.append(route.coordinates[0])
        self._status = SessionStatus.RUNNING

        logger.info(
            f"Navigation started on '{route.name}': "
            f"{len(route.coordinates)} points, {len(self._directions)} directions, "
            f"speed={self._speed.value}."
        )
        self._emit()
        self._schedule_next()

    def pause(self) -> None:
        if self._status != SessionStatus.RUNNING:
            logger.debug(f"pause() ignored in state {self._status.name}.")
            return
        self._status = SessionStatus.PAUSED
        self._cancel_loop()
        logger.info(f"Navigation paused at {self.overall_progress}%.")
        self._emit()

    def resume(self) -> None:
        if self._status != SessionStatus.PAUSED:
            logger.debug(f"resume() ignored in state {self._status.name}.")
            return
        self._status = SessionStatus.RUNNING
        logger.info(f"Navigation resumed at {self.overall_progress}%.")
        self._emit()
        self._schedule_next()

    def toggle_pause(self) -> None:
        """Pause when running, resume when paused."""
        if self._status == SessionStatus.RUNNING:
            self.pause()
        else:
            self.resume()

    def stop(self) -> None:
        """Cancel the traversal and clear all progress."""
        if not self.is_active:
            logger.debug(f"stop() ignored in state {self._status.name}.")
            return
        self._cancel_loop()
        self._reset_progress()
        self._status = SessionStatus.STOPPED
        logger.info("Navigation stopped by user.")
        self._emit()

    def set_speed(self, mode: Union[SpeedMode, str]) -> None:
        """Change speed; takes effect on the next frame without resetting progress."""
        self._speed = parse_speed(mode)
        logger.info(f"Speed set to {self._speed.value}.")

    def close(self) -> None:
        """Teardown: no frame may touch this session afterwards."""
        if self.is_active:
            self.stop()
        self._cancel_loop()
        self._listeners.clear()

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------

    def step(self) -> None:
        """Advance the simulation by one frame. No-op unless RUNNING."""
        if self._status != SessionStatus.RUNNING or self._route is None:
            return

        coords = self._route.coordinates
        last = len(coords) - 1

        # 1. Already at the final coordinate
        if self.segment_index >= last:
            self._complete()
            return

        # 2. Move along the current segment
        self.segment_progress += step_size(self._speed, self.config)

        # 3. Segment finished; overflow is discarded
        if self.segment_progress >= 1.0 - _SEGMENT_EPSILON:
            self.segment_index += 1
            self.segment_progress = 0.0
            if self.segment_index < len(self._directions):
                self._advance_direction(self.segment_index)
            if self.segment_index >= last:
                self._complete()
                return

        # 4. Interpolated position and progress
        position = interpolate(
            coords[self.segment_index],
            coords[self.segment_index + 1],
            self.segment_progress,
        )
        self.current_position = position
        self._traveled.append(position)
        progress = round_half_up(100 * (self.segment_index + self.segment_progress) / last)
        self.overall_progress = max(self.overall_progress, progress)

        logger.debug(
            f"Frame: segment {self.segment_index} at {self.segment_progress:.3f}, "
            f"{self.overall_progress}%."
        )
        self._emit()

    def _on_frame(self, generation: int) -> None:
        # A tick from a cancelled run must not mutate anything.
        if generation != self._generation:
            return
        self._handle = None
        if self._status != SessionStatus.RUNNING:
            return
        self.step()
        if self._status == SessionStatus.RUNNING:
            self._schedule_next()

    def _schedule_next(self) -> None:
        generation = self._generation
        self._handle = self.scheduler.schedule(lambda: self._on_frame(generation))

    def _cancel_loop(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _advance_direction(self, index: int) -> None:
        for direction in self._directions[:index]:
            direction.completed = True
        self.current_step_index = index

    def _complete(self) -> None:
        coords = self._route.coordinates
        final = coords[-1]
        self.segment_index = len(coords) - 1
        self.segment_progress = 0.0
        self.overall_progress = 100
        self.current_position = final
        if not self._traveled or self._traveled[-1] != final:
            self._traveled.append(final)
        for direction in self._directions:
            direction.completed = True
        self.current_step_index = len(self._directions) - 1
        self._status = SessionStatus.COMPLETED
        self._cancel_loop()
        logger.info(f"Destination reached on '{self._route.name}'.")
        self._emit()

    def _reset_progress(self) -> None:
        self.segment_index = 0
        self.segment_progress = 0.0
        self.overall_progress = 0
        self.current_step_index = 0
        self.current_position = None
        self._traveled.clear()
