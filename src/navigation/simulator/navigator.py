# navigator.py
# Public entry point for the navigation simulator.
# Owns no simulation logic; delegates everything to specialist modules.

import logging
from typing import Optional, Tuple, Union

from .models import Direction, FrameState, NavigationStats, Route, SessionStatus, SpeedMode
from .exceptions import InvalidRoute
from .nav_config import NavConfig
from .scheduler import FrameScheduler
from .session import FrameListener, NavigationSession
from .stats import compute_stats, route_length_km

logger = logging.getLogger(__name__)


class NavigationSystem:
    """
    High-level navigation facade used by the display layer.

    Typical lifecycle:
        nav = NavigationSystem(AsyncioFrameScheduler(1 / 60))
        nav.add_listener(draw_marker_and_trail)
        ok, msg = nav.start_navigation(route)

        # Controls panel
        nav.toggle_pause()
        nav.set_speed("fast")
        nav.stop_navigation()

        # Dashboard, on every frame
        nav.stats()

    Args:
        scheduler: Frame source driving the animation.
        config:    Optional NavConfig; defaults to NavConfig().
    """

    def __init__(
        self,
        scheduler: Optional[FrameScheduler] = None,
        config: Optional[NavConfig] = None,
    ) -> None:
        self.config = config or NavConfig()
        self._session = NavigationSession(scheduler, self.config)
        self._total_km: float = 0.0

    # ------------------------------------------------------------------
    # Navigation control
    # ------------------------------------------------------------------

    def start_navigation(self, route: Route) -> Tuple[bool, str]:
        """
        Begin a simulated traversal of `route`.

        Returns:
            (success, message). A degenerate route is reported here and
            never raises.
        """
        try:
            self._session.start(route)
        except InvalidRoute as e:
            logger.warning(f"Cannot start navigation: {e}")
            return False, str(e)

        self._total_km = route_length_km(route)
        first = self._session.directions[0]
        return True, f"Navigation started on {route.name}. {first.instruction}."

    def pause(self) -> None:
        self._session.pause()

    def resume(self) -> None:
        self._session.resume()

    def toggle_pause(self) -> None:
        self._session.toggle_pause()

    def stop_navigation(self) -> None:
        """Forcibly end the current navigation session."""
        self._session.stop()

    def set_speed(self, mode: Union[SpeedMode, str]) -> None:
        self._session.set_speed(mode)

    def close(self) -> None:
        self._session.close()

    def add_listener(self, listener: FrameListener) -> None:
        self._session.add_listener(listener)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def stats(self) -> NavigationStats:
        return compute_stats(self._session.overall_progress, self._total_km, self.config)

    def snapshot(self) -> FrameState:
        return self._session.snapshot()

    # ------------------------------------------------------------------
    # Convenience read-only properties
    # ------------------------------------------------------------------

    @property
    def session(self) -> NavigationSession:
        return self._session

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def is_navigating(self) -> bool:
        return self._session.is_active

    @property
    def is_paused(self) -> bool:
        return self._session.status == SessionStatus.PAUSED

    @property
    def current_direction(self) -> Optional[Direction]:
        return self._session.snapshot().current_direction
