# main.py
# Entry point: animates a simulated traversal of one route on an asyncio loop
# and prints the turn-by-turn card and dashboard as the route progresses.
#
# Usage:
#   python -m navigation.simulator.main --speed fast
#   python -m navigation.simulator.main --routes routes.json --route route-safe --voice

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from tts_stt.tts import DirectionAnnouncer

from .models import FrameState, Route, SessionStatus, SpeedMode
from .exceptions import NavigationError
from .nav_config import NavConfig
from .navigator import NavigationSystem
from .route_io import find_route, load_routes
from .scheduler import AsyncioFrameScheduler

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# Sample route (lower Manhattan), used when no route file is given
# ------------------------------------------------------------------
SAMPLE_ROUTE = Route.from_pairs(
    name="Safest Route",
    route_id="route-safe",
    distance="3.2 km",
    duration="18 min",
    pairs=[
        (40.7128, -74.0060),
        (40.7145, -74.0045),
        (40.7160, -74.0030),
        (40.7175, -74.0015),
        (40.7190, -74.0000),
    ],
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate following a safe route.")
    parser.add_argument("--routes", help="JSON route file; defaults to a built-in sample route.")
    parser.add_argument("--route", help="Route id or name inside --routes (default: first).")
    parser.add_argument(
        "--speed",
        choices=[m.value for m in SpeedMode],
        default=SpeedMode.NORMAL.value,
    )
    parser.add_argument("--fps", type=float, default=60.0, help="Frames per second.")
    parser.add_argument("--voice", action="store_true", help="Speak directions with pyttsx3.")
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


class ConsoleDashboard:
    """Prints the direction card on step changes and progress every 10%."""

    def __init__(self, nav: NavigationSystem) -> None:
        self._nav = nav
        self._last_step: Optional[int] = None
        self._last_decile: int = -1

    def on_frame(self, frame: FrameState) -> None:
        if frame.current_step_index != self._last_step:
            self._last_step = frame.current_step_index
            direction = frame.current_direction
            if direction is not None:
                print(
                    f"[Nav] Step {frame.current_step_index + 1}/{len(frame.directions)}: "
                    f"{direction.instruction} ({direction.distance})"
                )

        decile = frame.overall_progress // 10
        if decile != self._last_decile:
            self._last_decile = decile
            stats = self._nav.stats().to_dict()
            pos = frame.current_position
            where = f"{pos.lat:.5f}, {pos.lon:.5f}" if pos else "-"
            print(
                f"  {frame.overall_progress:3d}%  at {where}  "
                f"traveled {stats['distance_traveled']}, "
                f"remaining {stats['distance_remaining']}, ETA {stats['eta']}"
            )


async def run(route: Route, config: NavConfig, speed: str, voice: bool) -> int:
    loop = asyncio.get_running_loop()
    finished: "asyncio.Future[SessionStatus]" = loop.create_future()

    nav = NavigationSystem(AsyncioFrameScheduler(config.frame_interval_s, loop), config)
    nav.set_speed(speed)
    nav.add_listener(ConsoleDashboard(nav).on_frame)

    def _watch(frame: FrameState) -> None:
        if frame.status in (SessionStatus.COMPLETED, SessionStatus.STOPPED) and not finished.done():
            finished.set_result(frame.status)

    nav.add_listener(_watch)

    announcer = None
    if voice:
        announcer = DirectionAnnouncer(rate=config.voice_rate)
        announcer.start()
        nav.add_listener(announcer.on_frame)

    try:
        success, msg = nav.start_navigation(route)
        print(f"[Nav] {msg}")
        if not success:
            return 1
        status = await finished
    finally:
        nav.close()
        if announcer is not None:
            announcer.shutdown()

    print(f"[Nav] Session ended: {status.name}.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    # ------------------------------------------------------------------
    # Logging setup: configure once here, all modules inherit
    # ------------------------------------------------------------------
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = NavConfig(frame_interval_s=1.0 / args.fps)
        if args.routes:
            route = find_route(load_routes(args.routes), args.route)
            if route is None:
                print(f"[Main] No route matching '{args.route}' in {args.routes}.")
                return 1
        else:
            route = SAMPLE_ROUTE
    except (NavigationError, ZeroDivisionError) as e:
        print(f"[Main] {e}")
        return 1

    try:
        return asyncio.run(run(route, config, args.speed, args.voice))
    except KeyboardInterrupt:
        print("\n[Main] Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
