"""Shared pytest fixtures.

Adds src/ to sys.path so the tests run without installing the package.
"""
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from navigation.simulator.models import Coord, Route, SpeedMode
from navigation.simulator.nav_config import NavConfig
from navigation.simulator.scheduler import ManualFrameScheduler
from navigation.simulator.session import NavigationSession


@pytest.fixture
def line_route():
    """Two equal segments heading east along the equator."""
    return Route.from_pairs("Equator", [(0, 0), (0, 1), (0, 2)], distance="222.4 km")


@pytest.fixture
def manhattan_route():
    return Route.from_pairs(
        "Safest Route",
        [
            (40.7128, -74.0060),
            (40.7145, -74.0045),
            (40.7160, -74.0030),
            (40.7175, -74.0015),
            (40.7190, -74.0000),
        ],
        distance="3.2 km",
        duration="18 min",
        route_id="route-safe",
    )


@pytest.fixture
def single_point_route():
    return Route(name="Nowhere", coordinates=(Coord(40.0, -74.0),))


@pytest.fixture
def tenth_config():
    """Normal speed covers a tenth of a segment per frame."""
    return NavConfig(speed_steps={
        SpeedMode.SLOW: 0.05,
        SpeedMode.NORMAL: 0.1,
        SpeedMode.FAST: 0.25,
    })


@pytest.fixture
def scheduler():
    return ManualFrameScheduler()


@pytest.fixture
def session(scheduler, tenth_config):
    return NavigationSession(scheduler, tenth_config)
