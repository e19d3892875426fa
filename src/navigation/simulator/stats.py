# stats.py
# Dashboard figures derived from a session's progress. Nothing here is stored.

import logging
import re
from typing import Optional

from .models import NavigationStats, Route
from .geo_utils import polyline_length_km, round_half_up
from .nav_config import NavConfig

logger = logging.getLogger(__name__)

_DISTANCE_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*(km|m)?\s*$", re.IGNORECASE)


def parse_distance_km(text: str) -> Optional[float]:
    """
    Parse a display distance such as '3.2 km', '850 m' or '2.4'.

    Returns:
        Kilometres, or None when the text is not a distance.
    """
    match = _DISTANCE_RE.match(text or "")
    if not match:
        return None
    value = float(match.group(1))
    unit = (match.group(2) or "km").lower()
    return value / 1000 if unit == "m" else value


def route_length_km(route: Route) -> float:
    """Route length from its metadata, falling back to the polyline length."""
    parsed = parse_distance_km(route.distance)
    if parsed is not None:
        return parsed
    logger.debug(f"No usable distance on '{route.name}'; measuring the polyline.")
    return polyline_length_km(route.coordinates)


def calculate_eta(distance_km: float, average_speed_kmh: float = 40.0) -> str:
    """'12 min' under an hour, '1h 5m' otherwise."""
    minutes = round_half_up(distance_km * 60 / average_speed_kmh)
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    return f"{hours}h {rest}m"


def compute_stats(
    progress: int,
    total_km: float,
    config: Optional[NavConfig] = None,
) -> NavigationStats:
    """
    Distance traveled/remaining and ETA for an overall progress percentage.

    Args:
        progress: Overall progress in [0, 100].
        total_km: Total route length in kilometres.
        config:   Supplies the average speed used for the ETA.
    """
    config = config or NavConfig()
    traveled = progress / 100 * total_km
    remaining = total_km - traveled
    return NavigationStats(
        total_km=total_km,
        traveled_km=traveled,
        remaining_km=remaining,
        eta=calculate_eta(remaining, config.average_speed_kmh),
        progress=progress,
    )
