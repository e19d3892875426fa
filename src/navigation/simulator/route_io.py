# route_io.py
# Reads Route values from a JSON route file.
#
# File layout:
#   {"routes": [{"id": "route-safe", "name": "Safest Route",
#                "distance": "3.2 km", "duration": "18 min",
#                "coordinates": [[40.7128, -74.0060], ...]}]}
# A bare list of route objects is accepted as well.

import json
import logging
from typing import List, Optional

from .models import Route
from .exceptions import RouteFileError

logger = logging.getLogger(__name__)


def route_from_dict(d: dict) -> Route:
    """Build a Route from one JSON route object."""
    if not isinstance(d, dict):
        raise RouteFileError(f"Route entry must be an object, got {type(d).__name__}.")
    try:
        return Route.from_pairs(
            name=d["name"],
            pairs=d["coordinates"],
            distance=d.get("distance", ""),
            duration=d.get("duration", ""),
            route_id=d.get("id"),
        )
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise RouteFileError(f"Malformed route entry '{d.get('name', '?')}': {e}") from e


def route_to_dict(route: Route) -> dict:
    return {
        "id": route.route_id,
        "name": route.name,
        "distance": route.distance,
        "duration": route.duration,
        "coordinates": [[c.lat, c.lon] for c in route.coordinates],
    }


def load_routes(filepath: str) -> List[Route]:
    """
    Load every route in a JSON route file.

    Raises:
        RouteFileError: file missing, unreadable, or not in the expected layout.
    """
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (IOError, ValueError) as e:
        raise RouteFileError(f"Failed to load routes from {filepath}: {e}") from e

    entries = data.get("routes") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise RouteFileError(f"{filepath} has no 'routes' list.")

    routes = [route_from_dict(entry) for entry in entries]
    logger.info(f"Loaded {len(routes)} route(s) from {filepath}.")
    return routes


def find_route(routes: List[Route], key: Optional[str]) -> Optional[Route]:
    """Match by id first, then by case-insensitive name. None picks the first."""
    if not routes:
        return None
    if key is None:
        return routes[0]
    for route in routes:
        if route.route_id == key:
            return route
    for route in routes:
        if route.name.lower() == key.lower():
            return route
    return None
