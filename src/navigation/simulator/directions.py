# directions.py
# Turns a route's coordinate sequence into turn-by-turn directions.
# Pure: same input, same output, no side effects beyond a debug log line.

import logging
from typing import List, Sequence

from .models import Coord, Direction, DirectionType
from .geo_utils import haversine_distance, turn_angle, format_distance

logger = logging.getLogger(__name__)


# Heading change (degrees) beyond which a step counts as a turn.
TURN_THRESHOLD_DEG = 15.0

ARRIVAL_TEXT = "You have arrived at your destination"


def _classify(angle: float) -> DirectionType:
    if angle < -TURN_THRESHOLD_DEG:
        return DirectionType.LEFT
    if angle > TURN_THRESHOLD_DEG:
        return DirectionType.RIGHT
    return DirectionType.STRAIGHT


def _instruction(kind: DirectionType, first: bool) -> str:
    if kind == DirectionType.LEFT:
        return "Turn left"
    if kind == DirectionType.RIGHT:
        return "Turn right"
    return "Head straight" if first else "Continue straight"


def synthesize(coordinates: Sequence[Coord], route_name: str = "") -> List[Direction]:
    """
    Build one Direction per segment plus a final arrival Direction.

    Args:
        coordinates: Ordered route polyline.
        route_name:  Used for logging only.

    Returns:
        len(coordinates) Directions for a navigable route; a single
        arrival Direction when fewer than two coordinates are given.
    """
    directions: List[Direction] = []

    for i in range(len(coordinates) - 1):
        dist_km = haversine_distance(coordinates[i], coordinates[i + 1])

        kind = DirectionType.STRAIGHT
        if i > 0:
            kind = _classify(turn_angle(coordinates[i - 1], coordinates[i], coordinates[i + 1]))

        directions.append(Direction(
            instruction=_instruction(kind, first=(i == 0)),
            distance=format_distance(dist_km),
            type=kind,
        ))

    directions.append(Direction(
        instruction=ARRIVAL_TEXT,
        distance="0m",
        type=DirectionType.DESTINATION,
    ))

    logger.debug(f"Synthesized {len(directions)} directions for '{route_name}'.")
    return directions
