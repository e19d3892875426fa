# models.py
# Shared data structures and enums used across all modules.

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple


# ---------------------------------------------------------------------------
# Coordinate
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Coord:
    """Immutable geographic coordinate."""
    lat: float
    lon: float


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Route:
    """
    An ordered polyline plus the display metadata the caller owns.

    `distance` and `duration` are display strings ("3.2 km", "18 min")
    exactly as the route source delivers them.
    """
    name: str
    coordinates: Tuple[Coord, ...]
    distance: str = ""
    duration: str = ""
    route_id: Optional[str] = None

    @staticmethod
    def from_pairs(
        name: str,
        pairs: Iterable[Sequence[float]],
        distance: str = "",
        duration: str = "",
        route_id: Optional[str] = None,
    ) -> "Route":
        coords = tuple(Coord(float(p[0]), float(p[1])) for p in pairs)
        return Route(
            name=name,
            coordinates=coords,
            distance=distance,
            duration=duration,
            route_id=route_id,
        )


# ---------------------------------------------------------------------------
# Direction
# ---------------------------------------------------------------------------

class DirectionType(Enum):
    LEFT        = "left"
    RIGHT       = "right"
    STRAIGHT    = "straight"
    DESTINATION = "destination"


@dataclass
class Direction:
    """A single turn-by-turn instruction."""
    instruction: str
    distance: str                # "240m" | "1.3km"
    type: DirectionType
    completed: bool = False

    def to_dict(self) -> dict:
        return {
            "instruction": self.instruction,
            "distance": self.distance,
            "type": self.type.value,
            "completed": self.completed,
        }


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

class SessionStatus(Enum):
    IDLE      = "idle"
    RUNNING   = "running"
    PAUSED    = "paused"
    COMPLETED = "completed"
    STOPPED   = "stopped"


class SpeedMode(Enum):
    SLOW   = "slow"
    NORMAL = "normal"
    FAST   = "fast"


@dataclass(frozen=True)
class FrameState:
    """Read-only snapshot handed to the display layer on every frame."""
    status: SessionStatus
    current_position: Optional[Coord]
    traveled_path: Tuple[Coord, ...]
    overall_progress: int
    current_step_index: int
    directions: Tuple[Direction, ...] = ()

    @property
    def current_direction(self) -> Optional[Direction]:
        if 0 <= self.current_step_index < len(self.directions):
            return self.directions[self.current_step_index]
        return None

    @property
    def upcoming_directions(self) -> List[Direction]:
        return list(self.directions[self.current_step_index + 1:])


@dataclass(frozen=True)
class NavigationStats:
    """Dashboard figures derived from progress and route length."""
    total_km: float
    traveled_km: float
    remaining_km: float
    eta: str
    progress: int = 0

    def to_dict(self) -> dict:
        return {
            "distance_traveled": f"{self.traveled_km:.1f} km",
            "distance_remaining": f"{self.remaining_km:.1f} km",
            "eta": self.eta,
            "progress": self.progress,
        }
