# nav_config.py
# All tuneable constants in one place.
# Pass a NavConfig instance to every module that needs settings.

from dataclasses import dataclass, field
from typing import Dict

from .exceptions import ConfigurationError
from .models import SpeedMode


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

# Fraction of a segment covered per frame. Must be strictly increasing.
DEFAULT_SPEED_STEPS: Dict[SpeedMode, float] = {
    SpeedMode.SLOW:   0.005,
    SpeedMode.NORMAL: 0.01,
    SpeedMode.FAST:   0.02,
}

AVERAGE_SPEED_KMH: float = 40.0   # used for the ETA only
FRAME_RATE_HZ: float = 60.0
TRAVELED_PATH_LIMIT: int = 50


# ---------------------------------------------------------------------------
# Main config
# ---------------------------------------------------------------------------

@dataclass
class NavConfig:
    # Animation
    speed_steps: Dict[SpeedMode, float] = field(
        default_factory=lambda: dict(DEFAULT_SPEED_STEPS)
    )
    default_speed: SpeedMode = SpeedMode.NORMAL
    frame_interval_s: float = 1.0 / FRAME_RATE_HZ

    # Session state
    traveled_path_limit: int = TRAVELED_PATH_LIMIT

    # Dashboard
    average_speed_kmh: float = AVERAGE_SPEED_KMH

    # Announcements
    voice_rate: int = 150                  # words per minute for pyttsx3

    def __post_init__(self) -> None:
        missing = [m.value for m in SpeedMode if m not in self.speed_steps]
        if missing:
            raise ConfigurationError(f"speed_steps is missing modes: {missing}")

        slow = self.speed_steps[SpeedMode.SLOW]
        normal = self.speed_steps[SpeedMode.NORMAL]
        fast = self.speed_steps[SpeedMode.FAST]
        if not 0 < slow < normal < fast:
            raise ConfigurationError(
                f"speed_steps must satisfy 0 < slow < normal < fast, "
                f"got {slow} / {normal} / {fast}"
            )
        if self.frame_interval_s <= 0:
            raise ConfigurationError("frame_interval_s must be positive.")
        if self.traveled_path_limit < 1:
            raise ConfigurationError("traveled_path_limit must be at least 1.")
        if self.average_speed_kmh <= 0:
            raise ConfigurationError("average_speed_kmh must be positive.")
