# speed_policy.py
# Maps a speed mode to the fraction of a segment covered per frame.
# Time based, not distance based: every segment takes the same number of
# frames at a given speed, whatever its real length.

import math
from typing import Optional, Union

from .models import SpeedMode
from .nav_config import NavConfig


def parse_speed(mode: Union[SpeedMode, str]) -> SpeedMode:
    """Accept a SpeedMode or its string value ('slow', 'normal', 'fast')."""
    if isinstance(mode, SpeedMode):
        return mode
    try:
        return SpeedMode(str(mode).lower())
    except ValueError:
        choices = ", ".join(m.value for m in SpeedMode)
        raise ValueError(f"Unknown speed mode '{mode}'. Expected one of: {choices}") from None


def step_size(mode: Union[SpeedMode, str], config: Optional[NavConfig] = None) -> float:
    """Per-frame progress increment for the given mode."""
    config = config or NavConfig()
    return config.speed_steps[parse_speed(mode)]


def frames_per_segment(mode: Union[SpeedMode, str], config: Optional[NavConfig] = None) -> int:
    """Number of frames one segment takes at the given speed."""
    size = step_size(mode, config)
    return math.ceil(round(1.0 / size, 9))
