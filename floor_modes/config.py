# floor_modes/config.py
"""
Pipeline configuration and defaults.
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass
class FloorModeConfig:
    """Global configuration for validation, displacement and playback."""
    
    # Validation
    max_errors: int = 100            # error collection stops at this many entries
    eps: float = 1e-9                # tolerance for "zero" amplitude / equal elevation
    high_freq_hz: float = 30.0       # above this a mode is flagged W_FREQ_HIGH
    
    # Displacement: A_ref = L_floor / a_ref_divisor
    a_ref_divisor: float = 10.0
    
    # Playback ranges (min, max)
    scale_range: Tuple[float, float] = (0.5, 3.0)
    speed_range: Tuple[float, float] = (0.2, 2.0)
    
    # Playback defaults
    default_scale: float = 1.0
    default_speed: float = 1.0


def clamp(value: float, bounds: Tuple[float, float]) -> float:
    """
    Clamp value into the closed interval bounds = (lo, hi).

    Raises:
        ValueError: If value is NaN (it has no place in the interval)
    """
    if math.isnan(value):
        raise ValueError(f"cannot clamp NaN into {bounds}")
    lo, hi = bounds
    return max(lo, min(hi, value))


# Global config instance
CONFIG = FloorModeConfig()
