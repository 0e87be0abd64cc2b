# floor_modes/playback.py
"""
Playback state machine: mode selection, play/stop, scale, speed and time.

The host frame loop calls update(dt) once per frame and then polls
get_displaced_z() for every node it draws. Time only advances through
update(), so a fixed sequence of deltas always replays identically.
"""

import math
from dataclasses import dataclass, replace
from typing import List, Optional

from .config import CONFIG, clamp
from .displacement import DisplacementEngine
from .model import Number


@dataclass
class PlaybackState:
    """Transport state owned by one PlaybackController."""
    current_mode: Optional[Number] = None
    scale: float = 1.0      # S: display magnification
    speed: float = 1.0      # playback rate multiplier
    time: float = 0.0       # t [s]
    playing: bool = False


class PlaybackController:
    """
    Wraps a DisplacementEngine with mutable playback state.

    States are {stopped, playing} x {no mode, mode m}. "No mode" only
    happens when the dataset defines no modes.

    Example:
    --------
    >>> ctrl = PlaybackController(engine)
    >>> ctrl.play()
    >>> ctrl.update(1 / 60)
    >>> z = ctrl.get_displaced_z(3)
    """

    def __init__(
        self,
        engine: DisplacementEngine,
        scale: float = CONFIG.default_scale,
        speed: float = CONFIG.default_speed,
    ):
        self._engine = engine
        self._mode_list = engine.mode_numbers
        self._state = PlaybackState(
            current_mode=self._mode_list[0] if self._mode_list else None,
            scale=clamp(scale, CONFIG.scale_range),
            speed=clamp(speed, CONFIG.speed_range),
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_mode(self, mode: Number) -> None:
        """Select a mode; rewinds to t = 0 and stops. Callers pass listed modes only."""
        self._state.current_mode = mode
        self._state.time = 0.0
        self._state.playing = False

    def play(self) -> None:
        if self._state.current_mode is not None:
            self._state.playing = True

    def stop(self) -> None:
        """Stop and hold the current frame (time is kept)."""
        self._state.playing = False

    def set_scale(self, scale: float) -> None:
        self._state.scale = clamp(scale, CONFIG.scale_range)

    def set_speed(self, speed: float) -> None:
        self._state.speed = clamp(speed, CONFIG.speed_range)

    def update(self, dt: float) -> None:
        """
        Advance time by dt * speed while playing.

        Raises:
            ValueError: If dt is negative or not finite
        """
        if not math.isfinite(dt) or dt < 0:
            raise ValueError(f"dt must be finite and non-negative, got {dt}")
        if self._state.playing:
            self._state.time += dt * self._state.speed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_displaced_z(self, node_id: Number) -> float:
        """z' of node_id for the current mode, time and scale."""
        mode = self._state.current_mode
        if mode is None:
            return self._engine.undisplaced_elevation(node_id)
        return self._engine.displaced_elevation(
            node_id, mode, self._state.time, self._state.scale
        )

    def get_freq_hz(self, mode: Optional[Number] = None) -> float:
        """Frequency of `mode` (default: current mode), 0.0 if unresolved."""
        if mode is None:
            mode = self._state.current_mode
        return self._engine.frequency(mode)

    @property
    def engine(self) -> DisplacementEngine:
        return self._engine

    @property
    def state(self) -> PlaybackState:
        """Snapshot copy of the state; mutate only through the methods."""
        return replace(self._state)

    @property
    def mode_list(self) -> List[Number]:
        return list(self._mode_list)

    @property
    def current_mode(self) -> Optional[Number]:
        return self._state.current_mode

    @property
    def time(self) -> float:
        return self._state.time

    @property
    def scale(self) -> float:
        return self._state.scale

    @property
    def speed(self) -> float:
        return self._state.speed

    @property
    def is_playing(self) -> bool:
        return self._state.playing
