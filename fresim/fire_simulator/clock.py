"""Simulated time source for the fire-resistance simulation.

.. autoclass:: SimulationClock
    :members:
"""
from typing import Callable, List, Optional
import numpy as np

from fresim.exceptions import ValidationError
from fresim.utilities.data_classes import ClockParams
from fresim.utilities.fire_util import ClockState, UtilFuncs


class SimulationClock:
    """Owns simulated time, the time scale and the run/pause/stop state.

    Every other component consumes the scaled delta returned by `tick` (or
    `last_delta`) and never the real frame delta, so pausing freezes all
    failure progression and a time-scale change applies uniformly.

    State machine: STOPPED -> RUNNING <-> PAUSED, and any state -> STOPPED
    through `reset`.

    Attributes:
        state (int): ClockState constant.
        sim_time_s (float): Cumulative simulated seconds.
        time_scale (float): Simulated seconds per real second.
        last_delta (float): Simulated delta produced by the latest tick.
    """

    def __init__(self, params: Optional[ClockParams] = None):
        """Create a stopped clock at simulated time 0.

        Args:
            params (ClockParams, optional): Time scale default and bounds. Defaults
                to ``ClockParams()`` (60x, bounded to [1, 3600]).
        """
        params = params if params is not None else ClockParams()
        params.validate()

        self._min_scale = float(params.min_time_scale)
        self._max_scale = float(params.max_time_scale)

        self._state = ClockState.STOPPED
        self._sim_time_s = 0.0
        self._time_scale = float(params.default_time_scale)
        self._pending_scale = None
        self._last_delta = 0.0

        self._reset_handlers: List[Callable[[], None]] = []

    @property
    def state(self) -> int:
        """ClockState constant."""
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == ClockState.RUNNING

    @property
    def sim_time_s(self) -> float:
        """Cumulative simulated seconds since the last reset."""
        return self._sim_time_s

    @property
    def time_scale(self) -> float:
        """Scale in effect, including a change requested for the next tick."""
        if self._pending_scale is not None:
            return self._pending_scale

        return self._time_scale

    @property
    def min_time_scale(self) -> float:
        return self._min_scale

    @property
    def max_time_scale(self) -> float:
        return self._max_scale

    @property
    def last_delta(self) -> float:
        """Simulated seconds added by the most recent tick (0 unless running)."""
        return self._last_delta

    def start(self):
        """STOPPED or PAUSED -> RUNNING. No-op while running."""
        if self._state != ClockState.RUNNING:
            self._state = ClockState.RUNNING

    def pause(self):
        """RUNNING -> PAUSED. No-op otherwise."""
        if self._state == ClockState.RUNNING:
            self._state = ClockState.PAUSED

    def add_reset_handler(self, handler: Callable[[], None]):
        """Register a callable invoked, in registration order, on every reset."""
        self._reset_handlers.append(handler)

    def reset(self):
        """Return to STOPPED at simulated time 0 and notify reset handlers.

        The time scale is left unchanged.
        """
        self._state = ClockState.STOPPED
        self._sim_time_s = 0.0
        self._last_delta = 0.0

        for handler in self._reset_handlers:
            handler()

    def tick(self, real_delta: float) -> float:
        """Advance the clock by one host frame.

        Args:
            real_delta (float): Real seconds since the previous frame.

        Returns:
            float: ``real_delta * time_scale`` while running, exactly 0 otherwise.

        Raises:
            ValidationError: If ``real_delta`` is negative or not finite.
        """
        if not np.isfinite(real_delta) or real_delta < 0:
            raise ValidationError("Real time delta must be finite and non-negative", field="real_delta",
                                  value=real_delta)

        if self._pending_scale is not None:
            self._time_scale = self._pending_scale
            self._pending_scale = None

        if self._state == ClockState.RUNNING:
            self._last_delta = real_delta * self._time_scale
            self._sim_time_s += self._last_delta

        else:
            self._last_delta = 0.0

        return self._last_delta

    def set_time_scale(self, value: float) -> float:
        """Request a new time scale, clamped to the configured bounds.

        The new scale applies from the next tick on.

        Returns:
            float: The clamped scale.

        Raises:
            ValidationError: If the scale is not a finite number.
        """
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ValidationError("Time scale must be numeric", field="time_scale", value=value)

        if not np.isfinite(value):
            raise ValidationError("Time scale must be finite", field="time_scale", value=value)

        value = min(max(value, self._min_scale), self._max_scale)
        self._pending_scale = value
        return value

    def increase_speed(self) -> float:
        """Double the time scale, capped at the maximum."""
        return self.set_time_scale(self.time_scale * 2)

    def decrease_speed(self) -> float:
        """Halve the time scale, floored at the minimum."""
        return self.set_time_scale(self.time_scale / 2)

    @staticmethod
    def format_time(seconds: float) -> str:
        """``HH:MM:SS``, or ``D:HH:MM:SS`` from one day on."""
        return UtilFuncs.format_time(seconds)

    def __repr__(self) -> str:
        return (f"SimulationClock(state={ClockState.names[self._state]}, "
                f"sim_time_s={self._sim_time_s:.1f}, time_scale={self.time_scale})")
