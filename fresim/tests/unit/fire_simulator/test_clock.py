"""Tests for the SimulationClock.

These tests validate the Stopped/Running/Paused state machine, scaled time
deltas and time-scale bounds.
"""

import pytest

from fresim.exceptions import ValidationError, ConfigurationError
from fresim.fire_simulator.clock import SimulationClock
from fresim.utilities.data_classes import ClockParams
from fresim.utilities.fire_util import ClockState


class TestStateMachine:
    """Tests for clock state transitions."""

    def test_initial_state(self):
        clock = SimulationClock()

        assert clock.state == ClockState.STOPPED
        assert clock.sim_time_s == 0.0
        assert clock.time_scale == 60.0

    def test_start_pause_resume(self):
        clock = SimulationClock()

        clock.start()
        assert clock.state == ClockState.RUNNING
        assert clock.is_running

        clock.pause()
        assert clock.state == ClockState.PAUSED

        clock.start()
        assert clock.state == ClockState.RUNNING

    def test_pause_while_stopped_is_noop(self):
        clock = SimulationClock()
        clock.pause()

        assert clock.state == ClockState.STOPPED

    def test_reset(self, running_clock):
        running_clock.tick(10.0)
        running_clock.set_time_scale(120)
        running_clock.tick(0.0)
        running_clock.reset()

        assert running_clock.state == ClockState.STOPPED
        assert running_clock.sim_time_s == 0.0
        assert running_clock.last_delta == 0.0
        assert running_clock.time_scale == 120.0

    def test_reset_handlers_called_in_order(self):
        clock = SimulationClock()
        calls = []
        clock.add_reset_handler(lambda: calls.append("a"))
        clock.add_reset_handler(lambda: calls.append("b"))

        clock.reset()

        assert calls == ["a", "b"]


class TestTick:
    """Tests for scaled time deltas."""

    def test_one_real_second_at_60x(self, running_clock):
        """One real second at 60x advances one simulated minute."""
        assert running_clock.tick(1.0) == pytest.approx(60.0)
        assert running_clock.sim_time_s == pytest.approx(60.0)

    def test_stopped_tick_is_zero(self):
        clock = SimulationClock()

        for _ in range(10):
            assert clock.tick(1.0) == 0.0

        assert clock.sim_time_s == 0.0

    def test_paused_tick_is_zero(self, running_clock):
        running_clock.tick(1.0)
        running_clock.pause()

        for _ in range(10):
            assert running_clock.tick(1.0) == 0.0

        assert running_clock.sim_time_s == pytest.approx(60.0)

    def test_last_delta(self, running_clock):
        running_clock.tick(0.5)
        assert running_clock.last_delta == pytest.approx(30.0)

    def test_negative_delta_rejected(self, running_clock):
        with pytest.raises(ValidationError):
            running_clock.tick(-0.1)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_delta_rejected(self, running_clock, value):
        with pytest.raises(ValidationError):
            running_clock.tick(value)

        assert running_clock.sim_time_s == 0.0


class TestTimeScale:
    """Tests for time-scale changes."""

    def test_applies_from_next_tick(self, running_clock):
        running_clock.set_time_scale(10)

        assert running_clock.time_scale == 10.0
        assert running_clock.tick(1.0) == pytest.approx(10.0)

    def test_clamped_to_bounds(self):
        clock = SimulationClock()

        assert clock.set_time_scale(0.1) == 1.0
        assert clock.set_time_scale(10000) == 3600.0

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "fast"])
    def test_non_finite_scale_rejected(self, running_clock, value):
        with pytest.raises(ValidationError):
            running_clock.set_time_scale(value)

        assert running_clock.tick(1.0) == pytest.approx(60.0)
        running_clock.reset()
        assert running_clock.time_scale == 60.0

    def test_increase_and_decrease(self):
        clock = SimulationClock(ClockParams(default_time_scale=2400))

        assert clock.increase_speed() == 3600.0
        assert clock.increase_speed() == 3600.0

        clock = SimulationClock(ClockParams(default_time_scale=1.5))
        assert clock.decrease_speed() == 1.0

    def test_invalid_params(self):
        with pytest.raises(ConfigurationError):
            SimulationClock(ClockParams(default_time_scale=0.5))

        with pytest.raises(ConfigurationError):
            SimulationClock(ClockParams(min_time_scale=10, max_time_scale=5, default_time_scale=5))


class TestFormatTime:
    """Tests for the display format of simulated time."""

    def test_hours_minutes_seconds(self):
        assert SimulationClock.format_time(0) == "00:00:00"
        assert SimulationClock.format_time(3725) == "01:02:05"

    def test_days(self):
        assert SimulationClock.format_time(86399) == "23:59:59"
        assert SimulationClock.format_time(86400) == "1:00:00:00"
        assert SimulationClock.format_time(90061.7) == "1:01:01:01"
