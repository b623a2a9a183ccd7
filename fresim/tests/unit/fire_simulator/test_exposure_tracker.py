"""Tests for the ExposureTracker.

These tests validate exposure-time accumulation, the failure threshold and
the behaviour of unrated elements.
"""

import pytest
from unittest.mock import MagicMock

from fresim.fire_simulator.clock import SimulationClock
from fresim.fire_simulator.exposure_tracker import ExposureTracker
from fresim.utilities.fire_util import IntegrityState


class TestExposureAccumulation:
    """Tests for advancing exposure time."""

    def test_healthy_element_does_not_accumulate(self, rated_element, running_clock):
        tracker = ExposureTracker(rated_element, running_clock)

        tracker.update(running_clock.tick(1.0))

        assert rated_element.exposure_time_s == 0.0
        assert tracker.state == IntegrityState.HEALTHY

    def test_exposed_element_accumulates(self, rated_element, running_clock):
        tracker = ExposureTracker(rated_element, running_clock)
        rated_element.mark_exposed()

        tracker.update(running_clock.tick(1.0))

        assert rated_element.exposure_time_s == pytest.approx(60.0)
        assert tracker.state == IntegrityState.EXPOSED

    def test_paused_clock_freezes_exposure(self, rated_element, running_clock):
        tracker = ExposureTracker(rated_element, running_clock)
        rated_element.mark_exposed()
        running_clock.pause()

        for _ in range(100):
            tracker.update(running_clock.tick(1.0))

        assert rated_element.exposure_time_s == 0.0

    def test_stopped_clock_ignores_delta(self, rated_element):
        """Even a nonzero delta is ignored while the clock is not running."""
        clock = SimulationClock()
        tracker = ExposureTracker(rated_element, clock)
        rated_element.mark_exposed()

        tracker.update(60.0)

        assert rated_element.exposure_time_s == 0.0


class TestFailure:
    """Tests for the failure threshold."""

    def test_threshold_boundary(self, rated_element, running_clock):
        """A 1 hour element survives 3599 s of exposure and fails at 3600 s."""
        tracker = ExposureTracker(rated_element, running_clock)
        rated_element.mark_exposed()
        rated_element._add_exposure_time(3539.0)

        assert not tracker.update(running_clock.tick(1.0))
        assert rated_element.exposure_time_s == pytest.approx(3599.0)
        assert not rated_element.failed

        running_clock.set_time_scale(1)
        assert tracker.update(running_clock.tick(1.0))
        assert rated_element.failed
        assert tracker.state == IntegrityState.FAILED
        assert tracker.failed_at_s == pytest.approx(61.0)

    def test_one_hour_at_60x(self, rated_element, running_clock):
        """Sixty real seconds at 60x fail a 1 hour element on the last tick."""
        tracker = ExposureTracker(rated_element, running_clock)
        rated_element.mark_exposed()

        results = [tracker.update(running_clock.tick(1.0)) for _ in range(60)]

        assert results[:59] == [False] * 59
        assert results[59]

    def test_failed_is_terminal(self, rated_element, running_clock):
        tracker = ExposureTracker(rated_element, running_clock)
        rated_element.mark_exposed()
        rated_element._add_exposure_time(3600.0)
        tracker.update(running_clock.tick(1.0))
        exposure = rated_element.exposure_time_s

        assert not tracker.update(running_clock.tick(1.0))
        assert rated_element.exposure_time_s == exposure
        assert tracker.state == IntegrityState.FAILED

    def test_unrated_element_never_fails(self, make_element, running_clock):
        element = make_element(id=3)
        element.set_rating(0.0)
        logger = MagicMock()

        tracker = ExposureTracker(element, running_clock, logger)
        element.mark_exposed()

        for _ in range(1000):
            tracker.update(running_clock.tick(60.0))

        assert not element.failed
        assert element.exposure_time_s == pytest.approx(1000 * 3600.0)
        assert tracker.failure_progress == 0.0
        logger.log_message.assert_called_once()

    def test_failure_logged(self, rated_element, running_clock):
        logger = MagicMock()
        tracker = ExposureTracker(rated_element, running_clock, logger)
        rated_element.mark_exposed()
        rated_element._add_exposure_time(3600.0)

        tracker.update(running_clock.tick(1.0))

        entry = logger.cache_failure.call_args[0][0]
        assert entry.id == rated_element.id
        assert entry.rating_hr == 1.0


class TestProgressAndReset:
    """Tests for presentation progress and reset."""

    def test_failure_progress(self, rated_element, running_clock):
        tracker = ExposureTracker(rated_element, running_clock)
        rated_element.mark_exposed()
        rated_element._add_exposure_time(1800.0)

        assert tracker.failure_progress == pytest.approx(0.5)

    def test_reset(self, rated_element, running_clock):
        tracker = ExposureTracker(rated_element, running_clock)
        rated_element.mark_exposed()
        rated_element._add_exposure_time(3600.0)
        tracker.update(running_clock.tick(1.0))

        tracker.reset()

        assert tracker.state == IntegrityState.HEALTHY
        assert tracker.failed_at_s is None
        assert not rated_element.exposed
        assert not rated_element.failed
        assert rated_element.exposure_time_s == 0.0
        assert rated_element.achieved_rating_hr == 1.0
