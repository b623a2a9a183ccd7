"""Per-element exposure and failure tracking.

.. autoclass:: ExposureTracker
    :members:
"""
from typing import Optional, TYPE_CHECKING

from fresim.utilities.fire_util import IntegrityState
from fresim.utilities.logger_schemas import FailureEntry

if TYPE_CHECKING:
    from fresim.fire_simulator.clock import SimulationClock
    from fresim.fire_simulator.element import StructuralElement
    from fresim.utilities.logger import Logger


class ExposureTracker:
    """Advances one element's exposure time and decides when it fails.

    States: HEALTHY -> EXPOSED -> FAILED, and back to HEALTHY only through
    `reset`. An element whose rating is 0 accumulates exposure time but never
    fails from time alone.

    Attributes:
        element (StructuralElement): Tracked element.
        state (int): IntegrityState constant as of the latest update.
        failed_at_s (float): Simulated time of failure, None until the element fails.
    """

    def __init__(self, element: 'StructuralElement', clock: 'SimulationClock', logger: 'Logger' = None):
        self.element = element
        self.clock = clock
        self.logger = logger

        self._state = IntegrityState.HEALTHY
        self.failed_at_s: Optional[float] = None

        if not element.rating_dirty and element.achieved_rating_hr <= 0:
            self.warn_unrated()

    def warn_unrated(self):
        msg = (f"Element {self.element.name} has an invalid fire rating "
               f"({self.element.achieved_rating_hr} hours). It will not fail based on time.")

        if self.logger:
            self.logger.log_message(f"Warning: {msg}")

    @property
    def state(self) -> int:
        return self._state

    @property
    def failure_progress(self) -> float:
        """Fraction of the rating used up, in [0, 1] (0 for unrated elements)."""
        if self.element.failed:
            return 1.0

        failure_time_s = self.element.failure_time_s
        if failure_time_s <= 0:
            return 0.0

        return min(1.0, self.element.exposure_time_s / failure_time_s)

    def update(self, sim_delta: float) -> bool:
        """Advance exposure by one tick.

        Exposure time only advances while the clock is running and the
        element is exposed and not failed.

        Args:
            sim_delta (float): Simulated seconds of this tick.

        Returns:
            bool: True if the element failed during this update.
        """
        element = self.element
        newly_failed = False

        if self.clock.is_running and element.exposed and not element.failed:
            element._add_exposure_time(sim_delta)

            rating_hr = element.achieved_rating_hr
            if rating_hr > 0 and element.exposure_time_s >= element.failure_time_s:
                element._set_failed()
                self.failed_at_s = self.clock.sim_time_s
                newly_failed = True

                if self.logger:
                    self.logger.log_message(f"{element.name} failed at {self.failed_at_s:.2f} simulation "
                                            f"seconds (Rating: {rating_hr} hrs).")
                    self.logger.cache_failure(FailureEntry(
                        timestamp=self.failed_at_s,
                        id=element.id,
                        name=element.name,
                        rating_hr=rating_hr,
                        exposure_time_s=element.exposure_time_s
                    ))

        self._update_state()

        return newly_failed

    def _update_state(self):
        if self.element.failed:
            self._state = IntegrityState.FAILED

        elif self.element.exposed:
            self._state = IntegrityState.EXPOSED

        else:
            self._state = IntegrityState.HEALTHY

    def reset(self):
        """Clear the element's exposure/failure state and return to HEALTHY."""
        self.element.reset_state()
        self.failed_at_s = None
        self._state = IntegrityState.HEALTHY
