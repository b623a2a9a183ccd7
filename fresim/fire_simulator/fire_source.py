"""Ignition points that expose nearby structural elements.

.. autoclass:: FireSource
    :members:
"""
from typing import List, Optional, TYPE_CHECKING

from fresim.base_classes.spatial_query import SpatialQuery
from fresim.utilities.data_classes import FireSourceParams
from fresim.utilities.fire_util import UtilFuncs
from fresim.utilities.logger_schemas import IgnitionEntry
from fresim.utilities.unit_conversions import m_min_to_m_s

if TYPE_CHECKING:
    from fresim.fire_simulator.element import StructuralElement
    from fresim.utilities.logger import Logger


class FireSource:
    """A stationary fire that optionally grows up to a maximum radius.

    Detection runs on real time: while the clock is running, the source
    accumulates the real frame delta and checks for elements every
    ``check_interval_s`` real seconds. Growth runs on simulated time, so it
    follows the time scale and stops while paused.

    Exposure is one way. An element that leaves the radius (or is inside it
    when the source shrinks on reset) keeps its exposed flag.

    Attributes:
        id (int): Identifier of the source, used in ignition records.
        name (str): Display name.
        position (np.ndarray): Center of the fire (x, y, z) in meters.
        radius_m (float): Current exposure radius in meters.
    """

    def __init__(self, params: FireSourceParams, spatial_query: SpatialQuery, id: int = 0,
                 logger: 'Logger' = None):
        params.validate()

        self.params = params
        self.spatial_query = spatial_query
        self.id = id
        self.name = params.name if params.name is not None else f"fire_source_{id}"
        self.logger = logger

        self.position = UtilFuncs.to_point(params.position)
        self._initial_radius_m = float(params.radius_m)
        self.radius_m = self._initial_radius_m

        self._check_timer_s = 0.0
        self._growth_time_s = 0.0

    @property
    def initial_radius_m(self) -> float:
        return self._initial_radius_m

    @property
    def max_radius_m(self) -> float:
        return self.params.max_radius_m

    def grow(self, sim_delta: float):
        """Advance the growth timer by ``sim_delta`` simulated seconds."""
        if not self.params.auto_grow or sim_delta <= 0:
            return

        self._growth_time_s += sim_delta
        growth_m = self._growth_time_s * m_min_to_m_s(self.params.growth_rate_m_per_min)
        self.radius_m = min(self._initial_radius_m + growth_m, self.params.max_radius_m)

    def update(self, real_delta: float, sim_delta: float, clock_running: bool,
               sim_time_s: float = 0.0) -> List['StructuralElement']:
        """Grow the fire and check for elements when the check interval elapsed.

        Args:
            real_delta (float): Real seconds since the previous tick.
            sim_delta (float): Simulated seconds of this tick.
            clock_running (bool): Whether the simulation clock is running.
            sim_time_s (float, optional): Current simulated time, used for logging.

        Returns:
            List[StructuralElement]: Elements newly exposed by this tick.
        """
        if not clock_running:
            return []

        self.grow(sim_delta)

        self._check_timer_s += real_delta
        if self._check_timer_s < self.params.check_interval_s:
            return []

        self._check_timer_s = 0.0
        return self.apply_exposure(sim_time_s)

    def apply_exposure(self, sim_time_s: float = 0.0) -> List['StructuralElement']:
        """Expose every element on the source's layer within the current radius.

        Returns:
            List[StructuralElement]: Elements that were not exposed before.
        """
        newly_exposed = []
        for element, _ in self.spatial_query.find_within_radius(self.position, self.radius_m,
                                                                self.params.layer):
            if element.mark_exposed():
                newly_exposed.append(element)

        if self.logger and newly_exposed:
            self.logger.cache_ignitions([
                IgnitionEntry(timestamp=sim_time_s, id=e.id, cause="fire_source", source_id=self.id)
                for e in newly_exposed
            ])

        return newly_exposed

    def reset(self):
        """Restore the initial radius and clear the check and growth timers."""
        self.radius_m = self._initial_radius_m
        self._check_timer_s = 0.0
        self._growth_time_s = 0.0

    def __repr__(self) -> str:
        return f"FireSource(id={self.id}, name={self.name!r}, radius_m={self.radius_m:.2f})"
