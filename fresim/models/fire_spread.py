"""Stochastic element-to-element fire spread.

An exposed element that has not failed and has been exposed for at least
``spread_threshold_s`` simulated seconds becomes a spreading element. Every
``scan_interval_s`` simulated seconds, each spreading element tries to ignite
each unexposed neighbour within ``spread_radius_m`` with probability

    p = 1 - distance / spread_radius

which is 1 at zero distance and 0 at the radius. Neighbours at or beyond the
radius never ignite, and exposed or failed neighbours are skipped.

Spreading elements are scanned in ascending id order so that a seeded
generator reproduces the same ignitions.

.. autoclass:: FireSpreadEngine
    :members:
"""
from typing import Iterable, List, Optional, TYPE_CHECKING
import numpy as np

from fresim.base_classes.spatial_query import SpatialQuery
from fresim.utilities.data_classes import SpreadParams
from fresim.utilities.fire_util import STRUCTURAL_LAYER
from fresim.utilities.logger_schemas import IgnitionEntry

if TYPE_CHECKING:
    from fresim.fire_simulator.element import StructuralElement
    from fresim.utilities.logger import Logger


class FireSpreadEngine:
    """Periodically ignites neighbours of spreading elements.

    Attributes:
        params (SpreadParams): Radius, threshold and cadence settings.
        spatial_query (SpatialQuery): Neighbour lookup.
        rng (np.random.Generator): Source of the ignition samples.
        logger (Logger): Optional logger for ignition records.
    """

    def __init__(self, params: Optional[SpreadParams], spatial_query: SpatialQuery,
                 rng: Optional[np.random.Generator] = None, layer: str = STRUCTURAL_LAYER,
                 logger: 'Logger' = None):
        """Create a spread engine.

        Args:
            params (SpreadParams, optional): Spread settings. Defaults to ``SpreadParams()``.
            spatial_query (SpatialQuery): Neighbour lookup.
            rng (np.random.Generator, optional): Generator for ignition samples. Defaults
                to ``np.random.default_rng(params.seed)``.
            layer (str, optional): Layer of the elements that can be ignited.
            logger (Logger, optional): Receives ignition records.
        """
        self.params = params if params is not None else SpreadParams()
        self.params.validate()

        self.spatial_query = spatial_query
        self._owns_rng = rng is None
        self.rng = rng if rng is not None else np.random.default_rng(self.params.seed)
        self.layer = layer
        self.logger = logger

        self._time_since_scan = 0.0

    @property
    def spread_radius_m(self) -> float:
        return self.params.spread_radius_m

    def ignition_probability(self, distance: float) -> float:
        """Ignition probability of a neighbour at ``distance`` meters, in [0, 1]."""
        return max(0.0, 1.0 - distance / self.params.spread_radius_m)

    def is_spreading(self, element: 'StructuralElement') -> bool:
        return (element.exposed and not element.failed
                and element.exposure_time_s >= self.params.spread_threshold_s)

    def spreading_elements(self, elements: Iterable['StructuralElement']) -> List['StructuralElement']:
        """Spreading elements, sorted by id."""
        return sorted((e for e in elements if self.is_spreading(e)), key=lambda e: e.id)

    def update(self, sim_delta: float, elements: Iterable['StructuralElement'],
               sim_time_s: float = 0.0) -> List['StructuralElement']:
        """Advance the scan cadence by one tick and scan when it is due.

        The remainder past each interval carries over, and a tick covering
        several intervals runs one scan per interval, so the scan rate only
        depends on simulated time. An interval of 0 scans once per tick.

        Args:
            sim_delta (float): Simulated seconds of this tick (0 while paused).
            elements: All structural elements of the model.
            sim_time_s (float, optional): Current simulated time, used for logging.

        Returns:
            List[StructuralElement]: Elements ignited by this tick.
        """
        if not self.params.enabled or sim_delta <= 0:
            return []

        interval = self.params.scan_interval_s
        if interval <= 0:
            return self.scan(elements, sim_time_s)

        elements = list(elements)
        self._time_since_scan += sim_delta

        ignited = []
        while self._time_since_scan >= interval:
            self._time_since_scan -= interval
            ignited.extend(self.scan(elements, sim_time_s))

        return ignited

    def scan(self, elements: Iterable['StructuralElement'], sim_time_s: float = 0.0) -> List['StructuralElement']:
        """Give every spreading element one chance to ignite each neighbour.

        Returns:
            List[StructuralElement]: Newly ignited elements, in ignition order.
        """
        ignited = []
        entries = []
        radius = self.params.spread_radius_m

        for source in self.spreading_elements(elements):
            center = source.detection_center

            for neighbor, distance in self.spatial_query.find_within_radius(center, radius, self.layer):
                if neighbor is source or neighbor.exposed or neighbor.failed:
                    continue

                probability = self.ignition_probability(distance)
                if probability <= 0:
                    continue

                if self.rng.random() <= probability:
                    neighbor.mark_exposed()
                    ignited.append(neighbor)
                    entries.append(IgnitionEntry(timestamp=sim_time_s, id=neighbor.id,
                                                 cause="spread", source_id=source.id))

        if self.logger and entries:
            self.logger.cache_ignitions(entries)

        return ignited

    def reset(self):
        """Clear the scan cadence and restart a seeded generator from its seed."""
        self._time_since_scan = 0.0

        if self._owns_rng and self.params.seed is not None:
            self.rng = np.random.default_rng(self.params.seed)
