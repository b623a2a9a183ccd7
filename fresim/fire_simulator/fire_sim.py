"""
Fire-resistance simulation context.

This module defines the `FireResistanceSim` class, which owns every piece of
simulation state (clock, elements, exposure trackers, fire sources and the
spread engine) and advances them in a fixed order on each host frame:

    1. clock tick (real delta -> simulated delta)
    2. recompute ratings of elements whose properties changed
    3. fire source growth and detection
    4. element-to-element fire spread
    5. exposure tracker updates (exposure time and failure)
    6. logging

Hosts construct the simulation explicitly and pass it to whatever needs it;
there is no global instance.

Classes:
    - FireResistanceSim: The simulation context.

.. autoclass:: FireResistanceSim
    :members:
"""

from typing import Dict, List, Optional

import numpy as np
from tqdm import tqdm

from fresim.base_classes.element_index import ElementIndex
from fresim.base_classes.spatial_query import SpatialQuery
from fresim.exceptions import SimulationError, ValidationError
from fresim.fire_simulator.clock import SimulationClock
from fresim.fire_simulator.element import StructuralElement
from fresim.fire_simulator.exposure_tracker import ExposureTracker
from fresim.fire_simulator.fire_source import FireSource
from fresim.models.fire_spread import FireSpreadEngine
from fresim.models.rating_calculator import RatingCalculator
from fresim.utilities.data_classes import SimParams, FireSourceParams
from fresim.utilities.fire_util import ClockState, IntegrityState
from fresim.utilities.logger import Logger


class FireResistanceSim:
    """Time-stepped exposure, failure and spread simulation over rated elements.

    Attributes:
        clock (SimulationClock): Sole source of simulated time.
        calculator (RatingCalculator): Rates elements when they are added or changed.
        spatial_query (SpatialQuery): Neighbour lookup used by fire sources and spread.
        spread_engine (FireSpreadEngine): Element-to-element spread model.
        trackers (Dict[int, ExposureTracker]): One tracker per element id.
        fire_sources (List[FireSource]): Registered ignition points.
        logger (Optional[Logger]): Parquet/status logger, None unless logging is enabled.
    """

    def __init__(self, sim_params: Optional[SimParams] = None, calculator: Optional[RatingCalculator] = None,
                 spatial_query: Optional[SpatialQuery] = None, rng: Optional[np.random.Generator] = None):
        """Build the simulation from its parameters.

        Args:
            sim_params (SimParams, optional): Clock, spread, source, element and logging
                settings. Defaults to ``SimParams()`` (no elements, no sources).
            calculator (RatingCalculator, optional): Calculator to rate elements with.
                Defaults to one backed by the packaged ACI 216.1 tables.
            spatial_query (SpatialQuery, optional): Host neighbour lookup. Defaults to
                the simulation's own `ElementIndex`.
            rng (np.random.Generator, optional): Generator for spread samples. Defaults to
                one seeded from ``sim_params.spread.seed``.

        Raises:
            ConfigurationError: If ``sim_params`` fails validation.
        """
        print("Fire Resistance Simulation Initializing...")

        self._sim_params = sim_params if sim_params is not None else SimParams()
        self._sim_params.validate()

        self.logger = None
        if self._sim_params.write_logs:
            self.logger = Logger(self._sim_params.log_folder)

        self.clock = SimulationClock(self._sim_params.clock)

        self.calculator = calculator if calculator is not None else RatingCalculator()
        if self.calculator.logger is None:
            self.calculator.logger = self.logger

        self._index = ElementIndex()
        self._index.logger = self.logger
        self.spatial_query = spatial_query if spatial_query is not None else self._index

        self.spread_engine = FireSpreadEngine(self._sim_params.spread, self.spatial_query,
                                              rng=rng, logger=self.logger)

        self.trackers: Dict[int, ExposureTracker] = {}
        self.fire_sources: List[FireSource] = []

        self._log_timer_s = 0.0
        self._iters = 0

        for data in self._sim_params.elements:
            self.add_element(StructuralElement.from_data(data))

        for source_params in self._sim_params.fire_sources:
            self.add_fire_source(source_params)

        self.clock.add_reset_handler(self._on_clock_reset)

        if self.logger:
            self.logger.log_metadata(self._sim_params, self)

        print("Initialization complete...")

    @classmethod
    def from_config(cls, path: str, **kwargs) -> 'FireResistanceSim':
        """Build a simulation from a JSON configuration file.

        Raises:
            ConfigurationError: If the file cannot be read or holds invalid values.
        """
        from fresim.utilities.file_io import load_sim_params

        return cls(load_sim_params(path), **kwargs)

    # ------------------------------------------------------------------
    # Elements and fire sources
    # ------------------------------------------------------------------

    @property
    def elements(self) -> Dict[int, StructuralElement]:
        """Dictionary mapping element IDs to elements."""
        return self._index.elements

    @property
    def element_index(self) -> ElementIndex:
        return self._index

    def get_element(self, element_id: int) -> StructuralElement:
        """Return the element with the given id.

        Raises:
            ElementError: If no element has this id.
        """
        return self._index.get(element_id)

    def add_element(self, element: StructuralElement) -> StructuralElement:
        """Register an element, rate it and attach an exposure tracker.

        Raises:
            ElementError: If an element with the same id is already registered.
        """
        self._index.add(element)

        if element.rating_dirty:
            self.calculator.rate(element)

        self.trackers[element.id] = ExposureTracker(element, self.clock, self.logger)
        return element

    def remove_element(self, element_id: int) -> StructuralElement:
        """Unregister an element and drop its tracker.

        Raises:
            ElementError: If no element has this id.
        """
        element = self._index.remove(element_id)
        del self.trackers[element_id]
        return element

    def add_fire_source(self, params: FireSourceParams) -> FireSource:
        """Create a fire source that queries this simulation's elements."""
        source = FireSource(params, self.spatial_query, id=len(self.fire_sources), logger=self.logger)
        self.fire_sources.append(source)
        return source

    def on_property_changed(self, element: StructuralElement) -> float:
        """Recompute an element's rating right away after the host edited it.

        Geometry edits are picked up too, since the spatial index is rebuilt.

        Returns:
            float: The new rating in hours.

        Raises:
            ElementError: If the element is not registered.
        """
        element = self._index.get(element.id)

        rating_hr = self.calculator.rate(element)
        self._index.invalidate()

        if rating_hr <= 0:
            self.trackers[element.id].warn_unrated()

        return rating_hr

    def refresh_ratings(self) -> List[StructuralElement]:
        """Rate every element whose rating inputs changed since it was last rated.

        Returns:
            List[StructuralElement]: The re-rated elements.
        """
        refreshed = [e for e in self.elements.values() if e.rating_dirty]
        for element in refreshed:
            self.calculator.rate(element)

        return refreshed

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self):
        """Start or resume the simulation."""
        self.clock.start()

        if self.logger:
            self.logger.log_message(f"Simulation started at {self.clock.format_time(self.clock.sim_time_s)}.")

    def pause(self):
        self.clock.pause()

        if self.logger:
            self.logger.log_message(f"Simulation paused at {self.clock.format_time(self.clock.sim_time_s)}.")

    def reset(self):
        """Return the whole simulation to its initial state.

        The current log run is finalized first and a new one is opened, so each
        reset cycle has its own run folder.
        """
        if self.logger:
            self.logger.finish(self)
            self.logger.start_new_run()

        self.clock.reset()

    def _on_clock_reset(self):
        for tracker in self.trackers.values():
            tracker.reset()

        for source in self.fire_sources:
            source.reset()

        self.spread_engine.reset()

        self._log_timer_s = 0.0
        self._iters = 0

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self, real_delta: float) -> float:
        """Advance the simulation by one host frame.

        Args:
            real_delta (float): Real seconds since the previous frame.

        Returns:
            float: Simulated seconds added by this frame (0 unless running).

        Raises:
            ValidationError: If ``real_delta`` is negative or not finite.
        """
        if not np.isfinite(real_delta) or real_delta < 0:
            msg = "Real time delta must be finite and non-negative"
            if self.logger:
                self.logger.log_message(f"Following error occurred in 'FireResistanceSim.tick()': {msg} "
                                        f"(got {real_delta})")
            raise ValidationError(msg, field="real_delta", value=real_delta)

        sim_delta = self.clock.tick(real_delta)
        running = self.clock.is_running
        sim_time_s = self.clock.sim_time_s

        self.refresh_ratings()

        for source in self.fire_sources:
            source.update(real_delta, sim_delta, running, sim_time_s)

        self.spread_engine.update(sim_delta, self.elements.values(), sim_time_s)

        for element_id in sorted(self.trackers):
            self.trackers[element_id].update(sim_delta)

        if running:
            self._iters += 1
            self._log_changes(sim_delta)

        return sim_delta

    def _log_changes(self, sim_delta: float):
        if not self.logger:
            return

        self._log_timer_s += sim_delta
        if self._log_timer_s < self._sim_params.log_interval_s:
            return

        self._log_timer_s = 0.0
        self.logger.cache_element_updates(self.get_element_entries())
        self.logger.flush()

    def run(self, duration_s: float, real_dt: float = 1.0) -> dict:
        """Advance a started simulation headlessly.

        Ticks with ``real_dt`` until ``duration_s`` simulated seconds have
        elapsed or every element has failed.

        Args:
            duration_s (float): Simulated seconds to reach.
            real_dt (float, optional): Real seconds per tick. Defaults to 1.0.

        Returns:
            dict: `summary` of the final state.

        Raises:
            SimulationError: If the clock is not running.
            ValidationError: If ``real_dt`` is not positive.
        """
        if not self.clock.is_running:
            msg = "The simulation must be started before it can run"
            if self.logger:
                self.logger.log_message(f"Following error occurred in 'FireResistanceSim.run()': {msg}")
            raise SimulationError(msg, sim_time_s=self.clock.sim_time_s)

        if real_dt <= 0:
            raise ValidationError("Real time step must be positive", field="real_dt", value=real_dt)

        start_s = self.clock.sim_time_s
        with tqdm(total=duration_s, initial=min(start_s, duration_s), desc='Current sim ',
                  unit='s', position=0, leave=False) as progress_bar:
            while self.clock.sim_time_s < duration_s and not self.all_failed:
                sim_delta = self.tick(real_dt)
                progress_bar.update(min(sim_delta, max(0.0, duration_s - progress_bar.n)))

        return self.summary()

    def finish(self, on_interrupt: bool = False):
        """Write the results and merge the log files of the current run."""
        if self.logger:
            self.logger.finish(self, on_interrupt)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def element_state(self, element_id: int) -> int:
        """IntegrityState constant of an element as of the latest update."""
        return self.trackers[element_id].state

    def element_states(self) -> Dict[int, dict]:
        """Presentation snapshot of every element keyed by id."""
        states = {}
        for element_id in sorted(self.trackers):
            tracker = self.trackers[element_id]
            element = tracker.element

            states[element_id] = {
                "name": element.name,
                "state": tracker.state,
                "state_name": IntegrityState.names[tracker.state],
                "rating_hr": element.achieved_rating_hr,
                "exposed": element.exposed,
                "exposure_time_s": element.exposure_time_s,
                "failed": element.failed,
                "failure_progress": tracker.failure_progress,
                "failed_at_s": tracker.failed_at_s
            }

        return states

    def get_element_entries(self) -> list:
        """Log entries of every element at the current simulated time."""
        sim_time_s = self.clock.sim_time_s
        return [self.trackers[i].element.to_log_entry(sim_time_s, self.trackers[i].state)
                for i in sorted(self.trackers)]

    @property
    def all_failed(self) -> bool:
        """True when there is at least one element and every element has failed."""
        return len(self.elements) > 0 and all(e.failed for e in self.elements.values())

    @property
    def iters(self) -> int:
        """Number of running ticks since the last reset."""
        return self._iters

    @property
    def sim_time_s(self) -> float:
        return self.clock.sim_time_s

    @property
    def state(self) -> int:
        """ClockState constant of the simulation clock."""
        return self.clock.state

    def summary(self) -> dict:
        """Counts of exposed, failed and unrated elements at the current time."""
        elements = list(self.elements.values())
        failed = sorted((e for e in elements if e.failed), key=lambda e: self.trackers[e.id].failed_at_s)

        return {
            "sim_time_s": self.clock.sim_time_s,
            "sim_time": self.clock.format_time(self.clock.sim_time_s),
            "state": ClockState.names[self.clock.state],
            "elements": len(elements),
            "exposed": sum(1 for e in elements if e.exposed),
            "failed": len(failed),
            "unrated": sum(1 for e in elements if e.achieved_rating_hr <= 0),
            "failure_order": [e.id for e in failed]
        }
