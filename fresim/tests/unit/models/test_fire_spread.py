"""Tests for the FireSpreadEngine.

These tests validate the ignition probability, the spreading-element rule,
the simulated-time scan cadence and reproducibility with seeded generators.
"""

import pytest
import numpy as np
from unittest.mock import MagicMock

from fresim.base_classes.element_index import ElementIndex
from fresim.models.fire_spread import FireSpreadEngine
from fresim.utilities.data_classes import SpreadParams


def _spreading(element, exposure_s=600.0):
    element.mark_exposed()
    element._add_exposure_time(exposure_s)
    return element


class TestIgnitionProbability:
    """Tests for the distance-based ignition probability."""

    @pytest.fixture
    def engine(self):
        return FireSpreadEngine(SpreadParams(spread_radius_m=3.0), MagicMock())

    def test_certain_at_zero_distance(self, engine):
        assert engine.ignition_probability(0.0) == 1.0

    def test_zero_at_radius(self, engine):
        assert engine.ignition_probability(3.0) == 0.0

    def test_zero_beyond_radius(self, engine):
        assert engine.ignition_probability(4.5) == 0.0

    def test_linear_in_between(self, engine):
        assert engine.ignition_probability(1.5) == pytest.approx(0.5)

    def test_bounded(self, engine):
        for d in np.linspace(0.0, 10.0, 101):
            assert 0.0 <= engine.ignition_probability(d) <= 1.0


class TestSpreadingElements:
    """Tests for selecting the elements that spread fire."""

    def test_threshold(self, make_element):
        engine = FireSpreadEngine(SpreadParams(spread_threshold_s=600.0), MagicMock())

        below = _spreading(make_element(id=1), exposure_s=599.0)
        at = _spreading(make_element(id=2), exposure_s=600.0)
        healthy = make_element(id=3)

        assert engine.spreading_elements([below, at, healthy]) == [at]

    def test_failed_elements_do_not_spread(self, make_element):
        engine = FireSpreadEngine(SpreadParams(spread_threshold_s=0.0), MagicMock())
        element = _spreading(make_element(id=1))
        element._set_failed()

        assert engine.spreading_elements([element]) == []

    def test_sorted_by_id(self, make_element):
        engine = FireSpreadEngine(SpreadParams(spread_threshold_s=0.0), MagicMock())
        elements = [_spreading(make_element(id=i)) for i in (5, 2, 9)]

        assert [e.id for e in engine.spreading_elements(elements)] == [2, 5, 9]


class TestScan:
    """Tests for a single spread scan."""

    def test_neighbor_at_radius_never_ignites(self, make_element):
        """A neighbour exactly at the spread radius is never ignited."""
        source = _spreading(make_element(id=1))
        neighbor = make_element(id=2, position=(3.0, 0.0, 0.0))
        query = MagicMock()
        query.find_within_radius.return_value = [(source, 0.0), (neighbor, 3.0)]

        engine = FireSpreadEngine(SpreadParams(spread_radius_m=3.0, seed=7), query)

        ignitions = 0
        for _ in range(10000):
            ignitions += len(engine.scan([source, neighbor]))

        assert ignitions == 0
        assert not neighbor.exposed

    def test_neighbor_at_zero_distance_always_ignites(self, make_element):
        source = _spreading(make_element(id=1))
        neighbor = make_element(id=2)
        query = MagicMock()
        query.find_within_radius.return_value = [(source, 0.0), (neighbor, 0.0)]

        engine = FireSpreadEngine(SpreadParams(spread_radius_m=3.0, seed=7), query)

        ignitions = 0
        for _ in range(10000):
            neighbor.reset_state()
            ignitions += len(engine.scan([source, neighbor]))

        assert ignitions == 10000

    def test_exposed_and_failed_neighbors_are_skipped(self, make_element):
        """Already exposed or failed neighbours are never re-ignited or sampled."""
        source = _spreading(make_element(id=1))
        exposed = make_element(id=2)
        exposed.mark_exposed()
        failed = make_element(id=3)
        failed._set_failed()

        query = MagicMock()
        query.find_within_radius.return_value = [(exposed, 0.5), (failed, 0.5)]
        rng = MagicMock()

        engine = FireSpreadEngine(SpreadParams(), query, rng=rng)

        assert engine.scan([source, exposed, failed]) == []
        rng.random.assert_not_called()
        assert not failed.exposed

    def test_queries_structural_layer(self, make_element):
        source = _spreading(make_element(id=1, position=(1.0, 2.0, 3.0)))
        query = MagicMock()
        query.find_within_radius.return_value = []

        engine = FireSpreadEngine(SpreadParams(spread_radius_m=2.5), query)
        engine.scan([source])

        center, radius, layer = query.find_within_radius.call_args[0]
        assert np.allclose(center, [1.0, 2.0, 3.0])
        assert radius == 2.5
        assert layer == "structural"

    def test_logs_ignitions(self, make_element):
        source = _spreading(make_element(id=1))
        neighbor = make_element(id=2)
        query = MagicMock()
        query.find_within_radius.return_value = [(neighbor, 0.0)]
        logger = MagicMock()

        engine = FireSpreadEngine(SpreadParams(), query, logger=logger)
        engine.scan([source, neighbor], sim_time_s=120.0)

        entries = logger.cache_ignitions.call_args[0][0]
        assert len(entries) == 1
        assert entries[0].id == 2
        assert entries[0].source_id == 1
        assert entries[0].cause == "spread"
        assert entries[0].timestamp == 120.0

    def test_seeded_runs_are_reproducible(self, make_element):
        def run(seed):
            elements = [make_element(id=i, position=(0.5 * i, 0.0, 0.0)) for i in range(12)]
            _spreading(elements[0])
            engine = FireSpreadEngine(SpreadParams(spread_radius_m=3.0, spread_threshold_s=0.0, seed=seed),
                                      ElementIndex(elements))
            for _ in range(5):
                engine.scan(elements)
            return [e.id for e in elements if e.exposed]

        assert run(3) == run(3)


class TestCadence:
    """Tests for the simulated-time scan cadence."""

    @pytest.fixture
    def spread_setup(self, make_element):
        source = _spreading(make_element(id=1))
        neighbor = make_element(id=2)
        query = MagicMock()
        query.find_within_radius.return_value = [(neighbor, 0.0)]
        engine = FireSpreadEngine(SpreadParams(scan_interval_s=60.0), query)
        return engine, [source, neighbor], neighbor

    def test_scan_waits_for_interval(self, spread_setup):
        engine, elements, neighbor = spread_setup

        assert engine.update(30.0, elements) == []
        assert not neighbor.exposed

        assert engine.update(30.0, elements) == [neighbor]
        assert neighbor.exposed

    def test_no_progress_while_paused(self, spread_setup):
        """A zero simulated delta never advances the cadence."""
        engine, elements, neighbor = spread_setup

        for _ in range(100):
            engine.update(0.0, elements)

        assert not neighbor.exposed

    def test_disabled(self, make_element):
        query = MagicMock()
        engine = FireSpreadEngine(SpreadParams(enabled=False), query)

        engine.update(1000.0, [_spreading(make_element(id=1))])
        query.find_within_radius.assert_not_called()

    def test_zero_interval_scans_every_tick(self, make_element):
        query = MagicMock()
        query.find_within_radius.return_value = []
        engine = FireSpreadEngine(SpreadParams(scan_interval_s=0.0), query)
        source = _spreading(make_element(id=1))

        engine.update(0.5, [source])
        engine.update(0.5, [source])

        assert query.find_within_radius.call_count == 2

    def test_scan_count_follows_simulated_time(self, make_element):
        """Overshoot carries over, so 6000 s at a 60 s interval is 100 scans."""
        query = MagicMock()
        query.find_within_radius.return_value = []
        engine = FireSpreadEngine(SpreadParams(scan_interval_s=60.0), query)
        source = _spreading(make_element(id=1))

        for _ in range(120):
            engine.update(50.0, [source])

        assert query.find_within_radius.call_count == 100

    def test_long_tick_runs_one_scan_per_interval(self, make_element):
        query = MagicMock()
        query.find_within_radius.return_value = []
        engine = FireSpreadEngine(SpreadParams(scan_interval_s=60.0), query)
        source = _spreading(make_element(id=1))

        engine.update(25.0, [source])
        assert query.find_within_radius.call_count == 0

        engine.update(100.0, [source])
        assert query.find_within_radius.call_count == 2

        engine.update(35.0, [source])
        assert query.find_within_radius.call_count == 2

        engine.update(20.0, [source])
        assert query.find_within_radius.call_count == 3

    def test_reset_clears_cadence(self, spread_setup):
        engine, elements, neighbor = spread_setup
        engine.update(45.0, elements)
        engine.reset()

        engine.update(45.0, elements)
        assert not neighbor.exposed

    def test_reset_restarts_seeded_generator(self):
        engine = FireSpreadEngine(SpreadParams(seed=11), MagicMock())
        first = [engine.rng.random() for _ in range(3)]

        engine.reset()

        assert [engine.rng.random() for _ in range(3)] == first

    def test_reset_keeps_injected_generator(self, rng):
        engine = FireSpreadEngine(SpreadParams(seed=11), MagicMock(), rng=rng)
        rng.random()

        engine.reset()

        assert engine.rng is rng
