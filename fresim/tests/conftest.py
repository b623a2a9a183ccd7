"""Shared pytest fixtures for the FRESIM test suite.

This module provides reusable fixtures for testing FRESIM components,
including element factories, table sets, clocks and seeded generators.
"""

import pytest
import numpy as np


# ============================================================================
# Table Fixtures
# ============================================================================

@pytest.fixture
def scenario_tables():
    """Provide a small table set with round-number siliceous ratings.

    Returns:
        RatingTableSet: Siliceous wall/slab table (125 mm, 5 h), (150 mm, 6 h).
    """
    from fresim.models.rating_tables import RatingTable, RatingTableSet
    from fresim.utilities.fire_util import MaterialCategory

    return RatingTableSet(equivalent_thickness={
        MaterialCategory.SILICEOUS: RatingTable([(125.0, 5.0), (150.0, 6.0)], name="siliceous")
    })


@pytest.fixture
def aci_tables():
    """Provide the packaged ACI 216.1 table set."""
    from fresim.models.rating_tables import RatingTableSet
    return RatingTableSet.aci_216()


# ============================================================================
# Element Fixtures
# ============================================================================

@pytest.fixture
def make_element():
    """Provide a factory for structural elements.

    Returns:
        Callable: ``make_element(id, **properties)`` returning a StructuralElement.
        Rating inputs (cover_m, equivalent_thickness_m, ...) are applied via setters.
    """
    from fresim.fire_simulator.element import StructuralElement
    from fresim.utilities.fire_util import StructuralRole, MaterialCategory

    def _make(id=0, role=StructuralRole.SLAB, material=MaterialCategory.SILICEOUS,
              position=(0.0, 0.0, 0.0), **properties):
        element = StructuralElement(id, role=role, material=material, position=position)
        for key, value in properties.items():
            setattr(element, key, value)
        return element

    return _make


@pytest.fixture
def rated_element(make_element):
    """Provide a slab whose cached rating is exactly 1 hour."""
    element = make_element(id=1)
    element.set_rating(1.0)
    return element


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def running_clock():
    """Provide a running clock at the default 60x time scale."""
    from fresim.fire_simulator.clock import SimulationClock
    clock = SimulationClock()
    clock.start()
    return clock


# ============================================================================
# Random Fixtures
# ============================================================================

@pytest.fixture
def rng():
    """Provide a seeded numpy generator for reproducible tests."""
    return np.random.default_rng(42)
