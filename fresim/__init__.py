"""FRESIM - Fire-Resistance Simulation engine."""

from fresim.fire_simulator.fire_sim import FireResistanceSim
from fresim.fire_simulator.element import StructuralElement
from fresim.models.rating_calculator import RatingCalculator
from fresim.models.rating_tables import RatingTable, RatingTableSet
from fresim.base_classes.spatial_query import SpatialQuery
from fresim.exceptions import (
    FRESError,
    ConfigurationError,
    SimulationError,
    ValidationError,
    TableError,
    ElementError,
)

__version__ = "0.1.0"

__all__ = [
    "FireResistanceSim",
    "StructuralElement",
    "RatingCalculator",
    "RatingTable",
    "RatingTableSet",
    "SpatialQuery",
    "FRESError",
    "ConfigurationError",
    "SimulationError",
    "ValidationError",
    "TableError",
    "ElementError",
]
