"""Fire-resistance rating of structural elements.

The `RatingCalculator` converts an element's dimensions, material category
and structural role into an achieved fire-resistance rating in hours using
the tables of a `RatingTableSet` (ACI 216.1 by default).

Element dimensions are stored in meters while the tables are tabulated in
millimeters; the conversion happens here and nowhere else.

Dispatch by role:
    - Slab, Wall: equivalent thickness table of the material category.
    - Beam: cover table selected by beam width bracket and restraint.
    - ConcreteColumn: least dimension table of the material category. The
      column's exposure configuration is reported but does not change the
      rating.
    - ProtectedSteelColumn: no table, rating 0 with a warning.
    - Other: rating 0 without a warning.

An element that cannot be rated gets a rating of 0 and therefore never fails
from exposure time alone.

.. autoclass:: RatingCalculator
    :members:
"""
from typing import Callable, Dict, Iterable, List, Optional, TYPE_CHECKING

from fresim.models.rating_tables import RatingTableSet, RatingTable
from fresim.utilities.fire_util import MaterialCategory, StructuralRole, RestraintCondition
from fresim.utilities.unit_conversions import m_to_mm

if TYPE_CHECKING:
    from fresim.fire_simulator.element import StructuralElement
    from fresim.utilities.logger import Logger


class RatingCalculator:
    """Calculates ratings in hours from static rating tables.

    `calculate` is a pure function of the element's current fields; caching
    the result on the element is the caller's job (see `rate`).

    Attributes:
        tables (RatingTableSet): Tables used for every lookup.
        logger (Logger): Optional logger that receives warnings.
        warnings (List[str]): Every warning emitted, in order.
    """

    def __init__(self, tables: Optional[RatingTableSet] = None, logger: 'Logger' = None):
        """Create a calculator.

        Args:
            tables (RatingTableSet, optional): Table set to use. Defaults to the
                packaged ACI 216.1 tables.
            logger (Logger, optional): Receives warnings via ``log_message``. When
                None, warnings are printed.
        """
        self.tables = tables if tables is not None else RatingTableSet.aci_216()
        self.logger = logger
        self.warnings: List[str] = []

        self._dispatch: Dict[int, Callable[['StructuralElement'], float]] = {
            StructuralRole.SLAB: self._rate_slab_or_wall,
            StructuralRole.WALL: self._rate_slab_or_wall,
            StructuralRole.BEAM: self._rate_beam,
            StructuralRole.CONCRETE_COLUMN: self._rate_column,
        }

    def _warn(self, message: str):
        self.warnings.append(message)

        if self.logger:
            self.logger.log_message(f"Warning: {message}")
        else:
            print(f"Warning: {message}")

    def is_supported(self, role: int, category: Optional[int]) -> bool:
        """Whether a (role, category) pair has a table to rate it with.

        Beams are rated independently of the material category.
        """
        if category is None or category == MaterialCategory.UNKNOWN:
            return False

        if role in (StructuralRole.SLAB, StructuralRole.WALL):
            return category in self.tables.equivalent_thickness

        if role == StructuralRole.BEAM:
            return len(self.tables.beam_cover) > 0

        if role == StructuralRole.CONCRETE_COLUMN:
            return category in self.tables.column_least_dimension

        return False

    def calculate(self, element: 'StructuralElement') -> float:
        """Rating in hours for the element's current properties.

        Returns 0.0 and emits a warning when the element or its material is
        missing, the material category is Unknown, or the role has no table
        for the category. Returns 0.0 silently for the Other role.

        Args:
            element (StructuralElement): Element to rate.

        Returns:
            float: Achieved rating in hours, always >= 0.
        """
        if element is None:
            self._warn("Cannot calculate rating: element is missing.")
            return 0.0

        if element.role == StructuralRole.OTHER:
            return 0.0

        if element.material is None:
            self._warn(f"Cannot calculate rating for {element.name}: no material is assigned.")
            return 0.0

        if element.material == MaterialCategory.UNKNOWN:
            self._warn(f"Cannot calculate rating for {element.name}: aggregate category is Unknown.")
            return 0.0

        strategy = self._dispatch.get(element.role)
        if strategy is None:
            self._warn(f"Cannot calculate rating for {element.name}: no rating table is implemented "
                       f"for role {StructuralRole.names.get(element.role, element.role)}.")
            return 0.0

        return max(0.0, strategy(element))

    def rate(self, element: 'StructuralElement') -> float:
        """Calculate the element's rating and cache it on the element."""
        rating = self.calculate(element)
        element.set_rating(rating)
        return rating

    def rate_all(self, elements: Iterable['StructuralElement']) -> Dict[int, float]:
        """Rate and cache every element.

        Returns:
            Dict[int, float]: Rating in hours keyed by element id.
        """
        return {element.id: self.rate(element) for element in elements}

    def _lookup(self, table: Optional[RatingTable], element: 'StructuralElement',
                table_kind: str, dimension_m: float) -> float:
        if table is None:
            self._warn(f"Cannot calculate rating for {element.name}: no {table_kind} table for "
                       f"{MaterialCategory.names.get(element.material, element.material)} aggregate.")
            return 0.0

        return table.interpolate(m_to_mm(dimension_m))

    def _rate_slab_or_wall(self, element: 'StructuralElement') -> float:
        table = self.tables.equivalent_thickness.get(element.material)
        return self._lookup(table, element, "equivalent thickness", element.equivalent_thickness_m)

    def _rate_column(self, element: 'StructuralElement') -> float:
        table = self.tables.column_least_dimension.get(element.material)
        return self._lookup(table, element, "column least dimension", element.least_dimension_m)

    def _rate_beam(self, element: 'StructuralElement') -> float:
        restraint = element.restraint
        if restraint == RestraintCondition.NOT_APPLICABLE:
            self._warn(f"Beam {element.name} has no restraint condition, rating it as unrestrained.")
            restraint = RestraintCondition.UNRESTRAINED

        width_mm = m_to_mm(element.width_m)
        table = self.tables.beam_table(width_mm, restraint)

        if table is None:
            self._warn(f"Cannot calculate rating for {element.name}: no beam cover table for "
                       f"{RestraintCondition.names[restraint]} beams in the "
                       f"{self.tables.beam_bracket(width_mm)} width bracket.")
            return 0.0

        return table.interpolate(m_to_mm(element.cover_m))
