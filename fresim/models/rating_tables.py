"""Fire-resistance rating tables and piecewise-linear interpolation.

This module holds the tabulated reference data used to turn a physical
dimension (equivalent thickness, concrete cover or least dimension, all in
millimeters) into a fire-resistance rating in hours.

Classes:
    - DataPoint: A single (threshold, rating) pair.
    - BoundaryPolicy: How a table answers queries below its first threshold.
    - RatingTable: An ordered, validated sequence of data points.
    - RatingTableSet: The tables for every material category and structural role.

References:
    - ACI/TMS 216.1-14. Code Requirements for Determining Fire Resistance of
      Concrete and Masonry Construction Assemblies. Tables 4.2, 4.3.1.2, 4.5.1a.

"""
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple
import numpy as np
import json
import os

from fresim.exceptions import TableError
from fresim.utilities.fire_util import MaterialCategory, RestraintCondition


class DataPoint(NamedTuple):
    """A tabulated rating at a given dimension.

    Attributes:
        threshold_mm (float): Dimension in millimeters.
        rating_hr (float): Fire-resistance rating in hours.
    """
    threshold_mm: float
    rating_hr: float


class BoundaryPolicy:
    """Behaviour of a table for queries below its first threshold.

    Attributes:
        - **CLAMP** (int): Return the first rating.
        - **PROPORTIONAL** (int): Scale the first rating by ``x / threshold0``, floored at 0.

    Above the last threshold every table clamps to the last rating.
    """
    CLAMP, PROPORTIONAL = 0, 1


class RatingTable:
    """Ordered (threshold, rating) data with linear interpolation.

    Tables are validated on construction: at least one point, finite values,
    strictly ascending thresholds and non-negative, non-decreasing ratings.
    Violations are authoring bugs and raise ``TableError`` immediately.

    Attributes:
        name (str): Identifier used in error messages and logs.
        policy (int): A ``BoundaryPolicy`` constant.
        points (Tuple[DataPoint]): The validated data points.
    """

    def __init__(self, points: Sequence[Tuple[float, float]], name: str = None,
                 policy: int = BoundaryPolicy.CLAMP):
        """Build and validate a table.

        Args:
            points (Sequence[Tuple[float, float]]): (threshold_mm, rating_hr) pairs, ascending.
            name (str, optional): Table identifier. Defaults to None.
            policy (int, optional): Below-range policy. Defaults to BoundaryPolicy.CLAMP.

        Raises:
            TableError: If the data violate any table invariant.
        """
        self.name = name

        if policy not in (BoundaryPolicy.CLAMP, BoundaryPolicy.PROPORTIONAL):
            raise TableError(f"Unknown boundary policy {policy}", table_name=name)

        self.policy = policy

        if points is None or len(points) == 0:
            raise TableError("A rating table needs at least one data point", table_name=name)

        try:
            data = np.asarray(points, dtype=float)
        except (TypeError, ValueError) as e:
            raise TableError(f"Data points must be numeric pairs: {e}", table_name=name)

        if data.ndim != 2 or data.shape[1] != 2:
            raise TableError("Data points must be (threshold, rating) pairs", table_name=name)

        if not np.all(np.isfinite(data)):
            raise TableError("Data points must be finite", table_name=name)

        thresholds = data[:, 0]
        ratings = data[:, 1]

        if np.any(np.diff(thresholds) <= 0):
            raise TableError("Thresholds must be unique and strictly ascending", table_name=name)

        if np.any(ratings < 0):
            raise TableError("Ratings must be non-negative", table_name=name)

        if np.any(np.diff(ratings) < 0):
            raise TableError("Ratings must not decrease with the threshold", table_name=name)

        self._thresholds = thresholds
        self._ratings = ratings
        self.points = tuple(DataPoint(float(t), float(r)) for t, r in data)

    def __len__(self) -> int:
        return len(self.points)

    def __repr__(self) -> str:
        return f"RatingTable(name={self.name!r}, points={len(self.points)})"

    @property
    def min_threshold(self) -> float:
        """Smallest tabulated dimension (mm)."""
        return self.points[0].threshold_mm

    @property
    def max_threshold(self) -> float:
        """Largest tabulated dimension (mm)."""
        return self.points[-1].threshold_mm

    def interpolate(self, x: float) -> float:
        """Rating in hours for a dimension of ``x`` millimeters.

        Below the first threshold the table's policy applies; at or above the
        last threshold the last rating is returned. In between, the bracketing
        pair ``t[i] <= x < t[i+1]`` is interpolated linearly.

        Args:
            x (float): Dimension in millimeters.

        Returns:
            float: Rating in hours.
        """
        t = self._thresholds
        r = self._ratings

        if x <= t[0]:
            if self.policy == BoundaryPolicy.PROPORTIONAL and x < t[0] and t[0] > 0:
                return max(0.0, float(r[0] * x / t[0]))

            return float(r[0])

        if x >= t[-1]:
            return float(r[-1])

        i = int(np.searchsorted(t, x, side='right')) - 1

        t0, t1 = t[i], t[i + 1]
        r0, r1 = r[i], r[i + 1]

        if t1 == t0:
            return float(r0)

        return float(r0 + (x - t0) * (r1 - r0) / (t1 - t0))


def interpolate(table: RatingTable, x: float) -> float:
    """Module-level form of ``RatingTable.interpolate``."""
    return table.interpolate(x)


class RatingTableSet:
    """All rating tables the calculator can dispatch to.

    Tables are keyed by material category (walls/slabs and columns) or by
    (restraint, width bracket) for beams. Beam width brackets are the upper
    bounds, in millimeters, of the narrow and medium brackets.

    Attributes:
        equivalent_thickness (Dict[int, RatingTable]): Wall/slab tables by category.
        column_least_dimension (Dict[int, RatingTable]): Column tables by category.
        beam_cover (Dict[Tuple[int, str], RatingTable]): Beam tables by (restraint, bracket).
        beam_width_brackets_mm (Tuple[float, float]): Narrow/medium upper bounds.
    """
    _raw_tables = None # class-level cache of the packaged json
    _aci = None # class-level cache of the built table set

    BEAM_BRACKETS = ("narrow", "medium", "wide")

    def __init__(self,
                 equivalent_thickness: Optional[Dict[int, RatingTable]] = None,
                 column_least_dimension: Optional[Dict[int, RatingTable]] = None,
                 beam_cover: Optional[Dict[Tuple[int, str], RatingTable]] = None,
                 beam_width_brackets_mm: Tuple[float, float] = (177.8, 254.0),
                 source: str = None):

        self.equivalent_thickness = dict(equivalent_thickness or {})
        self.column_least_dimension = dict(column_least_dimension or {})
        self.beam_cover = dict(beam_cover or {})

        if len(beam_width_brackets_mm) != 2 or beam_width_brackets_mm[0] >= beam_width_brackets_mm[1]:
            raise TableError("Beam width brackets must be two ascending widths", table_name="beam_width_brackets_mm")

        self.beam_width_brackets_mm = (float(beam_width_brackets_mm[0]), float(beam_width_brackets_mm[1]))
        self.source = source

    @classmethod
    def load_tables(cls) -> dict:
        if cls._raw_tables is None:
            json_path = os.path.join(os.path.dirname(__file__), "aci_216_tables.json")
            with open(json_path, "r") as f:
                cls._raw_tables = json.load(f)

        return cls._raw_tables

    @classmethod
    def aci_216(cls) -> 'RatingTableSet':
        """The packaged ACI 216.1 tables, built once per process."""
        if cls._aci is None:
            cls._aci = cls.from_dict(cls.load_tables())

        return cls._aci

    @classmethod
    def from_dict(cls, data: dict, policy: int = BoundaryPolicy.CLAMP) -> 'RatingTableSet':
        """Build a table set from the json layout of ``aci_216_tables.json``.

        Category and restraint keys are display names (e.g. ``"Siliceous"``,
        ``"Unrestrained"``). Every table gets the same boundary policy.

        Raises:
            TableError: If a key is unknown or a table is malformed.
        """
        def category_key(name: str) -> int:
            try:
                return MaterialCategory.from_name(name)
            except KeyError:
                raise TableError(f"Unknown material category '{name}'", table_name=name)

        equivalent_thickness = {}
        for name, points in data.get("equivalent_thickness", {}).items():
            equivalent_thickness[category_key(name)] = RatingTable(
                points, name=f"equivalent_thickness/{name}", policy=policy)

        column_least_dimension = {}
        for name, points in data.get("column_least_dimension", {}).items():
            column_least_dimension[category_key(name)] = RatingTable(
                points, name=f"column_least_dimension/{name}", policy=policy)

        beam_cover = {}
        for restraint_name, brackets in data.get("beam_cover", {}).items():
            try:
                restraint = RestraintCondition.from_name(restraint_name)
            except KeyError:
                raise TableError(f"Unknown restraint '{restraint_name}'", table_name=restraint_name)

            for bracket, points in brackets.items():
                if bracket not in cls.BEAM_BRACKETS:
                    raise TableError(f"Unknown beam width bracket '{bracket}'",
                                     table_name=f"beam_cover/{restraint_name}")

                beam_cover[(restraint, bracket)] = RatingTable(
                    points, name=f"beam_cover/{restraint_name}/{bracket}", policy=policy)

        return cls(equivalent_thickness=equivalent_thickness,
                   column_least_dimension=column_least_dimension,
                   beam_cover=beam_cover,
                   beam_width_brackets_mm=tuple(data.get("beam_width_brackets_mm", (177.8, 254.0))),
                   source=data.get("source"))

    def beam_bracket(self, width_mm: float) -> str:
        """Width bracket name for a beam of the given width."""
        narrow_max, medium_max = self.beam_width_brackets_mm

        if width_mm < narrow_max:
            return "narrow"

        if width_mm < medium_max:
            return "medium"

        return "wide"

    def beam_table(self, width_mm: float, restraint: int) -> Optional[RatingTable]:
        return self.beam_cover.get((restraint, self.beam_bracket(width_mm)))

    def categories(self) -> List[int]:
        """Categories with a wall/slab table."""
        return sorted(self.equivalent_thickness)
