"""Representation of the structural elements that make up a simulated building.

This module defines the `StructuralElement` class, the fundamental unit of the
fire-resistance simulation. Each element stores the construction properties
that feed the rating calculator, the geometry used by spatial queries, and the
exposure/failure state mutated by the simulation layer.

Classes:
    - StructuralElement: A rated structural member with fire exposure state.

.. autoclass:: StructuralElement
    :members:
"""
from typing import Optional, Tuple
import numpy as np

from fresim.exceptions import ValidationError
from fresim.utilities.data_classes import ElementData
from fresim.utilities.fire_util import (MaterialCategory, StructuralRole, RestraintCondition,
                                        ExposureConfiguration, UtilFuncs, STRUCTURAL_LAYER)
from fresim.utilities.logger_schemas import ElementLogEntry
from fresim.utilities.unit_conversions import hr_to_s


class StructuralElement:
    """Represents one piece of the imported model that requires a rating.

    Construction properties are exposed as validated properties; changing any
    property that feeds the rating calculator marks the cached rating dirty so
    the owning simulation recomputes it on its next tick. Exposure and failure
    state is owned by the element and only changed through `mark_exposed`,
    the exposure tracker, and `reset_state`.

    Attributes:
        id (int): Unique identifier for the element.
        name (str): Display name, usually the source mesh name.
        role (int): StructuralRole constant.
        material (int): MaterialCategory constant, or None if no material is mapped.
        cover_m (float): Concrete cover over reinforcement (meters).
        equivalent_thickness_m (float): Equivalent thickness (meters).
        least_dimension_m (float): Least cross-sectional dimension (meters).
        width_m (float): Beam width (meters), falls back to least dimension when unset.
        restraint (int): RestraintCondition constant.
        exposure_config (int): ExposureConfiguration constant.
        achieved_rating_hr (float): Cached fire-resistance rating in hours.
        exposed (bool): Whether the element is exposed to fire.
        exposure_time_s (float): Accumulated simulated exposure time in seconds.
        failed (bool): Whether the element has failed.
        position (np.ndarray): Representative point (x, y, z) in meters.
        bounds (Tuple[np.ndarray, np.ndarray]): Optional axis-aligned bounding box.
        layer (str): Layer name used to filter spatial queries.
    """

    def __init__(self, id: int, role: int = StructuralRole.OTHER,
                 material: Optional[int] = MaterialCategory.UNKNOWN,
                 position=(0.0, 0.0, 0.0), name: str = None):
        """Create an element with default dimensions and healthy state.

        Args:
            id (int): Unique identifier.
            role (int, optional): StructuralRole constant. Defaults to OTHER.
            material (int, optional): MaterialCategory constant. Defaults to UNKNOWN.
            position (tuple, optional): Representative point in meters. Defaults to origin.
            name (str, optional): Display name. Defaults to ``element_<id>``.
        """
        self.id = id
        self.name = name if name is not None else f"element_{id}"

        self._role = StructuralRole.OTHER
        self._material = MaterialCategory.UNKNOWN
        self.role = role
        self.material = material

        # Dimensions are stored in meters
        self._cover_m = 0.0
        self._equivalent_thickness_m = 0.0
        self._least_dimension_m = 0.0
        self._width_m = None

        self._restraint = RestraintCondition.NOT_APPLICABLE
        self._exposure_config = ExposureConfiguration.FOUR_SIDES

        # Geometry
        self._position = UtilFuncs.to_point(position)
        self._bounds = None
        self._detection_center = None
        self.layer = STRUCTURAL_LAYER
        self._geometry_version = 0

        # Derived rating, recomputed by the simulation when dirty
        self._achieved_rating_hr = 0.0
        self._rating_dirty = True

        # Fire state
        self._exposed = False
        self._exposure_time_s = 0.0
        self._failed = False

    @classmethod
    def from_data(cls, data: ElementData) -> 'StructuralElement':
        """Create an element from an `ElementData` definition."""
        element = cls(data.id, role=data.role, material=data.material,
                      position=data.position, name=data.name)

        element.cover_m = data.cover_m
        element.equivalent_thickness_m = data.equivalent_thickness_m
        element.least_dimension_m = data.least_dimension_m
        element.width_m = data.width_m
        element.restraint = data.restraint
        element.exposure_config = data.exposure_config
        element.layer = data.layer

        if data.bounds is not None:
            element.set_bounds(*data.bounds)

        if data.detection_center is not None:
            element.detection_center = data.detection_center

        return element

    def __repr__(self) -> str:
        return (f"StructuralElement(id={self.id}, name={self.name!r}, "
                f"role={StructuralRole.names.get(self._role)}, "
                f"material={MaterialCategory.names.get(self._material)})")

    # ------------------------------------------------------------------
    # Rating inputs
    # ------------------------------------------------------------------

    @staticmethod
    def _check_dimension(field: str, value: float) -> float:
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ValidationError("Dimensions must be numeric", field=field, value=value)

        if not np.isfinite(value) or value < 0:
            raise ValidationError("Dimensions must be finite and non-negative", field=field, value=value)

        return value

    def _mark_dirty(self):
        self._rating_dirty = True

    @property
    def role(self) -> int:
        """StructuralRole constant of the element."""
        return self._role

    @role.setter
    def role(self, value: int):
        if value not in StructuralRole.names:
            raise ValidationError("Unknown structural role", field="role", value=value)

        self._role = value
        self._mark_dirty()

    @property
    def material(self) -> Optional[int]:
        """MaterialCategory constant, None when no material reference is mapped."""
        return self._material

    @material.setter
    def material(self, value: Optional[int]):
        if value is not None and value not in MaterialCategory.names:
            raise ValidationError("Unknown material category", field="material", value=value)

        self._material = value
        self._mark_dirty()

    @property
    def cover_m(self) -> float:
        """Concrete cover over reinforcement (meters)."""
        return self._cover_m

    @cover_m.setter
    def cover_m(self, value: float):
        self._cover_m = self._check_dimension("cover_m", value)
        self._mark_dirty()

    @property
    def equivalent_thickness_m(self) -> float:
        """Equivalent thickness (meters)."""
        return self._equivalent_thickness_m

    @equivalent_thickness_m.setter
    def equivalent_thickness_m(self, value: float):
        self._equivalent_thickness_m = self._check_dimension("equivalent_thickness_m", value)
        self._mark_dirty()

    @property
    def least_dimension_m(self) -> float:
        """Least cross-sectional dimension (meters)."""
        return self._least_dimension_m

    @least_dimension_m.setter
    def least_dimension_m(self, value: float):
        self._least_dimension_m = self._check_dimension("least_dimension_m", value)
        self._mark_dirty()

    @property
    def width_m(self) -> float:
        """Beam width (meters); the least dimension when no width was set."""
        if self._width_m is None:
            return self._least_dimension_m

        return self._width_m

    @width_m.setter
    def width_m(self, value: Optional[float]):
        self._width_m = None if value is None else self._check_dimension("width_m", value)
        self._mark_dirty()

    @property
    def restraint(self) -> int:
        """RestraintCondition constant."""
        return self._restraint

    @restraint.setter
    def restraint(self, value: int):
        if value not in RestraintCondition.names:
            raise ValidationError("Unknown restraint condition", field="restraint", value=value)

        self._restraint = value
        self._mark_dirty()

    @property
    def exposure_config(self) -> int:
        """ExposureConfiguration constant (columns only, informational)."""
        return self._exposure_config

    @exposure_config.setter
    def exposure_config(self, value: int):
        if value not in ExposureConfiguration.names:
            raise ValidationError("Unknown exposure configuration", field="exposure_config", value=value)

        self._exposure_config = value
        self._mark_dirty()

    @property
    def rating_dirty(self) -> bool:
        """True if a rating input changed since the rating was last cached."""
        return self._rating_dirty

    @property
    def achieved_rating_hr(self) -> float:
        """Cached fire-resistance rating in hours."""
        return self._achieved_rating_hr

    def set_rating(self, rating_hr: float):
        """Cache a calculated rating on the element and clear the dirty flag.

        Raises:
            ValidationError: If the rating is negative or not finite.
        """
        rating_hr = float(rating_hr)
        if not np.isfinite(rating_hr) or rating_hr < 0:
            raise ValidationError("Ratings must be finite and non-negative", field="achieved_rating_hr",
                                  value=rating_hr)

        self._achieved_rating_hr = rating_hr
        self._rating_dirty = False

    @property
    def failure_time_s(self) -> float:
        """Exposure time at which the element fails, 0 when it has no rating."""
        return hr_to_s(self._achieved_rating_hr)

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    @property
    def position(self) -> np.ndarray:
        """Representative point (x, y, z) in meters."""
        return self._position

    @position.setter
    def position(self, value):
        self._position = UtilFuncs.to_point(value)
        self._geometry_version += 1

    @property
    def bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """Axis-aligned bounding box (min corner, max corner), or None."""
        return self._bounds

    def set_bounds(self, box_min, box_max):
        """Set the bounding box of the element's renderable geometry.

        Raises:
            ValidationError: If any min coordinate exceeds the max coordinate.
        """
        box_min = UtilFuncs.to_point(box_min)
        box_max = UtilFuncs.to_point(box_max)

        if np.any(box_min > box_max):
            raise ValidationError("Bounding box minimum must not exceed its maximum", field="bounds",
                                  value=(tuple(box_min), tuple(box_max)))

        self._bounds = (box_min, box_max)
        self._geometry_version += 1

    def clear_bounds(self):
        self._bounds = None
        self._geometry_version += 1

    @property
    def detection_center(self) -> np.ndarray:
        """Point fire spreads from: the explicit override, else bounds center, else position."""
        if self._detection_center is not None:
            return self._detection_center

        if self._bounds is not None:
            return UtilFuncs.box_center(*self._bounds)

        return self._position

    @detection_center.setter
    def detection_center(self, value):
        self._detection_center = None if value is None else UtilFuncs.to_point(value)
        self._geometry_version += 1

    @property
    def geometry_version(self) -> int:
        """Counter bumped whenever the position, bounds or detection center change."""
        return self._geometry_version

    def distance_to(self, point) -> float:
        """Distance from a point to this element (its bounds when set, else its detection center)."""
        point = UtilFuncs.to_point(point)

        if self._bounds is not None:
            return UtilFuncs.distance_to_box(point, *self._bounds)

        return float(np.linalg.norm(point - self.detection_center))

    # ------------------------------------------------------------------
    # Fire state
    # ------------------------------------------------------------------

    @property
    def exposed(self) -> bool:
        """Whether the element is exposed to fire."""
        return self._exposed

    @property
    def exposure_time_s(self) -> float:
        """Accumulated simulated exposure time in seconds."""
        return self._exposure_time_s

    @property
    def failed(self) -> bool:
        """Whether the element has failed."""
        return self._failed

    def mark_exposed(self) -> bool:
        """Set the exposure flag.

        Returns:
            bool: True if the element was newly exposed, False if it was
            already exposed (or failed) and nothing changed.
        """
        if self._exposed or self._failed:
            return False

        self._exposed = True
        return True

    def _add_exposure_time(self, dt_s: float):
        self._exposure_time_s += dt_s

    def _set_failed(self):
        self._failed = True

    def reset_state(self):
        """Clear exposure and failure state (simulation reset only)."""
        self._exposed = False
        self._exposure_time_s = 0.0
        self._failed = False

    def to_log_entry(self, timestamp: float, state: int) -> ElementLogEntry:
        """Convert element state to a log entry for recording.

        Args:
            timestamp (float): Current simulated time in seconds.
            state (int): IntegrityState constant reported by the element's tracker.

        Returns:
            ElementLogEntry: Log entry containing the element's current state.
        """
        x, y, z = self.detection_center

        entry = ElementLogEntry(
            timestamp=float(timestamp),
            id=self.id,
            name=self.name,
            x=float(x),
            y=float(y),
            z=float(z),
            role=self._role,
            material=-1 if self._material is None else self._material,
            rating_hr=self._achieved_rating_hr,
            state=state,
            exposed=self._exposed,
            exposure_time_s=self._exposure_time_s,
            failed=self._failed
        )

        return entry
