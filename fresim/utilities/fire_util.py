"""Various sets of constants and helper functions useful throughout the codebase

.. autoclass:: MaterialCategory
    :members:

.. autoclass:: StructuralRole
    :members:

.. autoclass:: RestraintCondition
    :members:

.. autoclass:: ExposureConfiguration
    :members:

.. autoclass:: IntegrityState
    :members:

.. autoclass:: ClockState
    :members:

.. autoclass:: UtilFuncs
    :members:

"""

from typing import Tuple
import numpy as np

STRUCTURAL_LAYER = "structural"


class MaterialCategory:
    """Enumeration of the ACI 216.1 aggregate categories.

    Attributes:
        - **SILICEOUS** (int): Siliceous aggregate concrete.
        - **CARBONATE** (int): Carbonate aggregate concrete.
        - **SEMI_LIGHTWEIGHT** (int): Sand-lightweight concrete.
        - **LIGHTWEIGHT** (int): Lightweight aggregate concrete.
        - **AIR_COOLED_SLAG** (int): Air-cooled blast furnace slag concrete.
        - **INSULATING** (int): Insulating concrete.
        - **UNKNOWN** (int): Unmapped material, cannot be rated.
    """
    SILICEOUS, CARBONATE, SEMI_LIGHTWEIGHT, LIGHTWEIGHT, AIR_COOLED_SLAG, INSULATING, UNKNOWN = 0, 1, 2, 3, 4, 5, 6

    names = {
        0: "Siliceous",
        1: "Carbonate",
        2: "SemiLightweight",
        3: "Lightweight",
        4: "AirCooledSlag",
        5: "Insulating",
        6: "Unknown"
    }

    ids = {name: id for id, name in names.items()}

    @classmethod
    def from_name(cls, name: str) -> int:
        """Look up a category constant from its display name (case-insensitive).

        Raises:
            KeyError: If the name is not a known category.
        """
        for key, value in cls.ids.items():
            if key.lower() == str(name).strip().lower():
                return value

        raise KeyError(name)


class StructuralRole:
    """Enumeration of structural element kinds.

    Attributes:
        - **SLAB** (int): Floor/roof slab, rated on equivalent thickness.
        - **WALL** (int): Wall, rated on equivalent thickness.
        - **BEAM** (int): Reinforced concrete beam, rated on cover.
        - **CONCRETE_COLUMN** (int): Concrete column, rated on least dimension.
        - **PROTECTED_STEEL_COLUMN** (int): Recognised but not rated by this engine.
        - **OTHER** (int): Anything else, never rated.
    """
    SLAB, WALL, BEAM, CONCRETE_COLUMN, PROTECTED_STEEL_COLUMN, OTHER = 0, 1, 2, 3, 4, 5

    names = {
        0: "Slab",
        1: "Wall",
        2: "Beam",
        3: "ConcreteColumn",
        4: "ProtectedSteelColumn",
        5: "Other"
    }

    ids = {name: id for id, name in names.items()}

    @classmethod
    def from_name(cls, name: str) -> int:
        for key, value in cls.ids.items():
            if key.lower() == str(name).strip().lower():
                return value

        raise KeyError(name)


class RestraintCondition:
    """Whether thermal expansion of a member is restrained.

    Attributes:
        - **RESTRAINED** (int)
        - **UNRESTRAINED** (int)
        - **NOT_APPLICABLE** (int)
    """
    RESTRAINED, UNRESTRAINED, NOT_APPLICABLE = 0, 1, 2

    names = {0: "Restrained", 1: "Unrestrained", 2: "NotApplicable"}

    ids = {name: id for id, name in names.items()}

    @classmethod
    def from_name(cls, name: str) -> int:
        for key, value in cls.ids.items():
            if key.lower() == str(name).strip().lower():
                return value

        raise KeyError(name)


class ExposureConfiguration:
    """Number of column faces exposed to fire.

    Stored on columns for reporting; the column tables do not depend on it.
    """
    FOUR_SIDES, THREE_SIDES, TWO_SIDES, ONE_SIDE = 0, 1, 2, 3

    names = {0: "FourSides", 1: "ThreeSides", 2: "TwoSides", 3: "OneSide"}

    ids = {name: id for id, name in names.items()}

    @classmethod
    def from_name(cls, name: str) -> int:
        for key, value in cls.ids.items():
            if key.lower() == str(name).strip().lower():
                return value

        raise KeyError(name)


class IntegrityState:
    """Enumeration of the possible element integrity states.

    Attributes:
        - **HEALTHY** (int): Element is not exposed to fire.
        - **EXPOSED** (int): Element is exposed and accumulating exposure time.
        - **FAILED** (int): Element exceeded its rating, terminal until reset.
    """
    HEALTHY, EXPOSED, FAILED = 0, 1, 2

    names = {0: "Healthy", 1: "Exposed", 2: "Failed"}


class ClockState:
    """Enumeration of the simulation clock states.

    Attributes:
        - **STOPPED** (int): Initial state, and the state after a reset.
        - **RUNNING** (int): Simulated time advances.
        - **PAUSED** (int): Simulated time is frozen.
    """
    STOPPED, RUNNING, PAUSED = 0, 1, 2

    names = {0: "Stopped", 1: "Running", 2: "Paused"}


class UtilFuncs:
    """Various utility functions that are useful across numerous files.
    """

    @staticmethod
    def to_point(xyz) -> np.ndarray:
        """Convert a 2 or 3 element coordinate to a 3D float array (z defaults to 0).

        Args:
            xyz: Sequence of (x, y) or (x, y, z) in meters.

        Returns:
            np.ndarray: Array of shape (3,).
        """
        arr = np.asarray(xyz, dtype=float).ravel()
        if arr.size == 2:
            arr = np.append(arr, 0.0)

        if arr.size != 3:
            raise ValueError(f"Expected a 2D or 3D coordinate, got {xyz!r}")

        return arr

    @staticmethod
    def distance_to_box(point: np.ndarray, box_min: np.ndarray, box_max: np.ndarray) -> float:
        """Distance from a point to an axis-aligned box (0 if the point is inside).

        Args:
            point (np.ndarray): Query point (3,).
            box_min (np.ndarray): Minimum corner of the box (3,).
            box_max (np.ndarray): Maximum corner of the box (3,).

        Returns:
            float: Euclidean distance in meters.
        """
        closest = np.clip(point, box_min, box_max)
        return float(np.linalg.norm(point - closest))

    @staticmethod
    def format_time(seconds: float) -> str:
        """Format simulated seconds for display.

        Returns ``HH:MM:SS`` below one day and ``D:HH:MM:SS`` from 24 hours on.
        Fractions of a second are truncated.

        Args:
            seconds (float): Simulated seconds.

        Returns:
            str: Formatted time string.
        """
        total_seconds = int(seconds)

        days, remaining = divmod(total_seconds, 86400)
        h, remaining = divmod(remaining, 3600)
        m, s = divmod(remaining, 60)

        if days > 0:
            return f"{days}:{h:02d}:{m:02d}:{s:02d}"

        return f"{h:02d}:{m:02d}:{s:02d}"

    @staticmethod
    def box_center(box_min: Tuple, box_max: Tuple) -> np.ndarray:
        """Center of an axis-aligned box."""
        return (np.asarray(box_min, dtype=float) + np.asarray(box_max, dtype=float)) / 2
