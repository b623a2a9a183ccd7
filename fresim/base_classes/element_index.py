"""Element registry and broad-phase spatial index.

This module provides the ElementIndex class which stores the structural
elements of a model and answers radius queries against them, using a shapely
STRtree as a plan-view prefilter and exact 3D distances as the final test.

Classes:
    - ElementIndex: Default SpatialQuery implementation.
"""

from typing import Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING
import numpy as np
from shapely.geometry import Point, box
from shapely.strtree import STRtree

from fresim.base_classes.spatial_query import SpatialQuery
from fresim.exceptions import ElementError
from fresim.utilities.fire_util import UtilFuncs

if TYPE_CHECKING:
    from fresim.fire_simulator.element import StructuralElement

_PREFILTER_PAD_M = 1e-9


class ElementIndex(SpatialQuery):
    """Stores structural elements and answers radius queries.

    Each element is indexed by the plan-view footprint of its bounding box,
    or by its detection center when it has no bounds. The tree is rebuilt
    lazily after elements are added or removed, and before a query when any
    element's geometry version changed since the last build.

    Distances are measured to an element's bounding box when it has one
    (0 for points inside the box) and to its detection center otherwise.

    Attributes:
        elements (Dict[int, StructuralElement]): Elements keyed by id.
    """

    def __init__(self, elements: Optional[Iterable['StructuralElement']] = None):
        """Initialize the index.

        Args:
            elements: Optional elements to register immediately.
        """
        self._elements: Dict[int, 'StructuralElement'] = {}

        # Reference to logger for error messages (set by parent)
        self.logger = None

        # Spatial index (built lazily on the first query)
        self._strtree = None
        self._strtree_elements = None
        self._built_versions = None

        if elements is not None:
            for element in elements:
                self.add(element)

    @property
    def elements(self) -> Dict[int, 'StructuralElement']:
        """Dictionary mapping element IDs to elements."""
        return self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def __contains__(self, element_id: int) -> bool:
        return element_id in self._elements

    def add(self, element: 'StructuralElement') -> None:
        """Register an element.

        Raises:
            ElementError: If an element with the same id is already registered.
        """
        if element.id in self._elements:
            msg = "An element with this id is already registered"
            if self.logger:
                self.logger.log_message(f"Following error occurred in 'ElementIndex.add()': {msg} "
                                        f"(id {element.id})")
            raise ElementError(msg, element_id=element.id)

        self._elements[element.id] = element
        self.invalidate()

    def remove(self, element_id: int) -> 'StructuralElement':
        """Unregister and return an element.

        Raises:
            ElementError: If no element has this id.
        """
        element = self.get(element_id)
        del self._elements[element_id]
        self.invalidate()
        return element

    def get(self, element_id: int) -> 'StructuralElement':
        """Return the element with the given id.

        Raises:
            ElementError: If no element has this id.
        """
        try:
            return self._elements[element_id]

        except KeyError:
            msg = "No element with this id"
            if self.logger:
                self.logger.log_message(f"Following error occurred in 'ElementIndex.get()': {msg} "
                                        f"(id {element_id})")
            raise ElementError(msg, element_id=element_id)

    def invalidate(self) -> None:
        """Drop the spatial index so the next query rebuilds it."""
        self._strtree = None
        self._strtree_elements = None
        self._built_versions = None

    def _footprint(self, element: 'StructuralElement'):
        if element.bounds is not None:
            box_min, box_max = element.bounds
            return box(box_min[0], box_min[1], box_max[0], box_max[1])

        x, y, _ = element.detection_center
        return Point(x, y)

    def _build_spatial_index(self) -> None:
        """Build the STRtree over element footprints."""
        self._strtree_elements = sorted(self._elements.values(), key=lambda e: e.id)
        geometries = [self._footprint(e) for e in self._strtree_elements]
        self._strtree = STRtree(geometries)
        self._built_versions = [e.geometry_version for e in self._strtree_elements]

    def _geometry_changed(self) -> bool:
        return any(e.geometry_version != v for e, v in zip(self._strtree_elements, self._built_versions))

    def find_within_radius(self, center, radius: float,
                           layer_filter: Optional[str] = None) -> List[Tuple['StructuralElement', float]]:
        """Return (element, distance) pairs within ``radius`` of ``center``.

        Results are sorted by distance, then id, so repeated queries are
        deterministic.

        Raises:
            ValueError: If the radius is negative or not finite.
        """
        if not np.isfinite(radius) or radius < 0:
            raise ValueError(f"Search radius must be finite and non-negative, got {radius}")

        if not self._elements:
            return []

        if self._strtree is None or self._geometry_changed():
            self._build_spatial_index()

        center = UtilFuncs.to_point(center)

        # Plan-view prefilter with a small pad, the exact (inclusive) test below is in 3D
        indices = self._strtree.query(Point(center[0], center[1]), predicate='dwithin',
                                      distance=radius + _PREFILTER_PAD_M)

        found = []
        for i in indices:
            element = self._strtree_elements[i]

            if layer_filter is not None and element.layer != layer_filter:
                continue

            distance = element.distance_to(center)
            if distance <= radius:
                found.append((element, distance))

        found.sort(key=lambda pair: (pair[1], pair[0].id))
        return found
