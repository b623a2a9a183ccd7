"""Abstract spatial query used by fire sources and fire spread.

Host applications that already own a broad-phase structure (a physics
engine, a scene graph) extend SpatialQuery so the simulation can ask it for
nearby elements instead of maintaining its own index.

Classes:
    - SpatialQuery: Abstract base for neighbour lookups.

.. autoclass:: SpatialQuery
    :members:
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from fresim.fire_simulator.element import StructuralElement


class SpatialQuery(ABC):
    """Abstract base class for radius queries over structural elements.

    Subclasses must implement find_within_radius, which is called
    synchronously from within a simulation tick.
    """

    @abstractmethod
    def find_within_radius(self, center, radius: float,
                           layer_filter: Optional[str] = None) -> List[Tuple['StructuralElement', float]]:
        """Return every element within ``radius`` of ``center``.

        Args:
            center: Query point (x, y) or (x, y, z) in meters.
            radius (float): Search radius in meters. Elements exactly at the
                radius are included.
            layer_filter (str, optional): Only return elements on this layer.
                None returns elements on every layer.

        Returns:
            List[Tuple[StructuralElement, float]]: (element, distance) pairs.
        """
