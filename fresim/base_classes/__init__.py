"""Spatial query interface and the default element index.

Hosts that already maintain a broad-phase structure implement SpatialQuery;
everyone else gets ElementIndex.

Classes:
    - SpatialQuery: Abstract base for radius queries over structural elements.
    - ElementIndex: Element registry backed by a shapely STRtree.

.. autoclass:: fresim.base_classes.spatial_query.SpatialQuery
    :members:

.. autoclass:: fresim.base_classes.element_index.ElementIndex
    :members:
"""

from fresim.base_classes.spatial_query import SpatialQuery
from fresim.base_classes.element_index import ElementIndex

__all__ = [
    "SpatialQuery",
    "ElementIndex",
]
