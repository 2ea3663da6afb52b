"""
Geometry Layer
==============

Bounded Context: Pure geometric shapes and spatial queries.

Responsibilities:
- Shape representation (immutable)
- Point-in-polygon, area, perimeter
- Segment intersection and polygon overlap
- NO state, NO counting, NO validation policy

Design Philosophy:
- Pure functions where possible
- Immutable data structures
- Fail-fast validation
"""

from freesets_board.geometry.shapes import Point, Enclosure, as_point, as_vertex_array
from freesets_board.geometry.kernel import (
    point_in_polygon,
    polygon_area,
    polygon_perimeter,
    segments_intersect,
    polygons_overlap,
)

__all__ = [
    "Point",
    "Enclosure",
    "as_point",
    "as_vertex_array",
    "point_in_polygon",
    "polygon_area",
    "polygon_perimeter",
    "segments_intersect",
    "polygons_overlap",
]
