"""
Geometry Kernel
===============

Stateless polygon predicates and metrics.

Design:
- Pure functions (no state)
- Polygons are implicitly closed (last vertex connects back to the first)
- Polygons accepted as Nx2 arrays or sequences of Points / (x, y) pairs

Known limitation:
    segments_intersect() reports parallel and collinear segments as NOT
    intersecting, so two polygons that only share a collinear stretch of
    edge are not caught by the edge test. Acceptance of edge-sharing
    shapes depends on this; keep it unless acceptance rules change.
"""

import numpy as np

from freesets_board.geometry.shapes import PointLike, as_point, as_vertex_array


def point_in_polygon(point: PointLike, polygon) -> bool:
    """
    Ray-casting point-in-polygon test.

    A horizontal ray from the point toggles inside/outside at each edge it
    crosses. Edges count a vertex only on the side where y is strictly
    greater, so a vertex shared by two edges is never counted twice.

    Args:
        point: (x, y) to test
        polygon: Polygon vertices

    Returns:
        True if inside; False for polygons with fewer than 3 vertices
    """
    vertices = as_vertex_array(polygon)
    n = len(vertices)
    if n < 3:
        return False

    p = as_point(point)
    x, y = p.x, p.y
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = vertices[i]
        xj, yj = vertices[j]
        if (yi > y) != (yj > y):
            crossing_x = (xj - xi) * (y - yi) / (yj - yi) + xi
            if x < crossing_x:
                inside = not inside
        j = i
    return inside


def polygon_area(polygon) -> float:
    """
    Shoelace area (absolute value).

    Returns:
        Area; 0.0 for fewer than 3 vertices
    """
    vertices = as_vertex_array(polygon)
    if len(vertices) < 3:
        return 0.0
    xs, ys = vertices[:, 0], vertices[:, 1]
    twice_area = np.dot(xs, np.roll(ys, -1)) - np.dot(np.roll(xs, -1), ys)
    return float(abs(twice_area) / 2.0)


def polygon_perimeter(polygon) -> float:
    """Sum of Euclidean edge lengths around the closed loop."""
    vertices = as_vertex_array(polygon)
    if len(vertices) < 2:
        return 0.0
    edges = np.roll(vertices, -1, axis=0) - vertices
    return float(np.linalg.norm(edges, axis=1).sum())


def segments_intersect(a1: PointLike, a2: PointLike, b1: PointLike, b2: PointLike) -> bool:
    """
    Segment intersection via the 2x2 parametric system.

    Solves a1 + s * (a2 - a1) = b1 + t * (b2 - b1). The determinant is the
    cross product of the two direction vectors.

    Returns:
        True iff 0 <= s <= 1 and 0 <= t <= 1. Parallel or collinear
        segments (determinant == 0) return False.
    """
    p1, p2, p3, p4 = as_point(a1), as_point(a2), as_point(b1), as_point(b2)
    d1x, d1y = p2.x - p1.x, p2.y - p1.y
    d2x, d2y = p4.x - p3.x, p4.y - p3.y

    det = d1x * d2y - d1y * d2x
    if det == 0:
        return False

    ox, oy = p3.x - p1.x, p3.y - p1.y
    s = (ox * d2y - oy * d2x) / det
    t = (ox * d1y - oy * d1x) / det
    return 0.0 <= s <= 1.0 and 0.0 <= t <= 1.0


def polygons_overlap(first, second) -> bool:
    """
    True if the polygons' edges cross or one contains the other.

    Containment is detected by testing the first vertex of each polygon
    against the other, which catches nesting where no edges cross.
    """
    p = as_vertex_array(first)
    q = as_vertex_array(second)
    if len(p) == 0 or len(q) == 0:
        return False

    for i in range(len(p)):
        a1, a2 = p[i], p[(i + 1) % len(p)]
        for j in range(len(q)):
            if segments_intersect(a1, a2, q[j], q[(j + 1) % len(q)]):
                return True

    return point_in_polygon(p[0], q) or point_in_polygon(q[0], p)
