"""
Geometric Shapes Module
========================

Pure geometric representations - NO state, NO side effects.

Design:
- Immutable shapes (frozen dataclass pattern)
- Vertices stored as read-only Nx2 float arrays
- Enclosure population is written once by producing a new value
"""

import numpy as np
from dataclasses import dataclass, replace
from typing import Iterable, Sequence, Tuple, Union


@dataclass(frozen=True)
class Point:
    """
    Immutable canvas coordinate.

    Attributes:
        x: Horizontal coordinate (canvas units, origin top-left)
        y: Vertical coordinate
    """

    x: float
    y: float

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)


PointLike = Union[Point, Sequence[float]]


def as_point(value: PointLike) -> Point:
    """Coerce a Point or (x, y) pair into a Point."""
    if isinstance(value, Point):
        return value
    return Point(x=float(value[0]), y=float(value[1]))


def as_vertex_array(points: Union[np.ndarray, Iterable[PointLike]]) -> np.ndarray:
    """
    Coerce a polygon into an Nx2 float array.

    Accepts an Nx2 array, or any iterable of Points / (x, y) pairs.

    Raises:
        ValueError: If the result is not Nx2
    """
    if isinstance(points, np.ndarray):
        array = points.astype(float, copy=False)
    else:
        array = np.array(
            [as_point(p).as_tuple() for p in points],
            dtype=float,
        )
    if array.size == 0:
        return array.reshape((0, 2))
    if array.ndim != 2 or array.shape[1] != 2:
        raise ValueError(f"vertices must be Nx2, got shape {array.shape}")
    return array


@dataclass(frozen=True, eq=False)
class Enclosure:
    """
    Immutable closed polygon drawn by the player.

    The last vertex connects back to the first.

    Attributes:
        id: Sequential identifier in draw order (0-based)
        vertices: Nx2 array of (x, y) vertices, N >= 3
        area: Shoelace area
        perimeter: Closed-loop perimeter
        draw_time: Stroke completion time (epoch seconds)
        marble_count: Marbles counted inside after the simulation
    """

    id: int
    vertices: np.ndarray
    area: float
    perimeter: float
    draw_time: float
    marble_count: int = 0

    def __post_init__(self):
        """Normalize and validate vertices."""
        vertices = as_vertex_array(self.vertices)
        if len(vertices) < 3:
            raise ValueError(f"Enclosure must have at least 3 vertices, got {len(vertices)}")
        if self.marble_count < 0:
            raise ValueError(f"marble_count must be >= 0, got {self.marble_count}")

        if vertices is self.vertices and vertices.flags.writeable:
            vertices = vertices.copy()
        vertices.flags.writeable = False
        object.__setattr__(self, 'vertices', vertices)

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(Point(x=float(x), y=float(y)) for x, y in self.vertices)

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    def with_marble_count(self, count: int) -> "Enclosure":
        """Return a copy carrying the counted population."""
        return replace(self, marble_count=count)

    def __repr__(self) -> str:
        return (
            f"Enclosure(id={self.id}, vertices={self.vertex_count}, "
            f"area={self.area:.1f}, marble_count={self.marble_count})"
        )
