"""
Marble state.

Marbles are owned by the simulator for the duration of a round; everything
else reads positions through Marble.position or snapshots.
"""

from dataclasses import dataclass

from freesets_board.geometry.shapes import Point


@dataclass
class Marble:
    """
    Mutable marble state.

    Attributes:
        id: Stable identifier for the round
        x, y: Centre position
        vx, vy: Velocity per tick
        radius: Fixed at creation
    """

    id: int
    x: float
    y: float
    vx: float
    vy: float
    radius: float = 10.0

    @property
    def position(self) -> Point:
        return Point(x=self.x, y=self.y)
