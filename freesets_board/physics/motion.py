"""
Marble Motion Module
====================

Spawning and per-tick motion with elastic wall reflection.

Design:
- Functions over Marble values, no simulator state
- Random source injected (anything with random() -> float in [0, 1))
- Marble-marble collisions are not modeled; marbles pass through each other
"""

from typing import List, Tuple

from freesets_board.physics.marble import Marble
from freesets_rules import RandomSource


def spawn_marbles(
    count: int,
    canvas_wh: Tuple[float, float],
    radius: float,
    speed_scale: float,
    random_source: RandomSource,
) -> List[Marble]:
    """
    Create marbles at uniform random positions.

    Positions are drawn over the whole canvas [0, width) x [0, height),
    without insetting by the radius. Velocity components are uniform in
    [-speed_scale, speed_scale).

    Args:
        count: Number of marbles
        canvas_wh: (width, height)
        radius: Marble radius
        speed_scale: Velocity bound per axis
        random_source: Uniform [0, 1) source

    Returns:
        Marbles with ids 0..count-1
    """
    width, height = canvas_wh
    marbles = []
    for marble_id in range(count):
        x = random_source.random() * width
        y = random_source.random() * height
        vx = (random_source.random() - 0.5) * 2 * speed_scale
        vy = (random_source.random() - 0.5) * 2 * speed_scale
        marbles.append(Marble(id=marble_id, x=x, y=y, vx=vx, vy=vy, radius=radius))
    return marbles


def advance(marble: Marble, canvas_wh: Tuple[float, float]) -> None:
    """
    Move a marble by one tick, in place.

    Each axis is handled independently: if the tentative position puts
    the marble's edge at or past a wall, that velocity component flips and
    the position is recomputed from the old position with the flipped
    velocity. One reflection per axis per tick.
    """
    width, height = canvas_wh
    r = marble.radius

    new_x = marble.x + marble.vx
    if new_x - r <= 0 or new_x + r >= width:
        marble.vx = -marble.vx
        new_x = marble.x + marble.vx

    new_y = marble.y + marble.vy
    if new_y - r <= 0 or new_y + r >= height:
        marble.vy = -marble.vy
        new_y = marble.y + marble.vy

    marble.x = new_x
    marble.y = new_y
