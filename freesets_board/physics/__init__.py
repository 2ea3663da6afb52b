"""
Physics Layer
=============

Bounded Context: Marble state and motion.

Responsibilities:
- Marble representation
- Random spawning inside the canvas
- One-tick motion with wall reflection
- NO state machine (see freesets_board.simulator), NO enclosures
"""

from freesets_board.physics.marble import Marble
from freesets_board.physics.motion import spawn_marbles, advance

__all__ = [
    "Marble",
    "spawn_marbles",
    "advance",
]
