"""
Analytics Layer
===============

Bounded Context: Counting marbles per enclosure.

Responsibilities:
- Map frozen marble positions to owning enclosures
- Produce populated (immutable) enclosures
- Immutable counting snapshots (PopulationStats)
"""

from freesets_board.analytics.counter import PopulationCounter, PopulationStats

__all__ = [
    "PopulationCounter",
    "PopulationStats",
]
