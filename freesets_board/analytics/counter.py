"""
Population Counter Module
=========================

Assigns frozen marbles to the enclosures that contain them.

Design:
- Stateless apart from the last snapshot
- Enclosures are immutable; counting produces new Enclosure values
- Each marble belongs to at most one enclosure (first by ascending id)
- Marbles outside every enclosure are simply not counted
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from freesets_board.geometry.kernel import point_in_polygon
from freesets_board.geometry.shapes import Enclosure, PointLike, as_point
from freesets_board.physics.marble import Marble


@dataclass(frozen=True)
class PopulationStats:
    """
    Immutable counting snapshot.

    Attributes:
        count_set: Marble counts in enclosure id order
        owners: {marble_id: enclosure_id} for counted marbles
        uncounted: Ids of marbles outside every enclosure
    """

    count_set: Tuple[int, ...]
    owners: Dict[int, int] = field(default_factory=dict)
    uncounted: Tuple[int, ...] = ()

    @property
    def counted(self) -> int:
        return len(self.owners)

    def __str__(self) -> str:
        return f"counts={list(self.count_set)}, outside={len(self.uncounted)}"


class PopulationCounter:
    """
    Counts marbles per enclosure.

    Usage:
        counter = PopulationCounter()
        enclosures = counter.count(context.enclosures, context.marbles)
        stats = counter.get_stats()
    """

    def __init__(self):
        self._last_stats: Optional[PopulationStats] = None

    @staticmethod
    def owner_of(position: PointLike, enclosures: Sequence[Enclosure]) -> Optional[Enclosure]:
        """First enclosure (by ascending id) containing the position."""
        point = as_point(position)
        for enclosure in sorted(enclosures, key=lambda e: e.id):
            if point_in_polygon(point, enclosure.vertices):
                return enclosure
        return None

    def count(self, enclosures: Sequence[Enclosure], marbles: Sequence[Marble]) -> List[Enclosure]:
        """
        Populate marble counts.

        Args:
            enclosures: Round enclosures
            marbles: Frozen marbles

        Returns:
            New enclosures in id order with marble_count filled
        """
        ordered = sorted(enclosures, key=lambda e: e.id)
        counts = {enclosure.id: 0 for enclosure in ordered}
        owners: Dict[int, int] = {}
        uncounted = []

        for marble in marbles:
            owner = self.owner_of(marble.position, ordered)
            if owner is None:
                uncounted.append(marble.id)
                continue
            counts[owner.id] += 1
            owners[marble.id] = owner.id

        populated = [enclosure.with_marble_count(counts[enclosure.id]) for enclosure in ordered]
        self._last_stats = PopulationStats(
            count_set=tuple(enclosure.marble_count for enclosure in populated),
            owners=owners,
            uncounted=tuple(uncounted),
        )
        return populated

    def get_stats(self) -> Optional[PopulationStats]:
        """Snapshot of the last count (None before any count)."""
        return self._last_stats

    def reset(self) -> None:
        self._last_stats = None
