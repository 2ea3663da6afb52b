"""
Round Data Message Schema
=========================

Bounded Context: Round Telemetry Data Structures

This module defines the payload handed to the external round-data recorder
once a round has been scored.

Design:
- MarbleData: Start/end position of one marble during the simulation
- EnclosureData: Geometry and population of one drawn enclosure
- RoundData: Complete message with the verdict and all of the above

Message Flow:
    RoundEngine.round_data() → RoundData → Recorder → (external persistence)
"""

import math
from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional

from .common import Vertex, epoch_to_iso

SCHEMA_VERSION = "1.0"

GAME_MODES = ("sum", "outerDist", "innerDist")


@dataclass(frozen=True)
class MarbleData:
    """
    Trajectory summary of a single marble.

    Attributes:
        id: Marble identifier (stable for the round)
        start_x, start_y: Spawn position
        end_x, end_y: Frozen position when the simulation stopped
        start_time: Simulation start (epoch seconds)
        end_time: Simulation stop (epoch seconds)
        total_distance: Straight-line distance from start to end position

    Example:
        >>> MarbleData.from_positions(0, (10.0, 10.0), (13.0, 14.0), 1.0, 2.0).total_distance
        5.0
    """
    id: int
    start_x: float
    start_y: float
    end_x: float
    end_y: float
    start_time: float
    end_time: float
    total_distance: float

    def __post_init__(self):
        """Validate invariants."""
        if self.id < 0:
            raise ValueError(f"Marble id must be >= 0, got {self.id}")
        if self.total_distance < 0:
            raise ValueError(f"total_distance must be >= 0, got {self.total_distance}")

    @classmethod
    def from_positions(
        cls,
        marble_id: int,
        start: tuple,
        end: tuple,
        start_time: float,
        end_time: float,
    ) -> 'MarbleData':
        """Build from start/end (x, y) pairs, computing the distance."""
        distance = math.hypot(end[0] - start[0], end[1] - start[1])
        return cls(
            id=marble_id,
            start_x=float(start[0]),
            start_y=float(start[1]),
            end_x=float(end[0]),
            end_y=float(end[1]),
            start_time=start_time,
            end_time=end_time,
            total_distance=distance,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'id': self.id,
            'start_x': self.start_x,
            'start_y': self.start_y,
            'end_x': self.end_x,
            'end_y': self.end_y,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'total_distance': self.total_distance,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MarbleData':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                id=int(data['id']),
                start_x=float(data['start_x']),
                start_y=float(data['start_y']),
                end_x=float(data['end_x']),
                end_y=float(data['end_y']),
                start_time=float(data['start_time']),
                end_time=float(data['end_time']),
                total_distance=float(data['total_distance']),
            )
        except KeyError as e:
            raise ValueError(f"Missing required MarbleData field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid MarbleData data: {e}")


@dataclass(frozen=True)
class EnclosureData:
    """
    Geometry and population of one enclosure.

    Attributes:
        id: Enclosure identifier (draw order, 0-based)
        vertices: Polygon vertices in draw order (implicitly closed)
        area: Shoelace area
        perimeter: Closed-loop perimeter
        draw_time: Stroke completion time (epoch seconds)
        marble_count: Marbles counted inside after the simulation

    Invariants:
        - at least 3 vertices
        - marble_count >= 0
    """
    id: int
    vertices: List[Vertex]
    area: float
    perimeter: float
    draw_time: float
    marble_count: int = 0

    def __post_init__(self):
        """Validate invariants."""
        if len(self.vertices) < 3:
            raise ValueError(
                f"Enclosure {self.id} must have at least 3 vertices, got {len(self.vertices)}"
            )
        if self.marble_count < 0:
            raise ValueError(f"marble_count must be >= 0, got {self.marble_count}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'id': self.id,
            'vertices': [vertex.to_dict() for vertex in self.vertices],
            'area': self.area,
            'perimeter': self.perimeter,
            'draw_time': self.draw_time,
            'marble_count': self.marble_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EnclosureData':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            return cls(
                id=int(data['id']),
                vertices=[Vertex.from_dict(v) for v in data['vertices']],
                area=float(data['area']),
                perimeter=float(data['perimeter']),
                draw_time=float(data['draw_time']),
                marble_count=int(data.get('marble_count', 0)),
            )
        except KeyError as e:
            raise ValueError(f"Missing required EnclosureData field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid EnclosureData data: {e}")


@dataclass(frozen=True)
class RoundData:
    """
    Complete round payload for the external recorder.

    Attributes:
        round_number: 1-based round number
        game_mode: "sum", "outerDist" or "innerDist"
        marble_count: Marbles in play this round
        enclosure_count: Enclosures required this round
        start_time / end_time: Round wall-clock span (epoch seconds)
        sim_start_time / sim_end_time: Simulation span (None if never run)
        marbles: Per-marble trajectory summaries
        enclosures: Per-enclosure geometry and population
        marble_counts: Count set in enclosure id order
        operation_set: Derived set (sorted)
        overlapping_elements: Derived set ∩ count set (sorted)
        is_winner: True when overlapping_elements is empty
        attempts: How many times this round configuration was played
        schema_version: Payload schema version

    Example:
        >>> data = RoundData(round_number=1, game_mode="sum", marble_count=12,
        ...                  enclosure_count=2, start_time=0.0, end_time=1.0,
        ...                  marble_counts=[3, 5], operation_set=[6, 8, 10],
        ...                  overlapping_elements=[], is_winner=True)
    """
    round_number: int
    game_mode: str
    marble_count: int
    enclosure_count: int
    start_time: float
    end_time: float
    sim_start_time: Optional[float] = None
    sim_end_time: Optional[float] = None
    marbles: List[MarbleData] = field(default_factory=list)
    enclosures: List[EnclosureData] = field(default_factory=list)
    marble_counts: List[int] = field(default_factory=list)
    operation_set: List[int] = field(default_factory=list)
    overlapping_elements: List[int] = field(default_factory=list)
    is_winner: bool = False
    attempts: int = 1
    schema_version: str = SCHEMA_VERSION

    def __post_init__(self):
        """Validate invariants."""
        if self.round_number < 1:
            raise ValueError(f"round_number must be >= 1, got {self.round_number}")
        if self.game_mode not in GAME_MODES:
            raise ValueError(f"Invalid game_mode: {self.game_mode}. Must be one of {GAME_MODES}")
        if self.attempts < 1:
            raise ValueError(f"attempts must be >= 1, got {self.attempts}")
        if self.is_winner and self.overlapping_elements:
            raise ValueError("A winning round cannot have overlapping elements")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'schema_version': self.schema_version,
            'round_number': self.round_number,
            'game_mode': self.game_mode,
            'marble_count': self.marble_count,
            'enclosure_count': self.enclosure_count,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'sim_start_time': self.sim_start_time,
            'sim_end_time': self.sim_end_time,
            'marbles': [marble.to_dict() for marble in self.marbles],
            'enclosures': [enclosure.to_dict() for enclosure in self.enclosures],
            'marble_counts': list(self.marble_counts),
            'operation_set': list(self.operation_set),
            'overlapping_elements': list(self.overlapping_elements),
            'is_winner': self.is_winner,
            'attempts': self.attempts,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoundData':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            sim_start = data.get('sim_start_time')
            sim_end = data.get('sim_end_time')
            return cls(
                schema_version=str(data.get('schema_version', SCHEMA_VERSION)),
                round_number=int(data['round_number']),
                game_mode=str(data['game_mode']),
                marble_count=int(data['marble_count']),
                enclosure_count=int(data['enclosure_count']),
                start_time=float(data['start_time']),
                end_time=float(data['end_time']),
                sim_start_time=float(sim_start) if sim_start is not None else None,
                sim_end_time=float(sim_end) if sim_end is not None else None,
                marbles=[MarbleData.from_dict(m) for m in data.get('marbles', [])],
                enclosures=[EnclosureData.from_dict(e) for e in data.get('enclosures', [])],
                marble_counts=[int(c) for c in data.get('marble_counts', [])],
                operation_set=[int(v) for v in data.get('operation_set', [])],
                overlapping_elements=[int(v) for v in data.get('overlapping_elements', [])],
                is_winner=bool(data.get('is_winner', False)),
                attempts=int(data.get('attempts', 1)),
            )
        except KeyError as e:
            raise ValueError(f"Missing required RoundData field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid RoundData data: {e}")

    @property
    def simulation_seconds(self) -> Optional[float]:
        """Simulation wall-clock duration, None if the simulation never ran."""
        if self.sim_start_time is None or self.sim_end_time is None:
            return None
        return self.sim_end_time - self.sim_start_time

    def __str__(self) -> str:
        """Human-readable one-line summary."""
        verdict = "WIN" if self.is_winner else "LOSE"
        return (
            f"Round {self.round_number} ({self.game_mode}) @ {epoch_to_iso(self.start_time)}: "
            f"counts={self.marble_counts} -> {verdict}"
        )
