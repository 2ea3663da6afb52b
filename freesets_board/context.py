"""
Round Context Module
====================

Explicit round-scoped state, handed to each component call.

Ownership:
- EnclosureValidator: enclosures, validation message
- MarbleSimulator: marbles, marble_starts, simulation_state, sim timestamps
- RoundEngine: phase, result, attempts

A new context is created at the start of every round; nothing survives
from one round to the next except what the caller carries over.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from freesets_board.config import RoundConfig
from freesets_board.geometry.shapes import Enclosure, Point
from freesets_board.physics.marble import Marble
from freesets_rules import WinConditionResult


class RoundPhase(str, Enum):
    """Round lifecycle phase."""
    DRAWING = "drawing"
    SIMULATING = "simulating"
    RESULTS = "results"


class SimulationState(str, Enum):
    """Marble simulator state."""
    IDLE = "idle"
    RUNNING = "running"


@dataclass
class RoundContext:
    """
    Mutable state of a single round.

    Attributes:
        config: Immutable round configuration
        started_at: Round start (epoch seconds)
        attempts: Times this round configuration has been played
        marbles: Marbles in play
        marble_starts: Spawn positions, index-aligned with marbles
        enclosures: Accepted enclosures in id order
        phase: Lifecycle phase
        simulation_state: idle / running
        sim_started_at / sim_stopped_at: Simulation span
        validation_message: Transient user-facing rejection message
        validation_message_expires_at: When the message auto-clears
        result: Win-condition verdict once scored
    """

    config: RoundConfig
    started_at: float
    attempts: int = 1
    marbles: List[Marble] = field(default_factory=list)
    marble_starts: List[Point] = field(default_factory=list)
    enclosures: List[Enclosure] = field(default_factory=list)
    phase: RoundPhase = RoundPhase.DRAWING
    simulation_state: SimulationState = SimulationState.IDLE
    sim_started_at: Optional[float] = None
    sim_stopped_at: Optional[float] = None
    validation_message: Optional[str] = None
    validation_message_expires_at: Optional[float] = None
    result: Optional[WinConditionResult] = None

    @property
    def enclosure_count(self) -> int:
        return len(self.enclosures)

    @property
    def is_full(self) -> bool:
        """True once every required enclosure has been drawn."""
        return self.enclosure_count >= self.config.required_enclosure_count

    @property
    def is_running(self) -> bool:
        return self.simulation_state is SimulationState.RUNNING

    @property
    def count_set(self) -> List[int]:
        """Marble counts in enclosure id order."""
        return [enclosure.marble_count for enclosure in self.enclosures]

    def positions(self) -> List[Point]:
        """Snapshot of current marble positions."""
        return [marble.position for marble in self.marbles]

    def active_validation_message(self, now: float) -> Optional[str]:
        """Validation message if it has not expired yet."""
        if self.validation_message is None:
            return None
        if self.validation_message_expires_at is not None and now >= self.validation_message_expires_at:
            return None
        return self.validation_message
