"""
Marble Simulator Module
=======================

State machine driving the marbles: idle → running → idle.

Design:
- One tick per frame callback, O(marble_count), independent of enclosures
- Stops only on an explicit stop() call; no convergence or time limit
- Works on the RoundContext fields it owns (marbles, marble_starts,
  simulation_state, sim timestamps)
- Out-of-state calls are no-ops, never errors
"""

import time
from typing import Callable, List, Optional, Sequence, Tuple

from freesets_board.context import RoundContext, SimulationState
from freesets_board.geometry.shapes import Point
from freesets_board.physics.marble import Marble
from freesets_board.physics.motion import advance, spawn_marbles
from freesets_rules import RandomSource


class MarbleSimulator:
    """
    Marble physics for one canvas.

    Usage:
        simulator = MarbleSimulator((800, 600), radius=10, speed_scale=10,
                                    random_source=np.random.default_rng())
        simulator.populate(context)      # idle, round start
        simulator.start(context)         # idle -> running
        while not player_pressed_stop:
            simulator.tick(context)      # once per frame
        frozen = simulator.stop(context) # running -> idle
    """

    def __init__(
        self,
        canvas_wh: Tuple[float, float],
        radius: float,
        speed_scale: float,
        random_source: RandomSource,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            canvas_wh: (width, height) of the canvas
            radius: Marble radius
            speed_scale: Velocity bound per axis
            random_source: Uniform [0, 1) source for spawning
            clock: Wall-clock source (epoch seconds)
        """
        width, height = canvas_wh
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas_wh must be positive, got {canvas_wh}")
        self.canvas_wh = canvas_wh
        self.radius = radius
        self.speed_scale = speed_scale
        self.random_source = random_source
        self.clock = clock

    def populate(self, context: RoundContext, count: Optional[int] = None) -> List[Marble]:
        """
        Spawn the round's marbles and remember their start positions.

        Args:
            context: Round in idle state
            count: Marble count (default: context.config.marble_count)
        """
        marbles = spawn_marbles(
            count=context.config.marble_count if count is None else count,
            canvas_wh=self.canvas_wh,
            radius=self.radius,
            speed_scale=self.speed_scale,
            random_source=self.random_source,
        )
        self.load(context, marbles)
        return marbles

    def load(self, context: RoundContext, marbles: Sequence[Marble]) -> None:
        """Install externally supplied marbles as the round's marble set."""
        context.marbles = list(marbles)
        context.marble_starts = [marble.position for marble in context.marbles]
        context.simulation_state = SimulationState.IDLE

    def start(self, context: RoundContext) -> bool:
        """
        Transition idle -> running.

        Returns:
            True if the state changed, False if already running
        """
        if context.is_running:
            return False
        context.simulation_state = SimulationState.RUNNING
        context.sim_started_at = self.clock()
        context.sim_stopped_at = None
        return True

    def tick(self, context: RoundContext) -> List[Point]:
        """
        Advance every marble by one frame while running.

        Returns:
            Marble positions after the tick (unchanged when idle)
        """
        if context.is_running:
            for marble in context.marbles:
                advance(marble, self.canvas_wh)
        return context.positions()

    def stop(self, context: RoundContext) -> List[Point]:
        """
        Transition running -> idle and freeze positions.

        Returns:
            Frozen marble positions
        """
        if context.is_running:
            context.simulation_state = SimulationState.IDLE
            context.sim_stopped_at = self.clock()
        return context.positions()
