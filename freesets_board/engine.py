"""
Round Engine Module
===================

Bounded Context: Orchestration of one round of Free Sets.

Design:
- Facade over validator, simulator, counter and evaluator
- Owns the current RoundContext and its phase transitions
- Builder pattern for construction (injectable clock, random source, logger)
- Every rejection is a recoverable EngineError; round state is unchanged

Round lifecycle:

    new_round()                          phase=drawing
      validate_and_add_enclosure() * n
    start_simulation()                   phase=simulating, running
      tick() * frames
    stop_simulation()                    idle
    score_round()                        phase=results
    round_data()                         → external recorder
"""

import time
from typing import Callable, List, Optional, Sequence

from freesets_board.analytics.counter import PopulationCounter
from freesets_board.config import GameConfig, RoundConfig
from freesets_board.context import RoundContext, RoundPhase
from freesets_board.errors import CapacityError, PreconditionError, StrokeRejectedError
from freesets_board.geometry.shapes import Enclosure, Point
from freesets_board.physics.marble import Marble
from freesets_board.simulator import MarbleSimulator
from freesets_board.validator import EnclosureValidator
from freesets_rules import (
    GameMode,
    PoissonSampler,
    RandomSource,
    WinConditionEvaluator,
    WinConditionResult,
    default_random_source,
)
from freesets_telemetry.logging import LogEvent, StructuredLogger, create_logger
from freesets_telemetry.schemas import EnclosureData, MarbleData, RoundData, Vertex


class RoundEngine:
    """
    Runs rounds on a single-threaded frame loop.

    Usage:
        engine = RoundEngineBuilder().with_config(GameConfig()).build()
        engine.new_round(RoundConfig.for_round(1, engine.game_config))

        for stroke in strokes:
            try:
                engine.validate_and_add_enclosure(stroke)
            except StrokeRejectedError:
                pass
            except CapacityError:
                pass

        engine.start_simulation()
        for _ in range(frames):
            engine.tick()
        engine.stop_simulation()

        result = engine.score_round()
        recorder.record(engine.round_data())
    """

    def __init__(
        self,
        game_config: GameConfig,
        validator: EnclosureValidator,
        simulator: MarbleSimulator,
        counter: PopulationCounter,
        evaluator: WinConditionEvaluator,
        logger: StructuredLogger,
        clock: Callable[[], float] = time.time,
    ):
        self.game_config = game_config
        self.validator = validator
        self.simulator = simulator
        self.counter = counter
        self.evaluator = evaluator
        self.logger = logger
        self.clock = clock
        self._context: Optional[RoundContext] = None

    # ------------------------------------------------------------------
    # Round lifecycle
    # ------------------------------------------------------------------

    @property
    def context(self) -> RoundContext:
        """Current round context."""
        if self._context is None:
            raise PreconditionError("No round in progress (call new_round() first)")
        return self._context

    @property
    def has_round(self) -> bool:
        return self._context is not None

    def new_round(
        self,
        round_config: RoundConfig,
        marbles: Optional[Sequence[Marble]] = None,
        attempts: int = 1,
    ) -> RoundContext:
        """
        Reset to a fresh round: new marbles, no enclosures.

        Args:
            round_config: Configuration for this round
            marbles: Pre-built marbles (default: spawned at random)
            attempts: Attempt number to record in telemetry
        """
        context = RoundContext(
            config=round_config,
            started_at=self.clock(),
            attempts=attempts,
        )
        if marbles is None:
            self.simulator.populate(context)
        else:
            self.simulator.load(context, marbles)

        self.counter.reset()
        self._context = context

        self.logger.info(
            event=LogEvent.ROUND_STARTED,
            message=f"Round {round_config.round_number} started",
            metadata={
                'round_number': round_config.round_number,
                'marble_count': len(context.marbles),
                'required_enclosure_count': round_config.required_enclosure_count,
                'game_mode': round_config.game_mode.value,
                'attempts': attempts,
            }
        )
        return context

    def retry_round(self) -> RoundContext:
        """Restart the current round configuration with attempts + 1."""
        previous = self.context
        context = self.new_round(previous.config, attempts=previous.attempts + 1)
        self.logger.info(
            event=LogEvent.ROUND_RETRIED,
            message=f"Round {previous.config.round_number} retried",
            metadata={'round_number': previous.config.round_number, 'attempts': context.attempts}
        )
        return context

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def validate_and_add_enclosure(self, stroke_points) -> Enclosure:
        """
        Accept a finished stroke as the next enclosure.

        Args:
            stroke_points: Canvas-local points collected while the pointer
                           button was held

        Returns:
            The accepted Enclosure

        Raises:
            PreconditionError: Not in the drawing phase
            CapacityError: Every required enclosure is already drawn
            StrokeRejectedError: Too few points or overlapping/nested stroke
        """
        context = self.context
        if context.phase is not RoundPhase.DRAWING:
            raise PreconditionError(f"Strokes are only accepted while drawing (phase={context.phase.value})")

        try:
            enclosure = self.validator.add(context, stroke_points)
        except CapacityError:
            self.logger.info(
                event=LogEvent.ENCLOSURE_CAPACITY_REACHED,
                message="Stroke ignored, all enclosures drawn",
                metadata={'enclosure_count': context.enclosure_count}
            )
            raise
        except StrokeRejectedError as e:
            self.logger.warning(
                event=LogEvent.ENCLOSURE_REJECTED,
                message=str(e),
                metadata={'reason': e.reason, 'conflicting_id': e.conflicting_id}
            )
            raise

        self.logger.info(
            event=LogEvent.ENCLOSURE_ACCEPTED,
            message=f"Enclosure {enclosure.id} accepted",
            metadata={
                'enclosure_id': enclosure.id,
                'vertices': enclosure.vertex_count,
                'area': round(enclosure.area, 2),
                'perimeter': round(enclosure.perimeter, 2),
                'enclosure_count': context.enclosure_count,
            }
        )
        return enclosure

    def validation_message(self) -> Optional[str]:
        """Transient rejection message, None once it has auto-cleared."""
        if self._context is None:
            return None
        return self._context.active_validation_message(self.clock())

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def start_simulation(self, marbles: Optional[Sequence[Marble]] = None) -> None:
        """
        Start the marble simulation.

        Args:
            marbles: Replacement marble set (default: the round's marbles)

        Raises:
            PreconditionError: Fewer enclosures than required, or not drawing
        """
        context = self.context
        required = context.config.required_enclosure_count

        if context.phase is not RoundPhase.DRAWING:
            self._refuse_start(f"Simulation can only start from drawing (phase={context.phase.value})")
        if not context.is_full:
            self._refuse_start(
                f"Please draw {required} enclosures before starting simulation "
                f"({context.enclosure_count} drawn)"
            )

        if marbles is not None:
            self.simulator.load(context, marbles)

        self.simulator.start(context)
        context.phase = RoundPhase.SIMULATING
        self.logger.info(
            event=LogEvent.SIMULATION_STARTED,
            message="Simulation started",
            metadata={'marble_count': len(context.marbles), 'enclosure_count': context.enclosure_count}
        )

    def _refuse_start(self, reason: str) -> None:
        self.logger.warning(
            event=LogEvent.SIMULATION_REFUSED,
            message=reason,
            metadata={'round_number': self.context.config.round_number}
        )
        raise PreconditionError(reason)

    def tick(self) -> List[Point]:
        """Advance one frame; returns marble positions."""
        return self.simulator.tick(self.context)

    def stop_simulation(self) -> List[Point]:
        """Stop the simulation; returns the frozen marble positions."""
        context = self.context
        was_running = context.is_running
        positions = self.simulator.stop(context)
        if was_running:
            self.logger.info(
                event=LogEvent.SIMULATION_STOPPED,
                message="Simulation stopped",
                metadata={
                    'duration_s': round(context.sim_stopped_at - context.sim_started_at, 3),
                }
            )
        return positions

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def count_populations(
        self,
        enclosures: Optional[Sequence[Enclosure]] = None,
        marbles: Optional[Sequence[Marble]] = None,
    ) -> List[Enclosure]:
        """
        Count marbles per enclosure (defaults to the current round).

        Returns:
            New enclosures with marble_count filled, in id order
        """
        if enclosures is None:
            enclosures = self.context.enclosures
        if marbles is None:
            marbles = self.context.marbles
        populated = self.counter.count(enclosures, marbles)
        stats = self.counter.get_stats()
        self.logger.info(
            event=LogEvent.POPULATION_COUNTED,
            message=f"Populations counted: {stats}",
            metadata={
                'count_set': list(stats.count_set),
                'counted': stats.counted,
                'uncounted': len(stats.uncounted),
            }
        )
        return populated

    def evaluate_win_condition(
        self,
        count_set: Sequence[int],
        game_mode: "GameMode | str | None" = None,
    ) -> WinConditionResult:
        """
        Score a count set (mode defaults to the current round's mode).

        Raises:
            ValueError: Negative counts or unknown mode
        """
        if game_mode is None:
            game_mode = self.context.config.game_mode
        result = self.evaluator.evaluate(count_set, game_mode)
        self.logger.info(
            event=LogEvent.WIN_CONDITION_EVALUATED,
            message=str(result),
            metadata=result.to_dict()
        )
        return result

    def score_round(self) -> WinConditionResult:
        """
        Count populations and evaluate the current round.

        Raises:
            PreconditionError: Simulation not run, or still running
        """
        context = self.context
        if context.phase is RoundPhase.RESULTS and context.result is not None:
            return context.result
        if context.phase is not RoundPhase.SIMULATING:
            raise PreconditionError("Round can only be scored after a simulation")
        if context.is_running:
            raise PreconditionError("Stop the simulation before scoring")

        context.enclosures = self.count_populations(context.enclosures, context.marbles)
        context.result = self.evaluate_win_condition(context.count_set, context.config.game_mode)
        context.phase = RoundPhase.RESULTS

        self.logger.info(
            event=LogEvent.ROUND_SCORED,
            message=f"Round {context.config.round_number} {'won' if context.result.is_winner else 'lost'}",
            metadata={'round_number': context.config.round_number, 'is_winner': context.result.is_winner}
        )
        return context.result

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def round_data(self) -> RoundData:
        """Build the payload for the external round-data recorder."""
        context = self.context
        now = self.clock()
        sim_start = context.sim_started_at
        sim_end = context.sim_stopped_at

        marbles = [
            MarbleData.from_positions(
                marble_id=marble.id,
                start=start.as_tuple(),
                end=marble.position.as_tuple(),
                start_time=sim_start if sim_start is not None else context.started_at,
                end_time=sim_end if sim_end is not None else now,
            )
            for marble, start in zip(context.marbles, context.marble_starts)
        ]

        enclosures = [
            EnclosureData(
                id=enclosure.id,
                vertices=[Vertex(x=p.x, y=p.y) for p in enclosure.points],
                area=enclosure.area,
                perimeter=enclosure.perimeter,
                draw_time=enclosure.draw_time,
                marble_count=enclosure.marble_count,
            )
            for enclosure in context.enclosures
        ]

        result = context.result
        return RoundData(
            round_number=context.config.round_number,
            game_mode=context.config.game_mode.value,
            marble_count=len(context.marbles),
            enclosure_count=context.config.required_enclosure_count,
            start_time=context.started_at,
            end_time=now,
            sim_start_time=sim_start,
            sim_end_time=sim_end,
            marbles=marbles,
            enclosures=enclosures,
            marble_counts=context.count_set,
            operation_set=sorted(result.derived_set) if result else [],
            overlapping_elements=sorted(result.overlap) if result else [],
            is_winner=result.is_winner if result else False,
            attempts=context.attempts,
        )


class RoundEngineBuilder:
    """
    Builder for RoundEngine.

    Design:
    - Fluent API for construction
    - Sensible defaults (GameConfig(), numpy generator seeded from config)
    - Deterministic tests via with_random_source() / with_clock()

    Usage:
        engine = (
            RoundEngineBuilder()
            .with_config(GameConfig.from_yaml("config/game.yaml"))
            .with_random_source(np.random.default_rng(7))
            .build()
        )
    """

    def __init__(self):
        self._config: Optional[GameConfig] = None
        self._random_source: Optional[RandomSource] = None
        self._clock: Callable[[], float] = time.time
        self._logger: Optional[StructuredLogger] = None
        self._max_sampler_iterations: Optional[int] = None

    def with_config(self, config: GameConfig) -> "RoundEngineBuilder":
        """Set game configuration."""
        self._config = config
        return self

    def with_random_source(self, random_source: RandomSource) -> "RoundEngineBuilder":
        """Set the uniform source shared by spawning and Poisson sampling."""
        self._random_source = random_source
        return self

    def with_clock(self, clock: Callable[[], float]) -> "RoundEngineBuilder":
        """Set wall-clock source (epoch seconds)."""
        self._clock = clock
        return self

    def with_logger(self, logger: StructuredLogger) -> "RoundEngineBuilder":
        """Set structured logger."""
        self._logger = logger
        return self

    def with_sampler_cap(self, max_iterations: int) -> "RoundEngineBuilder":
        """Cap Poisson sampling iterations (tests only)."""
        self._max_sampler_iterations = max_iterations
        return self

    def build(self) -> RoundEngine:
        """Build the engine."""
        config = self._config or GameConfig()
        random_source = self._random_source or default_random_source(config.seed)
        logger = self._logger or create_logger("engine")

        return RoundEngine(
            game_config=config,
            validator=EnclosureValidator(
                clock=self._clock,
                message_seconds=config.validation_message_seconds,
            ),
            simulator=MarbleSimulator(
                canvas_wh=config.canvas_wh,
                radius=config.marble_radius,
                speed_scale=config.speed_scale,
                random_source=random_source,
                clock=self._clock,
            ),
            counter=PopulationCounter(),
            evaluator=WinConditionEvaluator(
                PoissonSampler(random_source, max_iterations=self._max_sampler_iterations)
            ),
            logger=logger,
            clock=self._clock,
        )
