"""
Free Sets Board Engine v1.0
===========================

Bounded Context: Partition geometry, marble physics and round orchestration.

Design Philosophy:
- Separation of Concerns: Geometry, Physics, Analytics separated
- Explicit round state: every component works on a RoundContext
- Injectable randomness and clock for deterministic tests

Architecture:

    freesets_board/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── shapes.py      # Point, Enclosure
    │   └── kernel.py      # point_in_polygon, polygons_overlap, ...
    │
    ├── physics/           # Marble state and motion (no state machine)
    │   ├── marble.py      # Marble
    │   └── motion.py      # spawn_marbles, advance
    │
    ├── analytics/         # Counting
    │   └── counter.py     # PopulationCounter, PopulationStats
    │
    ├── config.py          # GameConfig (YAML), RoundConfig
    ├── context.py         # RoundContext, RoundPhase, SimulationState
    ├── validator.py       # EnclosureValidator
    ├── simulator.py       # MarbleSimulator (idle/running)
    ├── errors.py          # EngineError hierarchy
    └── engine.py          # RoundEngine facade + RoundEngineBuilder

Usage:

    from freesets_board import RoundEngineBuilder, GameConfig, RoundConfig

    engine = RoundEngineBuilder().with_config(GameConfig()).build()
    engine.new_round(RoundConfig.for_round(1, engine.game_config))

    engine.validate_and_add_enclosure([(50, 50), (250, 50), (250, 250), (50, 250)])
    engine.validate_and_add_enclosure([(400, 50), (600, 50), (600, 250), (400, 250)])

    engine.start_simulation()
    for _ in range(120):
        engine.tick()
    engine.stop_simulation()

    result = engine.score_round()
    payload = engine.round_data()
"""

# Geometry Layer (immutable, stateless)
from freesets_board.geometry import (
    Point,
    Enclosure,
    point_in_polygon,
    polygon_area,
    polygon_perimeter,
    segments_intersect,
    polygons_overlap,
)

# Physics Layer
from freesets_board.physics import Marble, spawn_marbles, advance

# Analytics Layer
from freesets_board.analytics import PopulationCounter, PopulationStats

# Round state and components
from freesets_board.config import GameConfig, RoundConfig
from freesets_board.context import RoundContext, RoundPhase, SimulationState
from freesets_board.errors import (
    EngineError,
    StrokeRejectedError,
    ValidationError,
    CapacityError,
    PreconditionError,
)
from freesets_board.validator import EnclosureValidator, OVERLAP_MESSAGE
from freesets_board.simulator import MarbleSimulator

# Orchestration
from freesets_board.engine import RoundEngine, RoundEngineBuilder

__all__ = [
    # Geometry
    "Point",
    "Enclosure",
    "point_in_polygon",
    "polygon_area",
    "polygon_perimeter",
    "segments_intersect",
    "polygons_overlap",
    # Physics
    "Marble",
    "spawn_marbles",
    "advance",
    # Analytics
    "PopulationCounter",
    "PopulationStats",
    # Round state
    "GameConfig",
    "RoundConfig",
    "RoundContext",
    "RoundPhase",
    "SimulationState",
    # Errors
    "EngineError",
    "StrokeRejectedError",
    "ValidationError",
    "CapacityError",
    "PreconditionError",
    # Components
    "EnclosureValidator",
    "OVERLAP_MESSAGE",
    "MarbleSimulator",
    "RoundEngine",
    "RoundEngineBuilder",
]

__version__ = "1.0.0"
