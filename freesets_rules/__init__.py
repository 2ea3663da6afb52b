"""
Free Sets Rules
===============

Bounded Context: Win-condition algebra.

Responsibilities:
- Game modes and their pair operators
- Poisson sampling over an injectable random source
- Free-set verdicts (WinConditionResult)

Usage:

    from freesets_rules import WinConditionEvaluator, GameMode

    result = WinConditionEvaluator().evaluate([1, 2, 4], GameMode.SUM)
    result.overlap     # frozenset({2, 4})
    result.is_winner   # False
"""

from freesets_rules.modes import GameMode
from freesets_rules.sampler import (
    RandomSource,
    PoissonSampler,
    SamplerExhaustedError,
    default_random_source,
)
from freesets_rules.evaluator import (
    WinConditionEvaluator,
    WinConditionResult,
    index_pairs,
)

__all__ = [
    "GameMode",
    "RandomSource",
    "PoissonSampler",
    "SamplerExhaustedError",
    "default_random_source",
    "WinConditionEvaluator",
    "WinConditionResult",
    "index_pairs",
]
