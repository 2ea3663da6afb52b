"""
Win-Condition Evaluator Module
==============================

Scores a round's marble count set against the free-set condition of the
chosen game mode.

Design:
- Stateless apart from the injected sampler
- Pairs (i, j) with i <= j over count indices, each element paired with
  itself too
- Immutable WinConditionResult (frozen dataclass)

A count set S is free under mode M when no operator output over its pairs
lands back in S:

    sum:        a + b
    outerDist:  Poisson(a) + Poisson(b)   (two draws per pair)
    innerDist:  Poisson(a + b)            (one draw per pair)
"""

from dataclasses import dataclass
from typing import Dict, Any, FrozenSet, Iterator, List, Optional, Sequence, Tuple

from freesets_rules.modes import GameMode
from freesets_rules.sampler import PoissonSampler, default_random_source


@dataclass(frozen=True)
class WinConditionResult:
    """
    Immutable verdict for one count set.

    Attributes:
        game_mode: Mode the set was scored under
        count_set: Marble counts in enclosure id order (repeats allowed)
        derived_set: Deduplicated operator outputs
        overlap: derived_set ∩ distinct count_set
        is_winner: True when overlap is empty
    """

    game_mode: GameMode
    count_set: Tuple[int, ...]
    derived_set: FrozenSet[int]
    overlap: FrozenSet[int]
    is_winner: bool

    @property
    def distinct_counts(self) -> FrozenSet[int]:
        return frozenset(self.count_set)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict (sets as sorted lists)."""
        return {
            'game_mode': self.game_mode.value,
            'count_set': list(self.count_set),
            'derived_set': sorted(self.derived_set),
            'overlap': sorted(self.overlap),
            'is_winner': self.is_winner,
        }

    def __str__(self) -> str:
        verdict = "free" if self.is_winner else f"not free, overlap={sorted(self.overlap)}"
        return f"{self.game_mode.value}: {list(self.count_set)} -> {verdict}"


def index_pairs(size: int) -> Iterator[Tuple[int, int]]:
    """Yield (i, j) with 0 <= i <= j < size."""
    for i in range(size):
        for j in range(i, size):
            yield i, j


class WinConditionEvaluator:
    """
    Evaluates count sets per game mode.

    Usage:
        evaluator = WinConditionEvaluator()
        result = evaluator.evaluate([3, 5], GameMode.SUM)
        assert result.is_winner

        # Deterministic Poisson modes in tests
        evaluator = WinConditionEvaluator(PoissonSampler(scripted_source))
    """

    def __init__(self, sampler: Optional[PoissonSampler] = None):
        """
        Args:
            sampler: Poisson sampler (default: unseeded numpy generator)
        """
        self.sampler = sampler or PoissonSampler(default_random_source())

    def derive(self, count_set: Sequence[int], game_mode: GameMode) -> List[int]:
        """
        Apply the mode's operator to every index pair.

        Returns:
            Operator outputs in pair order (not deduplicated)
        """
        counts = [int(c) for c in count_set]
        outputs: List[int] = []
        for i, j in index_pairs(len(counts)):
            a, b = counts[i], counts[j]
            if game_mode is GameMode.SUM:
                outputs.append(a + b)
            elif game_mode is GameMode.OUTER_DIST:
                outputs.append(self.sampler.sample(a) + self.sampler.sample(b))
            elif game_mode is GameMode.INNER_DIST:
                outputs.append(self.sampler.sample(a + b))
            else:
                raise ValueError(f"Unsupported game_mode: {game_mode}")
        return outputs

    def evaluate(self, count_set: Sequence[int], game_mode: "GameMode | str") -> WinConditionResult:
        """
        Score a count set.

        Args:
            count_set: Non-negative marble counts, one per enclosure
            game_mode: Mode or mode name

        Returns:
            WinConditionResult

        Raises:
            ValueError: On negative counts or unknown mode
        """
        mode = GameMode.parse(game_mode)
        counts = tuple(int(c) for c in count_set)
        if any(c < 0 for c in counts):
            raise ValueError(f"Marble counts must be non-negative, got {list(counts)}")

        derived = frozenset(self.derive(counts, mode))
        overlap = derived & frozenset(counts)

        return WinConditionResult(
            game_mode=mode,
            count_set=counts,
            derived_set=derived,
            overlap=overlap,
            is_winner=not overlap,
        )
