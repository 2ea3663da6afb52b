"""
Poisson Sampler Module
======================

Knuth's multiplication method over an injectable uniform source.

Design:
- RandomSource protocol: anything with random() -> float in [0, 1)
  (numpy.random.Generator satisfies it)
- Rate <= 0 short-circuits to 0 without consuming a draw
- Optional iteration cap, unset in production, lets tests bound a
  pathological source
"""

import math
from typing import Optional, Protocol

import numpy as np


class RandomSource(Protocol):
    """Uniform random source on [0, 1)."""

    def random(self) -> float:
        ...


class SamplerExhaustedError(RuntimeError):
    """Raised when a capped sampler runs out of iterations."""
    pass


def default_random_source(seed: Optional[int] = None) -> RandomSource:
    """Create the production random source."""
    return np.random.default_rng(seed)


class PoissonSampler:
    """
    Draws Poisson-distributed integers.

    Usage:
        sampler = PoissonSampler(np.random.default_rng(42))
        k = sampler.sample(3.0)

    Expected iterations per draw grow with the rate (about rate + 1).
    """

    def __init__(self, random_source: RandomSource, max_iterations: Optional[int] = None):
        """
        Args:
            random_source: Uniform [0, 1) source
            max_iterations: Iteration cap per draw (None = unbounded)
        """
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        self.random_source = random_source
        self.max_iterations = max_iterations
        self._draws = 0

    @property
    def draws(self) -> int:
        """Number of non-trivial samples taken (rate > 0)."""
        return self._draws

    def sample(self, rate: float) -> int:
        """
        Draw one Poisson(rate) value.

        Args:
            rate: Poisson mean

        Returns:
            Non-negative integer; always 0 when rate <= 0

        Raises:
            SamplerExhaustedError: If max_iterations is set and reached
        """
        if rate <= 0:
            return 0

        self._draws += 1
        threshold = math.exp(-rate)
        product = 1.0
        k = 0
        while True:
            k += 1
            product *= float(self.random_source.random())
            if product <= threshold:
                return k - 1
            if self.max_iterations is not None and k >= self.max_iterations:
                raise SamplerExhaustedError(
                    f"Poisson({rate}) did not terminate within {self.max_iterations} iterations"
                )
