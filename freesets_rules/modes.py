"""
Game modes and their pair operators.
"""

from enum import Enum


class GameMode(str, Enum):
    """Win-condition variant chosen at game start."""
    SUM = "sum"                # a + b
    OUTER_DIST = "outerDist"   # Poisson(a) + Poisson(b)
    INNER_DIST = "innerDist"   # Poisson(a + b)

    @property
    def operation_label(self) -> str:
        """Short notation of the pair operator."""
        return _OPERATION_LABELS[self]

    @property
    def is_randomized(self) -> bool:
        return self is not GameMode.SUM

    @classmethod
    def parse(cls, value: "str | GameMode") -> "GameMode":
        """
        Parse a mode name.

        Raises:
            ValueError: If value is not a known mode
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = [mode.value for mode in cls]
            raise ValueError(f"Invalid game_mode: {value}. Must be one of {valid}") from None


_OPERATION_LABELS = {
    GameMode.SUM: "S + S",
    GameMode.OUTER_DIST: "rpois(a) + rpois(b) for all a,b in S",
    GameMode.INNER_DIST: "rpois(a + b) for all a,b in S",
}
