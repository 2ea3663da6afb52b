"""
Configuration schema for the Free Sets engine.

GameConfig holds the canvas and physics settings for a whole game and is
loaded from YAML. RoundConfig is derived per round and stays immutable for
that round.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple
import yaml

from freesets_rules import GameMode


@dataclass(frozen=True)
class GameConfig:
    """
    Game-wide configuration.

    Immutable after construction (frozen dataclass).
    """

    # Canvas
    canvas_width: int = 800
    canvas_height: int = 600

    # Marbles
    marble_radius: float = 10.0
    speed_scale: float = 10.0
    initial_marble_count: int = 12
    marble_increment: int = 6  # extra marbles per round

    # Validation feedback
    validation_message_seconds: float = 3.0

    # Rules
    game_mode: str = "sum"
    seed: Optional[int] = None

    def __post_init__(self):
        """Validate game configuration."""
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            raise ValueError(
                f"Canvas must have positive dimensions, got {self.canvas_wh}"
            )
        if self.canvas_width > 4096 or self.canvas_height > 4096:
            raise ValueError(
                f"Canvas dimensions too large (max 4096x4096), got {self.canvas_wh}"
            )

        if self.marble_radius <= 0:
            raise ValueError(f"marble_radius must be > 0, got {self.marble_radius}")
        if 2 * self.marble_radius >= min(self.canvas_width, self.canvas_height):
            raise ValueError(
                f"marble_radius {self.marble_radius} does not fit canvas {self.canvas_wh}"
            )

        if self.speed_scale < 0:
            raise ValueError(f"speed_scale must be >= 0, got {self.speed_scale}")

        if self.initial_marble_count < 1:
            raise ValueError(
                f"initial_marble_count must be >= 1, got {self.initial_marble_count}"
            )
        if self.marble_increment < 0:
            raise ValueError(f"marble_increment must be >= 0, got {self.marble_increment}")

        if self.validation_message_seconds < 0:
            raise ValueError(
                f"validation_message_seconds must be >= 0, got {self.validation_message_seconds}"
            )

        GameMode.parse(self.game_mode)

    @property
    def canvas_wh(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def mode(self) -> GameMode:
        return GameMode.parse(self.game_mode)

    def round_config(self, round_number: int, game_mode: "GameMode | str | None" = None) -> "RoundConfig":
        """Shortcut for RoundConfig.for_round(round_number, self, game_mode)."""
        return RoundConfig.for_round(round_number, self, game_mode)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "GameConfig":
        """
        Load configuration from YAML file.

        Example YAML:
            canvas_width: 800
            canvas_height: 600
            marble_radius: 10
            speed_scale: 10
            initial_marble_count: 12
            marble_increment: 6
            validation_message_seconds: 3.0
            game_mode: "sum"
            seed: null
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Game config must be a mapping, got {type(data).__name__}")

        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown game config keys: {sorted(unknown)}")

        return cls(**data)


@dataclass(frozen=True)
class RoundConfig:
    """
    Per-round configuration supplied at round start.

    Attributes:
        round_number: 1-based round number
        marble_count: Marbles spawned this round
        required_enclosure_count: Enclosures the player must draw
        game_mode: Win-condition variant
    """

    round_number: int
    marble_count: int
    required_enclosure_count: int
    game_mode: GameMode = GameMode.SUM

    def __post_init__(self):
        """Validate round configuration."""
        if self.round_number < 1:
            raise ValueError(f"round_number must be >= 1, got {self.round_number}")
        if self.marble_count < 0:
            raise ValueError(f"marble_count must be >= 0, got {self.marble_count}")
        if self.required_enclosure_count < 1:
            raise ValueError(
                f"required_enclosure_count must be >= 1, got {self.required_enclosure_count}"
            )
        object.__setattr__(self, 'game_mode', GameMode.parse(self.game_mode))

    @classmethod
    def for_round(
        cls,
        round_number: int,
        game_config: GameConfig,
        game_mode: "GameMode | str | None" = None,
    ) -> "RoundConfig":
        """
        Derive the configuration of a given round.

        Round n has n + 1 enclosures and
        initial_marble_count + marble_increment * (n - 1) marbles.
        """
        if round_number < 1:
            raise ValueError(f"round_number must be >= 1, got {round_number}")
        return cls(
            round_number=round_number,
            marble_count=game_config.initial_marble_count
            + game_config.marble_increment * (round_number - 1),
            required_enclosure_count=round_number + 1,
            game_mode=GameMode.parse(game_mode) if game_mode is not None else game_config.mode,
        )
