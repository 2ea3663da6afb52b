"""
Free Sets CLI - Main entry point.

Runs headless rounds from scenario files and evaluates count sets.
"""

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from freesets_board import (
    CapacityError,
    GameConfig,
    Marble,
    PreconditionError,
    RoundEngineBuilder,
    StrokeRejectedError,
)
from freesets_rules import GameMode, PoissonSampler, WinConditionEvaluator, default_random_source
from freesets_telemetry import ConsoleRecorder, LogEvent, create_logger


DEFAULT_TICKS = 240


def load_yaml_config(config_path: str) -> Dict[str, Any]:
    """
    Load YAML file.

    Args:
        config_path: Path to YAML file

    Returns:
        Parsed mapping

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If YAML is invalid or not a mapping
    """
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {config_path}")
    return data


def parse_marbles(entries: List[Dict[str, Any]], radius: float) -> List[Marble]:
    """Build marbles from scenario entries ({x, y, vx, vy})."""
    return [
        Marble(
            id=index,
            x=float(entry["x"]),
            y=float(entry["y"]),
            vx=float(entry.get("vx", 0.0)),
            vy=float(entry.get("vy", 0.0)),
            radius=radius,
        )
        for index, entry in enumerate(entries)
    ]


def play(
    scenario_path: str,
    config_path: Optional[str] = None,
    ticks: Optional[int] = None,
    seed: Optional[int] = None,
) -> int:
    """
    Play one headless round described by a scenario file.

    Example scenario:
        round_number: 1
        game_mode: sum
        ticks: 240
        strokes:
          - [[50, 50], [250, 50], [250, 250], [50, 250]]
          - [[400, 50], [600, 50], [600, 250], [400, 250]]
        marbles:            # optional, random spawn otherwise
          - {x: 100, y: 100, vx: 3, vy: -2}

    Returns:
        Process exit code (0 = round played and recorded)
    """
    logger = create_logger("cli").bind(scenario=scenario_path)
    scenario = load_yaml_config(scenario_path)

    game_config = GameConfig()
    if config_path:
        try:
            game_config = GameConfig.from_yaml(Path(config_path))
        except (TypeError, ValueError, yaml.YAMLError) as e:
            logger.error(
                event=LogEvent.CONFIG_ERROR,
                message="Invalid game configuration",
                metadata={'path': config_path},
                exc_info=e
            )
            raise ValueError(f"Invalid game config {config_path}: {e}") from e
        logger.info(
            event=LogEvent.CONFIG_LOADED,
            message="Game configuration loaded",
            metadata={'path': config_path}
        )
    if seed is not None:
        game_config = replace(game_config, seed=seed)

    engine = RoundEngineBuilder().with_config(game_config).build()
    round_config = game_config.round_config(
        int(scenario.get("round_number", 1)),
        scenario.get("game_mode"),
    )

    marbles = None
    if "marbles" in scenario:
        marbles = parse_marbles(scenario["marbles"], game_config.marble_radius)
    engine.new_round(round_config, marbles=marbles)

    for stroke in scenario.get("strokes", []):
        try:
            engine.validate_and_add_enclosure(stroke)
        except StrokeRejectedError:
            continue
        except CapacityError:
            break

    try:
        engine.start_simulation()
    except PreconditionError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    frame_count = ticks if ticks is not None else int(scenario.get("ticks", DEFAULT_TICKS))
    for _ in range(frame_count):
        engine.tick()
    engine.stop_simulation()
    engine.score_round()

    recorder = ConsoleRecorder(logger=logger)
    return 0 if recorder.record(engine.round_data()) else 1


def evaluate(counts: List[int], mode: str, seed: Optional[int] = None) -> int:
    """Evaluate a count set and print the verdict as JSON."""
    evaluator = WinConditionEvaluator(PoissonSampler(default_random_source(seed)))
    result = evaluator.evaluate(counts, GameMode.parse(mode))
    print(json.dumps(result.to_dict()))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Free Sets - headless rounds and free-set evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Play a round from a scenario file
  freesets play config/scenarios/round1_two_squares.yaml

  # Override game config and simulation length
  freesets play config/scenarios/round1_two_squares.yaml --config config/game.yaml --ticks 600

  # Check whether a count set is sum-free
  freesets evaluate 3 5

  # Poisson variant, reproducible
  freesets evaluate 3 5 8 --mode innerDist --seed 7
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    play_parser = subparsers.add_parser("play", help="Play a headless round")
    play_parser.add_argument("scenario", help="Path to scenario YAML")
    play_parser.add_argument("--config", help="Path to game config YAML")
    play_parser.add_argument("--ticks", type=int, help="Simulation frames (overrides scenario)")
    play_parser.add_argument("--seed", type=int, help="Random seed")

    eval_parser = subparsers.add_parser("evaluate", help="Evaluate a count set")
    eval_parser.add_argument("counts", nargs="+", type=int, help="Marble counts")
    eval_parser.add_argument(
        "--mode",
        default=GameMode.SUM.value,
        choices=[mode.value for mode in GameMode],
        help="Game mode (default: sum)"
    )
    eval_parser.add_argument("--seed", type=int, help="Random seed")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "play":
            return play(args.scenario, config_path=args.config, ticks=args.ticks, seed=args.seed)
        if args.command == "evaluate":
            return evaluate(args.counts, args.mode, seed=args.seed)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
