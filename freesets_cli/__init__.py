"""
Free Sets CLI - Command-line interface for headless rounds.

Usage:
    freesets play config/scenarios/round1_two_squares.yaml
    freesets evaluate 3 5 --mode sum
"""

from .cli import main

__all__ = ["main"]
