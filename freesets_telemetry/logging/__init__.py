"""
Structured Logging for Free Sets
================================

Bounded Context: Observability

JSON-structured logging shared by the engine, the recorders and the CLI.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from freesets_telemetry.logging import create_logger, LogEvent
    >>> logger = create_logger("engine")
    >>> logger.info(
    ...     event=LogEvent.ROUND_STARTED,
    ...     message="Round 1 started",
    ...     metadata={'round_number': 1, 'marble_count': 12}
    ... )
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
