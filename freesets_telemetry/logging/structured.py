"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

One JSON object per log line, on top of the standard logging module.

Design:
- Typed event names (LogEvent) instead of free-form strings
- Bound context: bind() returns a child logger whose fields are merged
  into every entry's metadata (e.g. round_number, scenario)
- Entries are serialized once, in _log(); the handler only passes them on

Example:
    >>> logger = create_logger("engine").bind(round_number=1)
    >>> logger.info(
    ...     event=LogEvent.ENCLOSURE_ACCEPTED,
    ...     message="Enclosure 0 accepted",
    ...     metadata={'enclosure_id': 0, 'area': 40000.0}
    ... )

Output:
    {"timestamp": "2026-10-19T15:30:45.123456+00:00", "level": "INFO",
     "component": "engine", "event": "enclosure.accepted",
     "message": "Enclosure 0 accepted",
     "metadata": {"round_number": 1, "enclosure_id": 0, "area": 40000.0}}
"""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger.

    Attributes:
        component: Component name (e.g., "engine", "cli")
        context: Fields merged into every entry's metadata
        logger: Underlying Python logger (freesets.<component>)
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.component = component
        self.context = dict(context or {})
        self.logger = logging.getLogger(logger_name or f"freesets.{component}")
        self.logger.setLevel(level)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Child logger with extra context; shares the underlying logger."""
        return StructuredLogger(
            component=self.component,
            level=self.logger.level,
            logger_name=self.logger.name,
            context={**self.context, **fields},
        )

    def _entry(
        self,
        level: str,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]],
        exc_info: Optional[BaseException],
    ) -> Dict[str, Any]:
        entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level,
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        merged = {**self.context, **(metadata or {})}
        if merged:
            entry['metadata'] = merged

        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
            }
        return entry

    def _log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        entry = self._entry(logging.getLevelName(level), event, message, metadata, exc_info)
        self.logger.log(level, json.dumps(entry, default=str), exc_info=exc_info)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Log a recoverable problem (rejected stroke, refused start).

        Example:
            >>> logger.warning(
            ...     event=LogEvent.ENCLOSURE_REJECTED,
            ...     message="Shapes cannot overlap! Try drawing elsewhere.",
            ...     metadata={'reason': 'overlap', 'conflicting_id': 0}
            ... )
        """
        self._log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        """
        Log a failure.

        Args:
            event: Typed log event
            message: Human-readable message
            metadata: Additional context
            exc_info: Exception to summarize in the entry
        """
        self._log(logging.ERROR, event, message, metadata, exc_info)


class JSONFormatter(logging.Formatter):
    """Passes StructuredLogger's pre-serialized JSON through unchanged."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(component: str, level: int = logging.INFO) -> StructuredLogger:
    """
    Create a StructuredLogger for a component.

    Example:
        >>> logger = create_logger("engine", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
