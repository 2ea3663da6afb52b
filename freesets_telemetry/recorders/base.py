"""
Base Round Recorder
===================

Bounded Context: Round Data Delivery

This module provides the abstract base class for round-data recorders.

Design:
- format_message(): RoundData → JSON-compatible dict
- record(): format + deliver + log, never raises on delivery failure
- Structured logging integration

Architecture:
    BaseRecorder (abstract)
        ↓
    ConsoleRecorder (concrete, ships with the repo)
    <external persistence service> (plugs in by subclassing)

Responsibilities:
- Serializing the payload
- Delivery bookkeeping and error logging
- NOT responsible for: storage, retry, authentication
"""

import json
from abc import ABC, abstractmethod
from typing import Dict, Any

from ..logging import StructuredLogger, LogEvent
from ..schemas import RoundData


class BaseRecorder(ABC):
    """
    Abstract base class for round-data recorders.

    Subclasses implement _deliver() for their transport.

    Attributes:
        name: Recorder name used in log metadata
        logger: Structured logger instance
    """

    def __init__(self, name: str, logger: StructuredLogger):
        """
        Args:
            name: Recorder identifier
            logger: Structured logger for observability
        """
        self.name = name
        self.logger = logger
        self._record_count = 0
        self._failure_count = 0

    def format_message(self, round_data: RoundData) -> Dict[str, Any]:
        """Format the payload for delivery."""
        return round_data.to_dict()

    @abstractmethod
    def _deliver(self, payload: str) -> None:
        """
        Deliver a serialized payload.

        Raises:
            OSError: On transport failure (logged by record())
        """
        raise NotImplementedError("Subclasses must implement _deliver()")

    def record(self, round_data: RoundData) -> bool:
        """
        Serialize and deliver a round payload.

        Args:
            round_data: Scored round

        Returns:
            True if delivered, False otherwise
        """
        try:
            payload = json.dumps(self.format_message(round_data))
        except (TypeError, ValueError) as e:
            self._failure_count += 1
            self.logger.error(
                event=LogEvent.SERIALIZATION_ERROR,
                message="Failed to serialize round data",
                exc_info=e,
                metadata={'recorder': self.name, 'round_number': round_data.round_number}
            )
            return False

        try:
            self._deliver(payload)
        except OSError as e:
            self._failure_count += 1
            self.logger.error(
                event=LogEvent.RECORDER_FAILED,
                message="Failed to deliver round data",
                exc_info=e,
                metadata={'recorder': self.name, 'round_number': round_data.round_number}
            )
            return False

        self._record_count += 1
        self.logger.info(
            event=LogEvent.RECORDER_SUCCESS,
            message="Recorded round data",
            metadata={
                'recorder': self.name,
                'round_number': round_data.round_number,
                'record_count': self._record_count,
                'bytes': len(payload),
            }
        )
        return True

    def get_stats(self) -> Dict[str, Any]:
        """
        Get recorder statistics.

        Example:
            >>> stats = recorder.get_stats()
            >>> print(f"Recorded {stats['record_count']} rounds")
        """
        return {
            'recorder': self.name,
            'record_count': self._record_count,
            'failure_count': self._failure_count,
        }
