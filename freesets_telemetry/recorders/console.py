"""
Console Recorder
================

Writes each round payload as one JSON document to a text stream (stdout by
default). Used by the CLI; an external persistence service would subclass
BaseRecorder instead.
"""

import sys
from typing import Optional, TextIO

from .base import BaseRecorder
from ..logging import StructuredLogger, create_logger


class ConsoleRecorder(BaseRecorder):
    """
    Recorder that prints payloads.

    Example:
        >>> recorder = ConsoleRecorder()
        >>> recorder.record(engine.round_data())
        {"schema_version": "1.0", "round_number": 1, ...}
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        super().__init__(name="console", logger=logger or create_logger("recorder"))
        self.stream = stream if stream is not None else sys.stdout

    def _deliver(self, payload: str) -> None:
        self.stream.write(payload + "\n")
        self.stream.flush()
