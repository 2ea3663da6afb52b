"""
Free Sets Telemetry Package
===========================

Bounded Context: Round telemetry and observability

This package holds everything the engine emits: the round payload handed to
the external round-data recorder, and the structured JSON logs.

Architecture:
- schemas/: Immutable payload structures (RoundData and friends)
- recorders/: Payload delivery (BaseRecorder, ConsoleRecorder)
- logging/: Structured JSON logging

Public API
----------
Schemas:
    Vertex, MarbleData, EnclosureData, RoundData

Recorders:
    BaseRecorder, ConsoleRecorder

Logging:
    LogEvent, StructuredLogger, create_logger

Example:
    >>> from freesets_telemetry import ConsoleRecorder
    >>> recorder = ConsoleRecorder()
    >>> recorder.record(engine.round_data())
"""

from .schemas import (
    SCHEMA_VERSION,
    Vertex,
    MarbleData,
    EnclosureData,
    RoundData,
)
from .recorders import BaseRecorder, ConsoleRecorder
from .logging import LogEvent, StructuredLogger, create_logger

__all__ = [
    # Schemas
    'SCHEMA_VERSION',
    'Vertex',
    'MarbleData',
    'EnclosureData',
    'RoundData',
    # Recorders
    'BaseRecorder',
    'ConsoleRecorder',
    # Logging
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]

__version__ = '1.0.0'
