"""
Round Telemetry Schemas
=======================

Immutable message types produced at the end of a round.

Types:
    Vertex
    MarbleData, EnclosureData, RoundData
"""

from .common import Vertex, epoch_to_iso
from .round_data import (
    SCHEMA_VERSION,
    MarbleData,
    EnclosureData,
    RoundData,
)

__all__ = [
    'SCHEMA_VERSION',
    'Vertex',
    'epoch_to_iso',
    'MarbleData',
    'EnclosureData',
    'RoundData',
]
