"""
Round Data Recorders
====================

BaseRecorder for custom transports, ConsoleRecorder for local output.
"""

from .base import BaseRecorder
from .console import ConsoleRecorder

__all__ = [
    'BaseRecorder',
    'ConsoleRecorder',
]
