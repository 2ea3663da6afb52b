"""
Common Schema Types
==================

Bounded Context: Shared Data Structures

Types shared by the round telemetry messages.

Design Principles:
- Immutability: frozen=True prevents accidental mutation
- Serialization: to_dict() for JSON export
- Validation: Constructor validates invariants

Types:
- Vertex: Canvas coordinate of a drawn enclosure
- epoch_to_iso: Helper for human-readable timestamps
"""

import math
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Dict


@dataclass(frozen=True)
class Vertex:
    """
    Immutable canvas coordinate.

    Origin is the top-left corner of the canvas.

    Attributes:
        x: Horizontal coordinate (canvas units)
        y: Vertical coordinate (canvas units)

    Invariants:
        - x and y are finite

    Example:
        >>> Vertex(x=100.5, y=200.0).to_dict()
        {'x': 100.5, 'y': 200.0}
    """
    x: float
    y: float

    def __post_init__(self):
        """Validate invariants."""
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Vertex coordinates must be finite, got ({self.x}, {self.y})")

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> 'Vertex':
        """Deserialize from dict.

        Raises:
            ValueError: If required keys missing or invalid values
        """
        try:
            return cls(x=float(data['x']), y=float(data['y']))
        except KeyError as e:
            raise ValueError(f"Missing required Vertex field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid Vertex data: {e}")


def epoch_to_iso(seconds: float) -> str:
    """Format an epoch timestamp (seconds) as ISO 8601 UTC."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat()
