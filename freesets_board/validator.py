"""
Enclosure Validator Module
==========================

Turns a finished stroke into an Enclosure, or rejects it.

Design:
- Geometry checks delegated to the kernel
- Mutates only the fields it owns on the RoundContext (enclosures and the
  transient validation message)
- Rejections raise; the context is left unchanged apart from the message
"""

import time
from typing import Callable, Iterable, Optional

import numpy as np

from freesets_board.context import RoundContext
from freesets_board.errors import CapacityError, StrokeRejectedError
from freesets_board.geometry.kernel import polygon_area, polygon_perimeter, polygons_overlap
from freesets_board.geometry.shapes import Enclosure, as_vertex_array


OVERLAP_MESSAGE = "Shapes cannot overlap! Try drawing elsewhere."


class EnclosureValidator:
    """
    Accepts or rejects strokes against a round's existing enclosures.

    Acceptance rules:
    1. The round still needs enclosures (else CapacityError)
    2. The stroke has more than 2 points, all finite
    3. The closed stroke polygon overlaps no existing enclosure

    Usage:
        validator = EnclosureValidator()
        try:
            enclosure = validator.add(context, stroke_points)
        except StrokeRejectedError as e:
            show(context.active_validation_message(time.time()))
    """

    MIN_POINTS = 3

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        message_seconds: float = 3.0,
    ):
        """
        Args:
            clock: Wall-clock source (epoch seconds)
            message_seconds: Lifetime of the overlap message
        """
        self.clock = clock
        self.message_seconds = message_seconds

    @staticmethod
    def find_conflict(vertices, enclosures: Iterable[Enclosure]) -> Optional[Enclosure]:
        """First existing enclosure the polygon overlaps, or None."""
        for enclosure in enclosures:
            if polygons_overlap(vertices, enclosure.vertices):
                return enclosure
        return None

    def add(self, context: RoundContext, stroke) -> Enclosure:
        """
        Validate a stroke and append it as the next enclosure.

        Args:
            context: Current round
            stroke: Ordered canvas points (Points or (x, y) pairs)

        Returns:
            The new Enclosure

        Raises:
            CapacityError: Round already has every required enclosure
            StrokeRejectedError: Too few points, non-finite coordinates,
                                 or overlap/nesting
        """
        if context.is_full:
            raise CapacityError(
                f"Round {context.config.round_number} already has "
                f"{context.config.required_enclosure_count} enclosures"
            )

        vertices = as_vertex_array(stroke)
        if len(vertices) < self.MIN_POINTS:
            raise StrokeRejectedError(
                f"Stroke needs at least {self.MIN_POINTS} points, got {len(vertices)}",
                reason="too_few_points",
            )
        if not np.isfinite(vertices).all():
            raise StrokeRejectedError(
                "Stroke coordinates must be finite",
                reason="non_finite",
            )

        conflict = self.find_conflict(vertices, context.enclosures)
        now = self.clock()
        if conflict is not None:
            context.validation_message = OVERLAP_MESSAGE
            context.validation_message_expires_at = now + self.message_seconds
            raise StrokeRejectedError(
                OVERLAP_MESSAGE,
                reason="overlap",
                conflicting_id=conflict.id,
            )

        enclosure = Enclosure(
            id=len(context.enclosures),
            vertices=vertices,
            area=polygon_area(vertices),
            perimeter=polygon_perimeter(vertices),
            draw_time=now,
        )
        context.enclosures.append(enclosure)
        context.validation_message = None
        context.validation_message_expires_at = None
        return enclosure

