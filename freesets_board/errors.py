"""
Engine errors.

All of them are recoverable: the operation is rejected and the round
state is left unchanged.
"""


class EngineError(Exception):
    """Base class for rejected engine operations"""
    pass


class StrokeRejectedError(EngineError):
    """Raised when a stroke has too few points or overlaps an enclosure"""

    def __init__(self, message: str, reason: str, conflicting_id: "int | None" = None):
        super().__init__(message)
        self.reason = reason
        self.conflicting_id = conflicting_id


# Name used by callers that think of it as the validation failure
ValidationError = StrokeRejectedError


class CapacityError(EngineError):
    """Raised when a stroke arrives after every required enclosure is drawn"""
    pass


class PreconditionError(EngineError):
    """Raised when a lifecycle operation is requested out of phase"""
    pass
