"""
Exceptions raised at the edges of the tracker.

The valuation core itself never raises for incomplete input; these cover
record conversion and misconfigured aggregation.
"""


class TrackerError(Exception):
    """Base exception for all tracker errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code


class PositionRecordError(TrackerError):
    """Raised when a stored row or form payload cannot become a Position."""

    def __init__(self, field: str, value, reason: str = "unparsable", code: str = "INVALID_RECORD"):
        super().__init__(f"Invalid value for {field!r}: {value!r} ({reason})", code)
        self.field = field
        self.value = value


class InvalidLimitError(TrackerError, ValueError):
    """Raised when the guarantee ceiling is not a positive amount."""

    def __init__(self, limit, code: str = "INVALID_LIMIT"):
        super().__init__(f"Guarantee limit must be positive, got {limit!r}", code)
        self.limit = limit
