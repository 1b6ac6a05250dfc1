"""
Error taxonomy for Interview Coach.

Every custom exception derives from CoachError, which carries a short
machine-readable code alongside the human-readable message.
"""

from typing import Any


class CoachError(Exception):
    """Base class for all Interview Coach errors."""

    code = "COACH_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(f"[{self.code}] {message}")


class AnalysisFailure(CoachError):
    """Upstream analysis call failed, or its response did not match the schema."""

    code = "ANALYSIS_FAILURE"


class CapabilityUnavailable(CoachError):
    """Speech capture or playback engine is absent in this runtime."""

    code = "CAPABILITY_UNAVAILABLE"


class PreconditionViolation(CoachError):
    """A caller broke a contract (e.g. feedback requested for an empty answer)."""

    code = "PRECONDITION_VIOLATION"


class StateTransitionError(CoachError):
    """Raised when an invalid state transition or action is attempted."""

    code = "INVALID_TRANSITION"
