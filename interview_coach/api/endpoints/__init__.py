"""API endpoint modules."""

from interview_coach.api.endpoints import interview

__all__ = ["interview"]
