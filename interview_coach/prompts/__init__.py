"""
AI prompt templates for Interview Coach

Contains structured prompts for:
- Question generation
- Answer feedback
"""

from interview_coach.prompts.coach import CoachPrompts

__all__ = [
    "CoachPrompts",
]
