"""
Data models and schemas for Interview Coach

Contains Pydantic models for:
- Interview sessions and questions
- Structured answer feedback
- Review report data
"""

from interview_coach.models.interview import (
    InterviewPhase,
    InterviewSession,
    Question,
    SessionSnapshot,
)
from interview_coach.models.feedback import (
    Feedback,
    FeedbackStatus,
    RelevanceFeedback,
    StarMethodFeedback,
    ClarityConfidenceFeedback,
    PaceFeedback,
    FillerWordsFeedback,
)
from interview_coach.models.report import (
    InterviewReport,
    ReportItem,
    ReportSummary,
)

__all__ = [
    # Interview
    "InterviewPhase",
    "InterviewSession",
    "Question",
    "SessionSnapshot",
    # Feedback
    "Feedback",
    "FeedbackStatus",
    "RelevanceFeedback",
    "StarMethodFeedback",
    "ClarityConfidenceFeedback",
    "PaceFeedback",
    "FillerWordsFeedback",
    # Report
    "InterviewReport",
    "ReportItem",
    "ReportSummary",
]
