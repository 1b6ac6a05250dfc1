"""
Report models for Interview Coach

Defines the structure of the end-of-interview feedback report.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from interview_coach.models.feedback import Feedback, FeedbackStatus


NO_ANSWER_TEXT = "No answer recorded."
FEEDBACK_UNAVAILABLE_TEXT = "Feedback could not be generated for this answer."


class ReportItem(BaseModel):
    """Report entry for a single question."""

    question_id: int
    question_text: str
    answer_text: str
    audio_duration: float | None = None
    words_per_minute: int | None = None

    feedback: Feedback | None = None
    feedback_status: FeedbackStatus
    unavailable_reason: str | None = None


class ReportSummary(BaseModel):
    """Averages across the questions that received feedback."""

    questions_total: int
    questions_answered: int
    feedback_ready: int
    feedback_failed: int

    avg_relevance: float | None = None
    avg_star_method: float | None = None
    avg_clarity_confidence: float | None = None
    avg_words_per_minute: float | None = None
    total_filler_words: int = 0


class InterviewReport(BaseModel):
    """Complete feedback report for a reviewed interview."""

    session_id: str
    generated_at: datetime = Field(default_factory=datetime.utcnow)
    job_description: str = ""

    items: list[ReportItem] = Field(default_factory=list)
    summary: ReportSummary
