"""
Interview session and state models for Interview Coach
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from interview_coach.models.feedback import Feedback, FeedbackStatus


class InterviewPhase(str, Enum):
    """Interview state machine states."""

    NOT_STARTED = "not_started"  # Landing, nothing chosen yet
    GETTING_JOB_DESC = "getting_job_desc"  # User pasting a job description
    GENERATING_QUESTIONS = "generating_questions"  # Waiting on question list
    INTERVIEWING = "interviewing"  # Asking and recording answers
    AWAITING_FEEDBACK = "awaiting_feedback"  # Feedback pipeline running
    REVIEWING = "reviewing"  # Report ready


class Question(BaseModel):
    """One interview prompt and the lifecycle of its answer and feedback."""

    id: int = Field(..., ge=0)
    text: str

    # Answer (set together, exactly once)
    answer: str | None = None
    audio_duration: float | None = Field(
        default=None, ge=0,
        description="Seconds between start and stop of the answer's capture"
    )

    # Feedback (set at most once, after all answers are collected)
    feedback: Feedback | None = None
    feedback_status: FeedbackStatus = FeedbackStatus.NOT_REQUESTED

    @model_validator(mode="after")
    def _answer_and_duration_together(self) -> "Question":
        if (self.answer is None) != (self.audio_duration is None):
            raise ValueError("answer and audio_duration must be set together")
        return self

    @property
    def is_answered(self) -> bool:
        """True when a non-empty answer was recorded."""
        return bool(self.answer and self.answer.strip())


class InterviewSession(BaseModel):
    """Complete interview session state."""

    # Identification (regenerated on every reset)
    session_id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # State
    phase: InterviewPhase = InterviewPhase.NOT_STARTED
    job_description: str = ""

    # Questions & answers
    questions: list[Question] = Field(default_factory=list)
    current_index: int = Field(default=0, ge=0)

    # One-time notice shown to the user (e.g. question fallback)
    notice: str | None = None

    def get_current_question(self) -> Question | None:
        """Get the question being asked, if interviewing."""
        if self.phase == InterviewPhase.INTERVIEWING and self.current_index < len(self.questions):
            return self.questions[self.current_index]
        return None

    def is_last_question(self) -> bool:
        return self.current_index >= len(self.questions) - 1

    def answered_questions(self) -> list[Question]:
        """Questions with a non-empty answer, in id order."""
        return sorted(
            (q for q in self.questions if q.is_answered),
            key=lambda q: q.id,
        )


class SessionSnapshot(BaseModel):
    """Read-only projection of orchestrator state for presentation."""

    phase: InterviewPhase
    job_description: str
    questions: list[Question]
    current_index: int
    is_listening: bool
    is_speaking: bool
    final_transcript: str
    interim_transcript: str
    notice: str | None = None
    capture_available: bool
    playback_available: bool
