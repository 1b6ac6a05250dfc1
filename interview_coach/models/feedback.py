"""
Feedback models for Interview Coach

Defines the structured, per-answer coaching feedback returned by the
analysis service. Field names are snake_case in Python and camelCase
on the wire, matching the JSON the service is asked to produce.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FeedbackStatus(str, Enum):
    """Lifecycle of a question's feedback request."""

    NOT_REQUESTED = "not_requested"  # No answer, or pipeline not reached yet
    PENDING = "pending"  # Queued in the feedback pipeline
    READY = "ready"  # Feedback attached
    FAILED = "failed"  # Analysis call failed, feedback left absent


class FeedbackModel(BaseModel):
    """Base for wire-facing feedback models (camelCase aliases)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class RelevanceFeedback(FeedbackModel):
    """How well the answer addressed the question."""

    score: int = Field(..., ge=1, le=5)
    feedback: str


class StarMethodFeedback(FeedbackModel):
    """STAR-method coverage (Situation, Task, Action, Result)."""

    score: int = Field(..., ge=1, le=5)
    feedback: str
    situation: bool
    task: bool
    action: bool
    result: bool

    @property
    def components_covered(self) -> int:
        return sum([self.situation, self.task, self.action, self.result])


class ClarityConfidenceFeedback(FeedbackModel):
    """Clarity of delivery plus confident vs passive word choice."""

    score: int = Field(..., ge=1, le=5)
    feedback: str
    power_words: list[str] = Field(default_factory=list)
    passive_words: list[str] = Field(default_factory=list)


class PaceFeedback(FeedbackModel):
    """Speaking rate assessment."""

    wpm: float = Field(..., ge=0)
    feedback: str


class FillerWordsFeedback(FeedbackModel):
    """Disfluency tokens found in the answer."""

    count: int = Field(..., ge=0)
    words: list[str] = Field(default_factory=list)
    feedback: str


class Feedback(FeedbackModel):
    """Complete feedback for one answered question."""

    relevance: RelevanceFeedback
    star_method: StarMethodFeedback
    clarity_confidence: ClarityConfidenceFeedback
    pace: PaceFeedback
    filler_words: FillerWordsFeedback
    overall_feedback: str
