"""
Report Builder for Interview Coach

Compiles the reviewed session into a per-question feedback report with
a short summary across all answers.
"""

import logging

from interview_coach.core.errors import StateTransitionError
from interview_coach.core.pace import DEFAULT_WORDS_PER_MINUTE, words_per_minute
from interview_coach.models.feedback import FeedbackStatus
from interview_coach.models.interview import InterviewPhase, InterviewSession
from interview_coach.models.report import (
    FEEDBACK_UNAVAILABLE_TEXT,
    NO_ANSWER_TEXT,
    InterviewReport,
    ReportItem,
    ReportSummary,
)

logger = logging.getLogger(__name__)


def _average(values: list[float]) -> float | None:
    if not values:
        return None
    return round(sum(values) / len(values), 2)


class ReportBuilder:
    """Builds an InterviewReport from a session in the REVIEWING phase."""

    def __init__(self, default_wpm: int = DEFAULT_WORDS_PER_MINUTE):
        self.default_wpm = default_wpm

    def build(self, session: InterviewSession) -> InterviewReport:
        """
        Build the report.

        Raises:
            StateTransitionError: if the interview has not reached review
        """
        if session.phase != InterviewPhase.REVIEWING:
            raise StateTransitionError("Report is only available once feedback is complete")

        items = [self._build_item(q) for q in sorted(session.questions, key=lambda q: q.id)]
        report = InterviewReport(
            session_id=session.session_id,
            job_description=session.job_description,
            items=items,
            summary=self._summarize(items),
        )
        logger.info(
            f"Built report for {session.session_id}: "
            f"{report.summary.feedback_ready}/{report.summary.questions_total} with feedback"
        )
        return report

    def _build_item(self, question) -> ReportItem:
        answered = question.is_answered
        item = ReportItem(
            question_id=question.id,
            question_text=question.text,
            answer_text=question.answer if answered else NO_ANSWER_TEXT,
            audio_duration=question.audio_duration,
            words_per_minute=(
                words_per_minute(question.answer, question.audio_duration, self.default_wpm)
                if answered else None
            ),
            feedback=question.feedback,
            feedback_status=question.feedback_status,
        )
        if question.feedback is None:
            item.unavailable_reason = FEEDBACK_UNAVAILABLE_TEXT
        return item

    def _summarize(self, items: list[ReportItem]) -> ReportSummary:
        with_feedback = [item.feedback for item in items if item.feedback is not None]
        measured = [item.words_per_minute for item in items if item.words_per_minute is not None]

        return ReportSummary(
            questions_total=len(items),
            questions_answered=sum(1 for item in items if item.words_per_minute is not None),
            feedback_ready=len(with_feedback),
            feedback_failed=sum(1 for item in items if item.feedback_status == FeedbackStatus.FAILED),
            avg_relevance=_average([f.relevance.score for f in with_feedback]),
            avg_star_method=_average([f.star_method.score for f in with_feedback]),
            avg_clarity_confidence=_average([f.clarity_confidence.score for f in with_feedback]),
            avg_words_per_minute=_average(measured),
            total_filler_words=sum(f.filler_words.count for f in with_feedback),
        )
