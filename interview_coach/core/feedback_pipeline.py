"""
Feedback Pipeline for Interview Coach

Obtains structured feedback for every answered question, one at a time
and strictly in question order. A failed item is logged and skipped; it
never aborts the batch and is never retried.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from interview_coach.core.errors import AnalysisFailure, PreconditionViolation
from interview_coach.core.pace import DEFAULT_WORDS_PER_MINUTE, words_per_minute
from interview_coach.models.feedback import Feedback
from interview_coach.models.interview import Question

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedbackWorkItem:
    """One pending feedback request."""

    question_id: int
    question_text: str
    answer_text: str
    words_per_minute: int


@dataclass
class PipelineOutcome:
    """What happened to each item of a drained batch."""

    succeeded: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)
    abandoned: bool = False


class FeedbackPipeline:
    """
    Drains a queue of work items with a single sequential worker.

    Results are published through callbacks as each item completes so the
    caller can show finished items before the batch ends. After every
    awaited call the worker consults ``is_current``; once it returns False
    (the session was reset) the remaining items are dropped unwritten.
    """

    def __init__(self, analysis_client, default_wpm: int = DEFAULT_WORDS_PER_MINUTE):
        self.analysis_client = analysis_client
        self.default_wpm = default_wpm

    def build_queue(self, questions: list[Question]) -> deque[FeedbackWorkItem]:
        """Queue answered questions in ascending id order."""
        answered = sorted((q for q in questions if q.is_answered), key=lambda q: q.id)
        return deque(
            FeedbackWorkItem(
                question_id=q.id,
                question_text=q.text,
                answer_text=q.answer,
                words_per_minute=words_per_minute(q.answer, q.audio_duration, self.default_wpm),
            )
            for q in answered
        )

    async def run(
        self,
        queue: deque[FeedbackWorkItem],
        on_result: Callable[[int, Feedback], Awaitable[None]],
        on_failure: Callable[[int, AnalysisFailure], Awaitable[None]],
        is_current: Callable[[], bool],
    ) -> PipelineOutcome:
        """Process the queue until it is empty or the session goes stale."""
        outcome = PipelineOutcome()

        while queue:
            if not is_current():
                outcome.abandoned = True
                break

            item = queue.popleft()
            failure: AnalysisFailure | None = None
            try:
                feedback = await self.analysis_client.get_feedback(
                    item.question_text,
                    item.answer_text,
                    item.words_per_minute,
                )
            except AnalysisFailure as e:
                logger.warning(f"Feedback failed for question {item.question_id}: {e}")
                failure = e
            except PreconditionViolation:
                raise
            except Exception as e:
                logger.exception(f"Unexpected error getting feedback for question {item.question_id}")
                failure = AnalysisFailure("answer feedback failed unexpectedly", {"error": str(e)})

            if failure is not None:
                if not is_current():
                    outcome.abandoned = True
                    break
                outcome.failed.append(item.question_id)
                await on_failure(item.question_id, failure)
                continue

            if not is_current():
                outcome.abandoned = True
                break

            outcome.succeeded.append(item.question_id)
            await on_result(item.question_id, feedback)

        if outcome.abandoned:
            logger.info(f"Session reset during feedback; abandoned with {len(queue)} item(s) still queued")
        else:
            logger.info(
                f"Feedback pipeline finished: {len(outcome.succeeded)} ready, "
                f"{len(outcome.failed)} failed"
            )
        return outcome
