"""
Interview phase state machine.

Each function here is a pure transition: it validates the move, then
returns the next InterviewSession value without touching the one it was
given. The orchestrator is the only caller and swaps in the result.
"""

from interview_coach.core.errors import PreconditionViolation, StateTransitionError
from interview_coach.models.feedback import Feedback, FeedbackStatus
from interview_coach.models.interview import InterviewPhase, InterviewSession, Question


# Valid state transitions (reset to NOT_STARTED is always allowed, see reset())
VALID_TRANSITIONS: dict[InterviewPhase, list[InterviewPhase]] = {
    InterviewPhase.NOT_STARTED: [InterviewPhase.GETTING_JOB_DESC, InterviewPhase.GENERATING_QUESTIONS],
    InterviewPhase.GETTING_JOB_DESC: [InterviewPhase.GENERATING_QUESTIONS],
    InterviewPhase.GENERATING_QUESTIONS: [InterviewPhase.INTERVIEWING],
    InterviewPhase.INTERVIEWING: [InterviewPhase.INTERVIEWING, InterviewPhase.AWAITING_FEEDBACK],
    InterviewPhase.AWAITING_FEEDBACK: [InterviewPhase.REVIEWING],
    InterviewPhase.REVIEWING: [],
}


def require_phase(session: InterviewSession, *phases: InterviewPhase) -> None:
    """Reject an action that is not valid in the session's current phase."""
    if session.phase not in phases:
        allowed = ", ".join(p.value for p in phases)
        raise StateTransitionError(
            f"Action not allowed in phase {session.phase.value} (requires {allowed})"
        )


def transition(session: InterviewSession, new_phase: InterviewPhase, **changes) -> InterviewSession:
    """
    Move the session to ``new_phase``, applying ``changes`` to the copy.

    Raises:
        StateTransitionError: If transition is invalid
    """
    valid_next = VALID_TRANSITIONS.get(session.phase, [])
    if new_phase not in valid_next:
        raise StateTransitionError(
            f"Invalid transition from {session.phase.value} to {new_phase.value}",
            {"valid_transitions": [p.value for p in valid_next]},
        )
    return session.model_copy(update={"phase": new_phase, **changes}, deep=True)


def reset() -> InterviewSession:
    """Any phase -> NOT_STARTED, with a fresh, empty session."""
    return InterviewSession()


def begin_job_description(session: InterviewSession) -> InterviewSession:
    return transition(session, InterviewPhase.GETTING_JOB_DESC)


def set_job_description(session: InterviewSession, text: str) -> InterviewSession:
    require_phase(session, InterviewPhase.GETTING_JOB_DESC)
    return session.model_copy(update={"job_description": text})


def begin_generating(session: InterviewSession) -> InterviewSession:
    if session.phase == InterviewPhase.GETTING_JOB_DESC and not session.job_description.strip():
        raise StateTransitionError("A job description is required to generate questions")
    return transition(session, InterviewPhase.GENERATING_QUESTIONS)


def populate_questions(
    session: InterviewSession,
    texts: list[str],
    notice: str | None = None,
) -> InterviewSession:
    """GENERATING_QUESTIONS -> INTERVIEWING with sequential ids from 0."""
    if not texts:
        raise PreconditionViolation("Cannot start interviewing without questions")
    questions = [Question(id=i, text=text) for i, text in enumerate(texts)]
    return transition(
        session,
        InterviewPhase.INTERVIEWING,
        questions=questions,
        current_index=0,
        notice=notice,
    )


def record_answer(session: InterviewSession, answer: str, duration_seconds: float) -> InterviewSession:
    """
    Attach the answer to the current question and advance.

    The last answer moves the session to AWAITING_FEEDBACK; otherwise the
    index moves on by one.
    """
    require_phase(session, InterviewPhase.INTERVIEWING)
    index = session.current_index
    question = session.questions[index]
    if question.answer is not None:
        raise PreconditionViolation(f"Question {question.id} was already answered")

    questions = list(session.questions)
    questions[index] = question.model_copy(
        update={"answer": answer, "audio_duration": duration_seconds}
    )

    if session.is_last_question():
        return transition(session, InterviewPhase.AWAITING_FEEDBACK, questions=questions)
    return transition(
        session,
        InterviewPhase.INTERVIEWING,
        questions=questions,
        current_index=index + 1,
    )


def _find_question(session: InterviewSession, question_id: int) -> Question:
    for question in session.questions:
        if question.id == question_id:
            return question
    raise PreconditionViolation(f"Unknown question id {question_id}")


def _update_question(session: InterviewSession, question_id: int, **changes) -> InterviewSession:
    question = _find_question(session, question_id)
    questions = [
        question.model_copy(update=changes) if q.id == question_id else q
        for q in session.questions
    ]
    return session.model_copy(update={"questions": questions})


def mark_feedback_pending(session: InterviewSession, question_ids: list[int]) -> InterviewSession:
    require_phase(session, InterviewPhase.AWAITING_FEEDBACK)
    for question_id in question_ids:
        session = _update_question(session, question_id, feedback_status=FeedbackStatus.PENDING)
    return session


def attach_feedback(session: InterviewSession, question_id: int, feedback: Feedback) -> InterviewSession:
    """Attach feedback to an answered question (at most once)."""
    require_phase(session, InterviewPhase.AWAITING_FEEDBACK)
    question = _find_question(session, question_id)
    if not question.is_answered:
        raise PreconditionViolation(f"Question {question_id} has no answer to attach feedback to")
    if question.feedback is not None:
        raise PreconditionViolation(f"Question {question_id} already has feedback")
    return _update_question(
        session, question_id,
        feedback=feedback,
        feedback_status=FeedbackStatus.READY,
    )


def mark_feedback_failed(session: InterviewSession, question_id: int) -> InterviewSession:
    require_phase(session, InterviewPhase.AWAITING_FEEDBACK)
    return _update_question(session, question_id, feedback_status=FeedbackStatus.FAILED)


def finish_review(session: InterviewSession) -> InterviewSession:
    return transition(session, InterviewPhase.REVIEWING)
