"""
Interview Orchestrator - State machine for managing interview lifecycle.

This is the central coordinator for the entire interview process. It owns
the single live InterviewSession, applies state-machine transitions in
response to user actions, speech events and analysis results, and drives
the capture, playback and analysis collaborators in sequence.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from interview_coach.core import state_machine
from interview_coach.core.errors import AnalysisFailure, StateTransitionError
from interview_coach.core.feedback_pipeline import FeedbackPipeline
from interview_coach.core.pace import DEFAULT_WORDS_PER_MINUTE
from interview_coach.core.speech_capture import SpeechCaptureAdapter
from interview_coach.core.speech_playback import SpeechPlaybackAdapter
from interview_coach.core.transcript import RecognitionUpdate, TranscriptBuffer
from interview_coach.models.feedback import Feedback
from interview_coach.models.interview import InterviewPhase, InterviewSession, SessionSnapshot

logger = logging.getLogger(__name__)


PRESET_QUESTIONS = [
    "Tell me about yourself.",
    "What are your biggest strengths?",
    "What are your biggest weaknesses?",
    "Tell me about a time you faced a challenge at work and how you handled it.",
    "Where do you see yourself in five years?",
]

FALLBACK_NOTICE = "Sorry, I couldn't generate questions right now. Let's use some common ones."


class InterviewOrchestrator:
    """
    Manages the interview lifecycle using a state machine pattern.

    Phases:
        NOT_STARTED → GETTING_JOB_DESC → GENERATING_QUESTIONS → INTERVIEWING
                                                                    ↓
                                          REVIEWING ← AWAITING_FEEDBACK
        (reset returns to NOT_STARTED from anywhere)

    The orchestrator is the only writer of session state. Collaborators
    report events to it; they never mutate the session themselves.
    """

    def __init__(
        self,
        analysis_client: Any,  # AnalysisClient
        speech_capture: SpeechCaptureAdapter,
        speech_playback: SpeechPlaybackAdapter,
        question_count: int = len(PRESET_QUESTIONS),
        default_wpm: int = DEFAULT_WORDS_PER_MINUTE,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the orchestrator with its injected collaborators.

        Args:
            analysis_client: Question generation and answer feedback
            speech_capture: Incremental speech-to-text
            speech_playback: Text-to-speech for asking questions
            question_count: Questions to request from the analysis client
            default_wpm: Pace used when an answer's rate can't be measured
            clock: Monotonic time source for answer timing
        """
        self.analysis_client = analysis_client
        self.speech_capture = speech_capture
        self.speech_playback = speech_playback
        self.question_count = question_count
        self.feedback_pipeline = FeedbackPipeline(analysis_client, default_wpm=default_wpm)

        self._session = InterviewSession()
        self._transcript = TranscriptBuffer(clock=clock)
        self._is_listening = False
        self._is_speaking = False

        self._playback_task: asyncio.Task | None = None
        self._feedback_task: asyncio.Task | None = None

        # Event callbacks
        self._state_change_callbacks: list[Callable[[SessionSnapshot], Awaitable[None]]] = []
        self._notice_callbacks: list[Callable[[str], Awaitable[None]]] = []

        self.speech_capture.set_listener(self.handle_recognition_update)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def session(self) -> InterviewSession:
        return self._session

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    @property
    def is_speaking(self) -> bool:
        return self._is_speaking

    def snapshot(self) -> SessionSnapshot:
        """Read-only projection of the current state."""
        session = self._session
        return SessionSnapshot(
            phase=session.phase,
            job_description=session.job_description,
            questions=[q.model_copy() for q in session.questions],
            current_index=session.current_index,
            is_listening=self._is_listening,
            is_speaking=self._is_speaking,
            final_transcript=self._transcript.final_text,
            interim_transcript=self._transcript.interim_text,
            notice=session.notice,
            capture_available=self.speech_capture.available,
            playback_available=self.speech_playback.available,
        )

    def _apply(self, new_session: InterviewSession) -> None:
        """Swap in the next session value (the single write path)."""
        old_phase = self._session.phase
        self._session = new_session
        if new_session.phase != old_phase:
            logger.info(f"Session {new_session.session_id}: {old_phase.value} → {new_session.phase.value}")

    async def _publish(self) -> None:
        """Notify state listeners."""
        snapshot = self.snapshot()
        for callback in list(self._state_change_callbacks):
            try:
                await callback(snapshot)
            except Exception as e:
                logger.error(f"State change callback error: {e}")

    # =========================================================================
    # USER ACTIONS
    # =========================================================================

    async def begin_with_job_description(self) -> SessionSnapshot:
        """NOT_STARTED → GETTING_JOB_DESC."""
        self._apply(state_machine.begin_job_description(self._session))
        await self._publish()
        return self.snapshot()

    async def set_job_description(self, text: str) -> SessionSnapshot:
        """Set the job description (only while it is being collected)."""
        self._apply(state_machine.set_job_description(self._session, text))
        await self._publish()
        return self.snapshot()

    async def start_interview(self) -> SessionSnapshot:
        """
        Acquire the question list and begin interviewing.

        With a job description the questions are generated; otherwise, or
        when generation fails, the preset list is used.
        """
        self._apply(state_machine.begin_generating(self._session))
        session_id = self._session.session_id
        await self._publish()

        texts, notice = await self._acquire_questions(self._session.job_description)

        if self._session.session_id != session_id:
            logger.info("Session reset while generating questions; discarding result")
            return self.snapshot()

        self._apply(state_machine.populate_questions(self._session, texts, notice=notice))
        await self._publish()

        if notice:
            for callback in list(self._notice_callbacks):
                try:
                    await callback(notice)
                except Exception as e:
                    logger.error(f"Notice callback error: {e}")

        self._speak_current_question()
        return self.snapshot()

    async def start_listening(self) -> SessionSnapshot:
        """Open a capture window for the current question."""
        state_machine.require_phase(self._session, InterviewPhase.INTERVIEWING)
        if self._is_speaking:
            raise StateTransitionError("Cannot start listening while the question is being spoken")
        if self._is_listening:
            return self.snapshot()
        if not self.speech_capture.available:
            logger.debug("Speech capture unavailable; start_listening ignored")
            return self.snapshot()

        self._transcript.start()
        self._is_listening = True
        await self.speech_capture.start()
        await self._publish()
        return self.snapshot()

    async def stop_listening(self) -> SessionSnapshot:
        """
        Close the capture window, record the answer and advance.

        Advancing either moves to the next question (which is then spoken)
        or, after the last one, starts the feedback pipeline.
        """
        state_machine.require_phase(self._session, InterviewPhase.INTERVIEWING)
        if not self.speech_capture.available:
            logger.debug("Speech capture unavailable; stop_listening ignored")
            return self.snapshot()
        if not self._is_listening:
            raise StateTransitionError("Not currently listening")

        self._is_listening = False
        captured = self._transcript.finish()
        self._apply(state_machine.record_answer(
            self._session, captured.answer, captured.duration_seconds,
        ))
        logger.info(
            f"Recorded answer: {len(captured.answer.split())} words "
            f"in {captured.duration_seconds:.1f}s"
        )

        if self._session.phase == InterviewPhase.AWAITING_FEEDBACK:
            self._feedback_task = asyncio.create_task(
                self._collect_feedback(self._session.session_id)
            )
        else:
            self._speak_current_question()

        await self.speech_capture.stop()
        await self._publish()
        return self.snapshot()

    async def reset_interview(self) -> SessionSnapshot:
        """Discard everything and return to NOT_STARTED (valid from any phase)."""
        self._cancel_playback()
        was_listening = self._is_listening
        self._is_listening = False
        self._transcript.clear()
        self._apply(state_machine.reset())

        if was_listening:
            await self.speech_capture.stop()
        await self._publish()
        return self.snapshot()

    # =========================================================================
    # SPEECH EVENTS
    # =========================================================================

    async def handle_recognition_update(self, update: RecognitionUpdate) -> None:
        """Fold one recognition event into the transcript buffers."""
        if not self._is_listening:
            return
        self._transcript.apply(update)
        await self._publish()

    def _speak_current_question(self) -> None:
        question = self._session.get_current_question()
        if question is not None:
            self._speak(question.text)

    def _speak(self, text: str) -> None:
        """Start an utterance, cancelling any in flight."""
        if not self.speech_playback.available:
            logger.debug("Speech playback unavailable; question not spoken")
            return
        self._cancel_playback()
        self._is_speaking = True
        self._playback_task = asyncio.create_task(self._run_playback(text))

    async def _run_playback(self, text: str) -> None:
        try:
            await self.speech_playback.speak(text)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Speech playback failed: {e}")
        finally:
            if self._playback_task is asyncio.current_task():
                self._is_speaking = False
                self._playback_task = None
                await self._publish()

    def _cancel_playback(self) -> None:
        if self._playback_task is not None:
            self._playback_task.cancel()
            self._playback_task = None
        self._is_speaking = False

    # =========================================================================
    # ANALYSIS
    # =========================================================================

    async def _acquire_questions(self, job_description: str) -> tuple[list[str], str | None]:
        """Return question texts plus a notice if the fallback was used."""
        if not job_description.strip():
            return list(PRESET_QUESTIONS), None

        try:
            texts = await self.analysis_client.generate_questions(
                job_description, self.question_count,
            )
            return texts, None
        except AnalysisFailure as e:
            logger.warning(f"Question generation failed, using preset questions: {e}")
            return list(PRESET_QUESTIONS), FALLBACK_NOTICE
        except Exception:
            logger.exception("Unexpected error generating questions, using preset questions")
            return list(PRESET_QUESTIONS), FALLBACK_NOTICE

    async def _collect_feedback(self, session_id: str) -> None:
        """Run the feedback pipeline for this session, then move to REVIEWING."""

        def is_current() -> bool:
            return self._session.session_id == session_id

        # The task first runs on a later loop turn; a reset may already have happened
        if not is_current():
            logger.info("Session reset before feedback started; nothing to collect")
            return

        queue = self.feedback_pipeline.build_queue(self._session.questions)
        self._apply(state_machine.mark_feedback_pending(
            self._session, [item.question_id for item in queue],
        ))

        async def on_result(question_id: int, feedback: Feedback) -> None:
            self._apply(state_machine.attach_feedback(self._session, question_id, feedback))
            await self._publish()

        async def on_failure(question_id: int, error: AnalysisFailure) -> None:
            self._apply(state_machine.mark_feedback_failed(self._session, question_id))
            await self._publish()

        outcome = await self.feedback_pipeline.run(queue, on_result, on_failure, is_current)

        if outcome.abandoned or not is_current():
            return
        self._apply(state_machine.finish_review(self._session))
        await self._publish()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def wait_for_feedback(self) -> None:
        """Wait for the in-flight feedback pipeline, if any."""
        if self._feedback_task is not None:
            await self._feedback_task

    async def wait_for_playback(self) -> None:
        """Wait for the in-flight utterance, if any."""
        if self._playback_task is not None:
            await asyncio.gather(self._playback_task, return_exceptions=True)

    async def close(self) -> None:
        """Release collaborators."""
        self._cancel_playback()
        await self.speech_capture.stop()
        if hasattr(self.analysis_client, "close"):
            await self.analysis_client.close()

    # =========================================================================
    # EVENT CALLBACKS
    # =========================================================================

    def on_state_change(self, callback: Callable[[SessionSnapshot], Awaitable[None]]) -> None:
        """Register a callback for state changes."""
        self._state_change_callbacks.append(callback)

    def remove_state_listener(self, callback: Callable[[SessionSnapshot], Awaitable[None]]) -> None:
        if callback in self._state_change_callbacks:
            self._state_change_callbacks.remove(callback)

    def on_notice(self, callback: Callable[[str], Awaitable[None]]) -> None:
        """Register a callback for one-time user notices."""
        self._notice_callbacks.append(callback)

    def remove_notice_listener(self, callback: Callable[[str], Awaitable[None]]) -> None:
        if callback in self._notice_callbacks:
            self._notice_callbacks.remove(callback)
