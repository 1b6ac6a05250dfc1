"""Shared fixtures and test doubles for the interview coach tests."""

import asyncio

import pytest

from interview_coach.core.errors import AnalysisFailure
from interview_coach.core.interview_orchestrator import InterviewOrchestrator
from interview_coach.core.speech_capture import SpeechCaptureAdapter
from interview_coach.core.speech_playback import SpeechPlaybackAdapter
from interview_coach.core.transcript import RecognitionUpdate
from interview_coach.models.feedback import Feedback


def make_feedback(overall: str = "Great answer, keep it up.", score: int = 4, filler_count: int = 1) -> Feedback:
    """Build a conforming Feedback from the wire (camelCase) shape."""
    return Feedback.model_validate({
        "relevance": {"score": score, "feedback": "On topic."},
        "starMethod": {
            "score": score,
            "feedback": "Clear structure.",
            "situation": True,
            "task": True,
            "action": True,
            "result": False,
        },
        "clarityConfidence": {
            "score": score,
            "feedback": "Confident delivery.",
            "powerWords": ["led"],
            "passiveWords": ["was given"],
        },
        "pace": {"wpm": 150, "feedback": "Good pace."},
        "fillerWords": {"count": filler_count, "words": ["um"] * filler_count, "feedback": "Few fillers."},
        "overallFeedback": overall,
    })


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


class FakeCapture(SpeechCaptureAdapter):
    def __init__(self, available: bool = True):
        super().__init__()
        self._available = available
        self.starts = 0
        self.stops = 0

    @property
    def available(self) -> bool:
        return self._available

    async def _on_start(self) -> None:
        self.starts += 1

    async def _on_stop(self) -> None:
        self.stops += 1

    async def emit(self, final: list[str] | None = None, interim: str | None = None) -> None:
        await self._emit(RecognitionUpdate(final_fragments=final or [], interim_fragment=interim))


class FakePlayback(SpeechPlaybackAdapter):
    """Playback that finishes immediately unless ``hold`` is set."""

    def __init__(self, available: bool = True, hold: bool = False):
        self._available = available
        self.spoken: list[str] = []
        self.cancelled = 0
        self.release = asyncio.Event() if hold else None

    @property
    def available(self) -> bool:
        return self._available

    async def speak(self, text: str) -> None:
        self.spoken.append(text)
        try:
            if self.release is not None:
                await self.release.wait()
            else:
                await asyncio.sleep(0)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise


class FakeAnalysisClient:
    """
    Analysis client double.

    ``questions`` may be a list or an exception to raise; ``failing_texts``
    lists the question texts whose feedback call fails.
    """

    def __init__(self, questions=None, failing_texts=(), gate: asyncio.Event | None = None):
        self.questions = questions
        self.failing_texts = set(failing_texts)
        self.gate = gate
        self.generate_calls: list[tuple[str, int]] = []
        self.feedback_calls: list[tuple[str, str, int]] = []

    async def generate_questions(self, job_description: str, count: int = 5) -> list[str]:
        self.generate_calls.append((job_description, count))
        if self.gate is not None:
            await self.gate.wait()
        if isinstance(self.questions, Exception):
            raise self.questions
        if self.questions is None:
            raise AnalysisFailure("no questions configured")
        return list(self.questions)[:count]

    async def get_feedback(self, question_text: str, answer_text: str, words_per_minute: int) -> Feedback:
        self.feedback_calls.append((question_text, answer_text, words_per_minute))
        if self.gate is not None:
            await self.gate.wait()
        if question_text in self.failing_texts:
            raise AnalysisFailure(f"feedback failed for {question_text!r}")
        return make_feedback(overall=f"Tip for {question_text}")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def capture():
    return FakeCapture()


@pytest.fixture
def playback():
    return FakePlayback()


@pytest.fixture
def analysis():
    return FakeAnalysisClient(questions=[f"Generated question {i}?" for i in range(5)])


@pytest.fixture
def orchestrator(analysis, capture, playback, clock):
    return InterviewOrchestrator(
        analysis_client=analysis,
        speech_capture=capture,
        speech_playback=playback,
        question_count=5,
        default_wpm=150,
        clock=clock,
    )


async def answer_current(orchestrator: InterviewOrchestrator, capture: FakeCapture, clock: FakeClock,
                         words: str, seconds: float = 2.0) -> None:
    """Speak one answer: wait for the question, listen, emit, stop."""
    await orchestrator.wait_for_playback()
    await orchestrator.start_listening()
    if words:
        await capture.emit(final=[words])
    clock.advance(seconds)
    await orchestrator.stop_listening()
