"""
API Dependencies

Provides dependency injection for API endpoints.
Manages the singleton instances of core components (one user, one session).
"""

from interview_coach.config.settings import get_settings
from interview_coach.core.interview_orchestrator import InterviewOrchestrator
from interview_coach.core.analysis_client import AnalysisClient
from interview_coach.core.speech_capture import RelayedSpeechCapture
from interview_coach.core.speech_playback import EdgeTTSPlayback
from interview_coach.core.report_builder import ReportBuilder


# ============================================================================
# SINGLETON INSTANCES
# ============================================================================

_orchestrator: InterviewOrchestrator | None = None


def get_orchestrator() -> InterviewOrchestrator:
    """
    Get the interview orchestrator singleton.

    Lazily initializes all required components.
    """
    global _orchestrator

    if _orchestrator is None:
        settings = get_settings()

        _orchestrator = InterviewOrchestrator(
            analysis_client=AnalysisClient(settings),
            speech_capture=RelayedSpeechCapture(
                enabled=settings.speech_capture_enabled,
                language=settings.speech_language,
            ),
            speech_playback=EdgeTTSPlayback(
                voice=settings.tts_voice,
                enabled=settings.tts_enabled,
            ),
            question_count=settings.question_count,
            default_wpm=settings.default_words_per_minute,
        )

    return _orchestrator


def get_report_builder() -> ReportBuilder:
    """Get a report builder using the configured default pace."""
    return ReportBuilder(default_wpm=get_settings().default_words_per_minute)


async def cleanup():
    """Cleanup resources on shutdown."""
    global _orchestrator

    if _orchestrator:
        await _orchestrator.close()

    _orchestrator = None
