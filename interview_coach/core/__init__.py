"""
Core business logic modules for Interview Coach

Contains:
- Interview Orchestrator: State machine for the interview lifecycle
- Analysis Client: Question generation and answer feedback
- Speech Capture / Playback: STT and TTS adapters
- Feedback Pipeline: Sequential per-answer feedback
- Report Builder: Final report compilation
"""

from interview_coach.core.interview_orchestrator import InterviewOrchestrator
from interview_coach.core.analysis_client import AnalysisClient
from interview_coach.core.speech_capture import SpeechCaptureAdapter, RelayedSpeechCapture
from interview_coach.core.speech_playback import SpeechPlaybackAdapter, EdgeTTSPlayback
from interview_coach.core.feedback_pipeline import FeedbackPipeline
from interview_coach.core.report_builder import ReportBuilder

__all__ = [
    "InterviewOrchestrator",
    "AnalysisClient",
    "SpeechCaptureAdapter",
    "RelayedSpeechCapture",
    "SpeechPlaybackAdapter",
    "EdgeTTSPlayback",
    "FeedbackPipeline",
    "ReportBuilder",
]
