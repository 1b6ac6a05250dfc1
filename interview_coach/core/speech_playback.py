"""
Speech playback adapters for Interview Coach.

``speak(text)`` resolves when the utterance has finished. Cancelling the
task awaiting ``speak`` cancels the utterance, which is how a new
utterance preempts an in-flight one.
"""

import asyncio
import base64
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

import edge_tts

from interview_coach.core.pace import estimate_speech_seconds

logger = logging.getLogger(__name__)

AudioSink = Callable[[dict[str, Any]], Awaitable[None]]


class SpeechPlaybackAdapter(ABC):
    """Text-to-speech capability."""

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether a synthesis engine exists in this runtime."""

    @abstractmethod
    async def speak(self, text: str) -> None:
        """Say ``text``; returns once the utterance has ended."""


class EdgeTTSPlayback(SpeechPlaybackAdapter):
    """
    Synthesizes speech with Edge TTS (Microsoft) and hands the audio to
    the connected client through registered audio sinks.

    The utterance is considered playing for its estimated spoken length.
    """

    EDGE_VOICES = {
        "male": "en-US-GuyNeural",
        "female": "en-US-JennyNeural",
        "professional": "en-US-AriaNeural",
        "default": "en-US-JennyNeural",
    }

    def __init__(self, voice: str = "default", enabled: bool = True):
        self.voice = self.EDGE_VOICES.get(voice, voice)
        self.enabled = enabled
        self._audio_sinks: list[AudioSink] = []

    @property
    def available(self) -> bool:
        return self.enabled

    def add_audio_sink(self, sink: AudioSink) -> None:
        self._audio_sinks.append(sink)

    def remove_audio_sink(self, sink: AudioSink) -> None:
        if sink in self._audio_sinks:
            self._audio_sinks.remove(sink)

    async def speak(self, text: str) -> None:
        audio_data = await self._synthesize(text)
        if not audio_data:
            return

        duration = estimate_speech_seconds(text)
        await self._publish({
            "action": "play",
            "format": "mp3",
            "audio_data": base64.b64encode(audio_data).decode("utf-8"),
            "duration_seconds": duration,
            "text": text,
        })
        try:
            await asyncio.sleep(duration)
        except asyncio.CancelledError:
            await self._publish({"action": "cancel"})
            raise

    async def _synthesize(self, text: str) -> bytes:
        """Generate speech audio; returns empty bytes on failure."""
        try:
            communicate = edge_tts.Communicate(text, self.voice)

            audio_chunks = []
            async for chunk in communicate.stream():
                if chunk["type"] == "audio":
                    audio_chunks.append(chunk["data"])

            return b"".join(audio_chunks)

        except Exception as e:
            logger.error(f"Edge TTS failed: {e}")
            return b""

    async def _publish(self, message: dict[str, Any]) -> None:
        for sink in list(self._audio_sinks):
            try:
                await sink(message)
            except Exception as e:
                logger.error(f"Audio sink error: {e}")
