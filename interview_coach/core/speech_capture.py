"""
Speech capture adapters for Interview Coach.

The orchestrator consumes speech-to-text through the SpeechCaptureAdapter
interface: explicit start/stop control plus a stream of RecognitionUpdate
events delivered to a single listener. Engines that do not exist in the
current runtime report ``available = False`` instead of failing.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

from interview_coach.core.errors import CapabilityUnavailable
from interview_coach.core.transcript import RecognitionUpdate

logger = logging.getLogger(__name__)

RecognitionListener = Callable[[RecognitionUpdate], Awaitable[None]]
ControlSink = Callable[[dict[str, Any]], Awaitable[None]]


class SpeechCaptureAdapter(ABC):
    """Continuous, incremental speech-to-text capability."""

    def __init__(self):
        self._listener: RecognitionListener | None = None
        self._active = False

    @property
    @abstractmethod
    def available(self) -> bool:
        """Whether a recognition engine exists in this runtime."""

    @property
    def is_active(self) -> bool:
        return self._active

    def set_listener(self, listener: RecognitionListener | None) -> None:
        """Register the single consumer of recognition updates."""
        self._listener = listener

    async def start(self) -> None:
        """Begin streaming capture. Idempotent when already started."""
        if not self.available:
            raise CapabilityUnavailable("Speech recognition is not available")
        if self._active:
            return
        self._active = True
        await self._on_start()

    async def stop(self) -> None:
        """Stop streaming capture. Idempotent when already stopped."""
        if not self._active:
            return
        self._active = False
        await self._on_stop()

    async def _emit(self, update: RecognitionUpdate) -> None:
        if not self._active or self._listener is None:
            logger.debug("Dropping recognition update received while inactive")
            return
        await self._listener(update)

    @abstractmethod
    async def _on_start(self) -> None:
        ...

    @abstractmethod
    async def _on_stop(self) -> None:
        ...


class RelayedSpeechCapture(SpeechCaptureAdapter):
    """
    Capture performed by a client-side recognizer (e.g. a browser).

    Start/stop are relayed to the connected client as control messages;
    the client pushes its recognition results back through ``push``.
    Availability is reported by the client when it connects.
    """

    def __init__(self, enabled: bool = True, language: str = "en-US"):
        super().__init__()
        self.enabled = enabled
        self.language = language
        self._client_supported = True
        self._control_sinks: list[ControlSink] = []

    @property
    def available(self) -> bool:
        return self.enabled and self._client_supported

    def set_client_support(self, supported: bool) -> None:
        """Record the connected client's recognition capability."""
        if supported != self._client_supported:
            logger.info(f"Client speech recognition support: {supported}")
        self._client_supported = supported

    def add_control_sink(self, sink: ControlSink) -> None:
        self._control_sinks.append(sink)

    def remove_control_sink(self, sink: ControlSink) -> None:
        if sink in self._control_sinks:
            self._control_sinks.remove(sink)

    async def push(self, update: RecognitionUpdate) -> None:
        """Deliver a recognition result reported by the client."""
        await self._emit(update)

    async def _on_start(self) -> None:
        await self._send_control({
            "action": "start",
            "language": self.language,
            "continuous": True,
            "interim_results": True,
        })

    async def _on_stop(self) -> None:
        await self._send_control({"action": "stop"})

    async def _send_control(self, message: dict[str, Any]) -> None:
        for sink in list(self._control_sinks):
            try:
                await sink(message)
            except Exception as e:
                logger.error(f"Capture control sink error: {e}")
