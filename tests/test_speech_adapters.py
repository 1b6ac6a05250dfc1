import asyncio
import base64

import pytest

from interview_coach.core.errors import CapabilityUnavailable
from interview_coach.core.speech_capture import RelayedSpeechCapture
from interview_coach.core.speech_playback import EdgeTTSPlayback
from interview_coach.core.transcript import RecognitionUpdate


class Recorder:
    def __init__(self):
        self.messages = []

    async def __call__(self, message):
        self.messages.append(message)


# ============================================================================
# CAPTURE
# ============================================================================

async def test_relayed_capture_sends_start_and_stop_once():
    capture = RelayedSpeechCapture(language="en-GB")
    sink = Recorder()
    capture.add_control_sink(sink)

    await capture.start()
    await capture.start()
    await capture.stop()
    await capture.stop()

    assert [m["action"] for m in sink.messages] == ["start", "stop"]
    assert sink.messages[0]["language"] == "en-GB"
    assert sink.messages[0]["interim_results"] is True


async def test_unsupported_client_makes_capture_unavailable():
    capture = RelayedSpeechCapture()
    capture.set_client_support(False)

    assert not capture.available
    with pytest.raises(CapabilityUnavailable):
        await capture.start()


async def test_disabled_capture_is_unavailable():
    assert not RelayedSpeechCapture(enabled=False).available


async def test_updates_reach_the_listener_only_while_active():
    capture = RelayedSpeechCapture()
    received = Recorder()
    capture.set_listener(received)
    update = RecognitionUpdate(final_fragments=["hello"])

    await capture.push(update)
    await capture.start()
    await capture.push(update)
    await capture.stop()
    await capture.push(update)

    assert received.messages == [update]


async def test_failing_control_sink_does_not_block_others():
    capture = RelayedSpeechCapture()

    async def broken(message):
        raise RuntimeError("socket closed")

    sink = Recorder()
    capture.add_control_sink(broken)
    capture.add_control_sink(sink)
    await capture.start()

    assert capture.is_active
    assert sink.messages[0]["action"] == "start"


# ============================================================================
# PLAYBACK
# ============================================================================

def _playback(monkeypatch, audio: bytes) -> tuple[EdgeTTSPlayback, Recorder]:
    playback = EdgeTTSPlayback(voice="male")
    sink = Recorder()
    playback.add_audio_sink(sink)

    async def fake_synthesize(text):
        return audio

    monkeypatch.setattr(playback, "_synthesize", fake_synthesize)
    return playback, sink


def test_voice_alias_resolves_to_edge_voice():
    assert EdgeTTSPlayback(voice="male").voice == "en-US-GuyNeural"
    assert EdgeTTSPlayback(voice="en-GB-SoniaNeural").voice == "en-GB-SoniaNeural"


async def test_speak_publishes_audio_to_sinks(monkeypatch):
    playback, sink = _playback(monkeypatch, b"mp3-bytes")

    await playback.speak("Hi")

    (message,) = sink.messages
    assert message["action"] == "play"
    assert message["text"] == "Hi"
    assert base64.b64decode(message["audio_data"]) == b"mp3-bytes"


async def test_cancelled_utterance_tells_the_client(monkeypatch):
    playback, sink = _playback(monkeypatch, b"mp3-bytes")

    task = asyncio.create_task(playback.speak("a much longer question to be read aloud"))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert [m["action"] for m in sink.messages] == ["play", "cancel"]


async def test_synthesis_failure_skips_playback(monkeypatch):
    playback, sink = _playback(monkeypatch, b"")

    await playback.speak("Anything")

    assert sink.messages == []
