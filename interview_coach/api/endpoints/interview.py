"""
Interview API endpoints

Presentation boundary for the single interview session:
- Reading the session projection
- User intents (job description, start, listen, stop, reset)
- Review report
- WebSocket channel for live state, speech control and recognition results
"""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from interview_coach.api.dependencies import get_orchestrator, get_report_builder
from interview_coach.core.errors import CoachError, StateTransitionError
from interview_coach.core.interview_orchestrator import InterviewOrchestrator
from interview_coach.core.report_builder import ReportBuilder
from interview_coach.core.speech_capture import RelayedSpeechCapture
from interview_coach.core.speech_playback import EdgeTTSPlayback
from interview_coach.core.transcript import RecognitionUpdate
from interview_coach.models.interview import SessionSnapshot
from interview_coach.models.report import InterviewReport

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class JobDescriptionRequest(BaseModel):
    """Request model for setting the job description."""
    text: str


class RecognitionMessage(BaseModel):
    """Recognition result pushed by the client-side recognizer."""
    final: list[str] = []
    interim: str | None = None


def _conflict(e: StateTransitionError) -> HTTPException:
    return HTTPException(status_code=409, detail=e.message)


# ============================================================================
# REST ENDPOINTS
# ============================================================================

@router.get("/state", response_model=SessionSnapshot)
async def get_state(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    """Get the current session projection."""
    return orchestrator.snapshot()


@router.post("/job-description", response_model=SessionSnapshot)
async def begin_with_job_description(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    """Choose to tailor the interview to a job description."""
    try:
        return await orchestrator.begin_with_job_description()
    except StateTransitionError as e:
        raise _conflict(e)


@router.put("/job-description", response_model=SessionSnapshot)
async def set_job_description(
    request: JobDescriptionRequest,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    """Update the job description text."""
    try:
        return await orchestrator.set_job_description(request.text)
    except StateTransitionError as e:
        raise _conflict(e)


@router.post("/start", response_model=SessionSnapshot)
async def start_interview(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    """
    Start the interview.

    Generates questions from the job description (or uses the common
    questions) and asks the first one.
    """
    try:
        return await orchestrator.start_interview()
    except StateTransitionError as e:
        raise _conflict(e)


@router.post("/listening/start", response_model=SessionSnapshot)
async def start_listening(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    """Start recording an answer to the current question."""
    try:
        return await orchestrator.start_listening()
    except StateTransitionError as e:
        raise _conflict(e)


@router.post("/listening/stop", response_model=SessionSnapshot)
async def stop_listening(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    """Stop recording and move to the next question (or to feedback)."""
    try:
        return await orchestrator.stop_listening()
    except StateTransitionError as e:
        raise _conflict(e)


@router.post("/reset", response_model=SessionSnapshot)
async def reset_interview(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
) -> SessionSnapshot:
    """Discard the session and start over."""
    return await orchestrator.reset_interview()


@router.get("/report", response_model=InterviewReport)
async def get_report(
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
    builder: ReportBuilder = Depends(get_report_builder),
) -> InterviewReport:
    """Get the feedback report once the interview is reviewed."""
    try:
        return builder.build(orchestrator.session)
    except StateTransitionError as e:
        raise _conflict(e)


# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

def _dump(snapshot: SessionSnapshot) -> dict[str, Any]:
    return snapshot.model_dump(mode="json", by_alias=True)


@router.websocket("/ws")
async def websocket_interview(
    websocket: WebSocket,
    orchestrator: InterviewOrchestrator = Depends(get_orchestrator),
):
    """
    WebSocket endpoint for real-time interview interaction.

    Client sends:
    - capabilities: {speech_recognition: bool}
    - recognition: {final: [...], interim: str | null}
    - begin_with_job_description, set_job_description {text},
      start_interview, start_listening, stop_listening, reset_interview
    - ping

    Server sends:
    - state: Session projection after every change
    - notice: One-time user notice
    - capture: Recognizer control (start/stop)
    - audio: Question audio to play (or cancel)
    - error: Rejected action
    """
    await websocket.accept()

    async def send_state(snapshot: SessionSnapshot) -> None:
        await websocket.send_json({"type": "state", "data": _dump(snapshot)})

    async def send_notice(message: str) -> None:
        await websocket.send_json({"type": "notice", "message": message})

    async def send_capture(message: dict[str, Any]) -> None:
        await websocket.send_json({"type": "capture", "data": message})

    async def send_audio(message: dict[str, Any]) -> None:
        await websocket.send_json({"type": "audio", "data": message})

    async def send_error(error: CoachError) -> None:
        await websocket.send_json({"type": "error", "code": error.code, "message": error.message})

    capture = orchestrator.speech_capture
    playback = orchestrator.speech_playback

    orchestrator.on_state_change(send_state)
    orchestrator.on_notice(send_notice)
    if isinstance(capture, RelayedSpeechCapture):
        capture.add_control_sink(send_capture)
    if isinstance(playback, EdgeTTSPlayback):
        playback.add_audio_sink(send_audio)

    async def run_action(action) -> None:
        try:
            await action
        except StateTransitionError as e:
            await send_error(e)
        except Exception as e:
            logger.exception("Interview action failed")
            await websocket.send_json({"type": "error", "code": "INTERNAL_ERROR", "message": str(e)})

    actions = {
        "begin_with_job_description": orchestrator.begin_with_job_description,
        "start_listening": orchestrator.start_listening,
        "stop_listening": orchestrator.stop_listening,
        "reset_interview": orchestrator.reset_interview,
    }
    background: set[asyncio.Task] = set()

    try:
        await send_state(orchestrator.snapshot())

        while True:
            try:
                data = await websocket.receive_json()
            except ValueError as e:
                logger.warning(f"Ignoring non-JSON WebSocket message: {e}")
                continue
            if not isinstance(data, dict):
                logger.warning(f"Ignoring WebSocket message that is not an object: {type(data).__name__}")
                continue

            message_type = data.get("type")

            if message_type == "recognition":
                try:
                    message = RecognitionMessage.model_validate(data)
                except ValidationError as e:
                    logger.warning(f"Malformed recognition message: {e}")
                    continue
                if isinstance(capture, RelayedSpeechCapture):
                    await capture.push(RecognitionUpdate(
                        final_fragments=message.final,
                        interim_fragment=message.interim,
                    ))

            elif message_type == "capabilities":
                if isinstance(capture, RelayedSpeechCapture):
                    capture.set_client_support(bool(data.get("speech_recognition", False)))
                await send_state(orchestrator.snapshot())

            elif message_type == "set_job_description":
                await run_action(orchestrator.set_job_description(str(data.get("text", ""))))

            elif message_type == "start_interview":
                # Question generation can take a while; keep reading (e.g. reset)
                task = asyncio.create_task(run_action(orchestrator.start_interview()))
                background.add(task)
                task.add_done_callback(background.discard)

            elif message_type in actions:
                await run_action(actions[message_type]())

            elif message_type == "ping":
                await websocket.send_json({"type": "pong"})

    except WebSocketDisconnect:
        # Client disconnected
        pass
    finally:
        orchestrator.remove_state_listener(send_state)
        orchestrator.remove_notice_listener(send_notice)
        if isinstance(capture, RelayedSpeechCapture):
            capture.remove_control_sink(send_capture)
        if isinstance(playback, EdgeTTSPlayback):
            playback.remove_audio_sink(send_audio)
