"""
Description:
WebSocket route for the chat variant of the mock interview.

Each connection owns one interview session, discarded when the socket closes.
Messages are handled in arrival order.

Client messages:
- { "type": "setup", "jobTitle": "...", "companyName": "...", "jobDescription": "..." }
- { "type": "answer", "content": "..." }
- { "type": "reset" }
- { "type": "audio_chunk", "content": "BASE64_AUDIO" }   (voice mode)
- { "type": "audio_end" }                                 (voice mode)

Server messages carry the current session view:
- question, summary, transcript, incremental_transcript, reset, error

In voice mode the final transcript of a recording is submitted as the answer.

Dependencies:
- fastapi: For WebSocket handling.
- pydantic: For validating client messages.
- loguru: For logging.
"""
import json
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError

from career_coach.constants.interview_constants import VOICE_INPUT_UNAVAILABLE_MESSAGE
from career_coach.core.dependencies import (
    get_interview_service,
    get_session_registry,
    get_speech_input_provider,
)
from career_coach.errors.exceptions import CareerCoachError, SpeechInputError
from career_coach.helper.markdown_cleaner import clean_markdown
from career_coach.schemas.interview.interview_message import MessageRole
from career_coach.schemas.interview.interview_view import InterviewSessionView
from career_coach.schemas.interview.session_state import InterviewPhase, InterviewSessionState
from career_coach.schemas.websocket.websocket_message import WebSocketClientMessage, WebSocketServerMessage
from career_coach.services.interview.interview_service import InterviewService
from career_coach.services.speech_input.audio_buffer import IncrementalAudioBuffer
from career_coach.services.speech_input.speech_input_provider import SpeechInputProvider

router = APIRouter(
    prefix="/api/interviews",
    tags=["interview-websocket"],
)

UNSUPPORTED_MESSAGE = "Unsupported message."


async def _send(websocket: WebSocket, state: InterviewSessionState, message_type: str, content: str = "") -> None:
    message = WebSocketServerMessage(
        type=message_type,
        content=content,
        session=InterviewSessionView.from_state(state),
    )
    await websocket.send_json(message.model_dump(mode="json"))


async def _send_progress(websocket: WebSocket, state: InterviewSessionState) -> None:
    """Send the outcome of a turn: the summary, or the latest question."""
    if state.phase == InterviewPhase.SUMMARY:
        await _send(websocket, state, "summary")
        return
    last = state.last_message()
    if last is not None and last.role == MessageRole.MODEL:
        await _send(websocket, state, "question", clean_markdown(last.content))


class InterviewConnection:
    """Handles the messages of one WebSocket connection."""

    def __init__(
        self,
        websocket: WebSocket,
        state: InterviewSessionState,
        service: InterviewService,
        speech_input: Optional[SpeechInputProvider],
    ):
        self.websocket = websocket
        self.state = state
        self.service = service
        self.speech_input = speech_input
        self.audio_buffer = IncrementalAudioBuffer()

    async def handle(self, message: WebSocketClientMessage) -> None:
        if message.type == "setup":
            await self.service.start_interview(
                self.state, message.jobTitle or "", message.companyName, message.jobDescription
            )
            await _send_progress(self.websocket, self.state)
        elif message.type == "answer":
            await self.service.submit_answer(self.state, message.content or "")
            await _send_progress(self.websocket, self.state)
        elif message.type == "reset":
            self.audio_buffer.clear()
            self.service.reset(self.state)
            await _send(self.websocket, self.state, "reset")
        elif message.type == "audio_chunk":
            await self._handle_audio_chunk(message.content or "")
        elif message.type == "audio_end":
            await self._handle_audio_end()

    def _require_speech_input(self) -> SpeechInputProvider:
        if self.speech_input is None:
            raise SpeechInputError(VOICE_INPUT_UNAVAILABLE_MESSAGE)
        return self.speech_input

    async def _handle_audio_chunk(self, chunk: str) -> None:
        speech_input = self._require_speech_input()
        self.audio_buffer.add_chunk(chunk)
        if not self.audio_buffer.should_do_incremental_transcription():
            return
        transcript = await speech_input.transcribe(self.audio_buffer.get_audio_data())
        self.audio_buffer.mark_incremental_transcription_done()
        await _send(self.websocket, self.state, "incremental_transcript", transcript)

    async def _handle_audio_end(self) -> None:
        speech_input = self._require_speech_input()
        if not self.audio_buffer.has_chunks():
            return
        audio = self.audio_buffer.get_audio_data()
        self.audio_buffer.clear()
        transcript = await speech_input.transcribe(audio)
        await _send(self.websocket, self.state, "transcript", transcript)
        if transcript.strip():
            await self.service.submit_answer(self.state, transcript)
            await _send_progress(self.websocket, self.state)


@router.websocket("/ws")
async def interview_websocket(websocket: WebSocket):
    registry = get_session_registry(websocket)
    state = registry.create()
    connection = InterviewConnection(
        websocket,
        state,
        get_interview_service(websocket),
        get_speech_input_provider(websocket),
    )

    await websocket.accept()
    logger.info(f"WebSocket connected for interview session {state.sessionId}")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = WebSocketClientMessage.model_validate(json.loads(raw))
            except json.JSONDecodeError as e:
                logger.warning(f"WebSocket message is not valid JSON: {e.msg}")
                await _send(websocket, state, "error", UNSUPPORTED_MESSAGE)
                continue
            except ValidationError as e:
                logger.warning(f"Invalid WebSocket message: {e.error_count()} error(s)")
                await _send(websocket, state, "error", UNSUPPORTED_MESSAGE)
                continue

            try:
                await connection.handle(message)
            except CareerCoachError as e:
                logger.info(f"Session {state.sessionId}: {type(e).__name__}: {e.message}")
                await _send(websocket, state, "error", e.message)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for interview session {state.sessionId}")
    except Exception as e:
        logger.opt(exception=e).error(f"Unexpected error in interview WebSocket {state.sessionId}")
    finally:
        registry.discard(state.sessionId)
