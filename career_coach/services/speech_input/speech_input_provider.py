"""
Description:
Speech input capability for the voice variant of the interview. The
WebSocket handler only knows the SpeechInputProvider interface, so the
interview flow can be exercised without audio hardware or a speech model.

WhisperSpeechInputProvider transcribes base64 encoded audio (WebM/Opus from
the browser's MediaRecorder) with a local faster-whisper model. faster-whisper
is an optional dependency (the `voice` extra) and is imported when the
provider is built.

Dependencies:
- faster-whisper: For audio transcription (optional).
- tempfile: For handing the audio to the model as a file.
- loguru: For logging.
"""
import asyncio
import base64
import binascii
import os
import tempfile
from abc import ABC, abstractmethod

from loguru import logger

from career_coach.core.settings import Settings
from career_coach.errors.exceptions import ConfigurationError, SpeechInputError


class SpeechInputProvider(ABC):
    @abstractmethod
    async def transcribe(self, audio_base64: str) -> str:
        """
        Transcribe base64 encoded audio to text.

        Raises:
            SpeechInputError: If the audio cannot be transcribed.
        """


class WhisperSpeechInputProvider(SpeechInputProvider):
    def __init__(self, model_size: str = "base.en"):
        try:
            from faster_whisper import WhisperModel
        except ImportError as e:
            raise ConfigurationError(
                "Voice input requires faster-whisper. Install the 'voice' extra or set SPEECH_INPUT_ENABLED=false."
            ) from e
        self.model = WhisperModel(model_size, device="cpu", compute_type="int8", num_workers=1, cpu_threads=4)
        logger.info(f"Loaded faster-whisper model {model_size}")

    def _transcribe_sync(self, audio_base64: str) -> str:
        try:
            audio_bytes = base64.b64decode(audio_base64)
        except (binascii.Error, ValueError) as e:
            raise SpeechInputError("Received invalid audio data.") from e
        logger.debug(f"Decoded audio data, size: {len(audio_bytes)} bytes")

        with tempfile.NamedTemporaryFile(delete=False, suffix=".webm") as temp_audio:
            temp_audio.write(audio_bytes)
            temp_path = temp_audio.name

        try:
            segments, _ = self.model.transcribe(
                temp_path,
                beam_size=5,
                temperature=0,
                vad_filter=True,
                condition_on_previous_text=False,
            )
            return " ".join(segment.text.strip() for segment in segments).strip()
        except Exception as e:
            logger.error(f"Error transcribing audio: {e}")
            raise SpeechInputError("Failed to transcribe audio.") from e
        finally:
            try:
                os.unlink(temp_path)
            except OSError as e:
                logger.warning(f"Error removing temporary file {temp_path}: {e}")

    async def transcribe(self, audio_base64: str) -> str:
        # The model is CPU bound; keep it off the event loop
        return await asyncio.to_thread(self._transcribe_sync, audio_base64)


def build_speech_input_provider(settings: Settings):
    """Return the configured provider, or None when voice input is disabled."""
    if not settings.speech_input_enabled:
        logger.info("Speech input disabled")
        return None
    return WhisperSpeechInputProvider(settings.whisper_model_size)
