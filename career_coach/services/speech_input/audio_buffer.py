import base64
import binascii
from collections import deque
from typing import List, Optional

from loguru import logger

from career_coach.errors.exceptions import SpeechInputError


class IncrementalAudioBuffer:
    """
    Accumulates base64 audio chunks for one spoken answer.

    Incremental transcription covers the whole recording so far once enough
    new chunks have arrived; the final transcription covers all of it.
    """

    def __init__(self, incremental_size_threshold: int = 5):
        self.chunks = deque()
        self.incremental_size_threshold = incremental_size_threshold
        self.last_incremental_size = 0

    def add_chunk(self, chunk_data: str) -> None:
        """
        Raises:
            SpeechInputError: If the chunk is not valid base64.
        """
        try:
            base64.b64decode(chunk_data, validate=True)
        except (binascii.Error, ValueError) as e:
            raise SpeechInputError("Received an invalid audio chunk.") from e
        self.chunks.append(chunk_data)

    def should_do_incremental_transcription(self) -> bool:
        """Only transcribe once enough NEW chunks have accumulated."""
        return len(self.chunks) >= self.last_incremental_size + self.incremental_size_threshold

    def mark_incremental_transcription_done(self) -> None:
        self.last_incremental_size = len(self.chunks)

    @staticmethod
    def _combine(chunks: List[str]) -> Optional[str]:
        if not chunks:
            return None
        combined_data = b"".join(base64.b64decode(chunk) for chunk in chunks)
        return base64.b64encode(combined_data).decode('utf-8')

    def get_audio_data(self) -> Optional[str]:
        """All audio received so far as one base64 string."""
        logger.debug(f"Combining {len(self.chunks)} audio chunks")
        return self._combine(list(self.chunks))

    def clear(self) -> None:
        self.chunks.clear()
        self.last_incremental_size = 0

    def has_chunks(self) -> bool:
        return bool(self.chunks)
