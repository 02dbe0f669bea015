import base64

import pytest

from career_coach.errors.exceptions import SpeechInputError
from career_coach.services.speech_input.audio_buffer import IncrementalAudioBuffer


def encode(payload: bytes) -> str:
    return base64.b64encode(payload).decode("utf-8")


class TestIncrementalAudioBuffer:
    def test_combines_chunks_in_order(self):
        buffer = IncrementalAudioBuffer()
        buffer.add_chunk(encode(b"hello "))
        buffer.add_chunk(encode(b"world"))
        assert base64.b64decode(buffer.get_audio_data()) == b"hello world"

    def test_incremental_threshold(self):
        buffer = IncrementalAudioBuffer(incremental_size_threshold=3)
        for index in range(2):
            buffer.add_chunk(encode(bytes([index])))
        assert buffer.should_do_incremental_transcription() is False

        buffer.add_chunk(encode(b"\x02"))
        assert buffer.should_do_incremental_transcription() is True

        buffer.mark_incremental_transcription_done()
        assert buffer.should_do_incremental_transcription() is False

    def test_invalid_chunk_is_rejected(self):
        buffer = IncrementalAudioBuffer()
        with pytest.raises(SpeechInputError):
            buffer.add_chunk("%%% not base64 %%%")
        assert buffer.has_chunks() is False

    def test_clear(self):
        buffer = IncrementalAudioBuffer()
        buffer.add_chunk(encode(b"abc"))
        buffer.mark_incremental_transcription_done()
        buffer.clear()
        assert buffer.has_chunks() is False
        assert buffer.get_audio_data() is None
        assert buffer.last_incremental_size == 0
