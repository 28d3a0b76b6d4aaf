"""Shared test fixtures for the audio_converter test suite.

WHY: Most test modules need the same building blocks — small real WAV
files, in-memory input files, and decoders whose behaviour the test
controls. Centralizing them here avoids duplication and keeps every
module working from the same known samples.

HOW: Plain pytest fixtures. WAV bytes are produced with the standard
library ``wave`` module so the tests never depend on the encoder they
are checking. Decoder doubles subclass BaseDecoder and count calls.

RULES:
- Fixture WAVs are 16-bit PCM, little-endian
- Stub decoders never touch libsndfile
- Files that fail to read raise OSError, like a real disk error
"""

import io
import wave
from typing import List, Optional, Sequence

import numpy as np
import pytest

from audio_converter.core.errors import DecodeError
from audio_converter.core.ir import SampleBuffer
from audio_converter.core.pipeline import InMemoryFile
from audio_converter.decoders.base import BaseDecoder


# ---------------------------------------------------------------------------
# Byte builders
# ---------------------------------------------------------------------------


def build_pcm16_wav(
    frames: Sequence[Sequence[int]],
    sample_rate: int = 8000,
) -> bytes:
    """Build a WAV file from integer frames, e.g. [[l0, r0], [l1, r1]]."""
    channel_count = len(frames[0]) if frames else 1
    data = np.asarray(frames, dtype="<i2").reshape(-1, channel_count)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(channel_count)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(data.tobytes())
    return buf.getvalue()


# Minimal headers that sniff as each format but carry no decodable audio.
FAKE_FLAC_BYTES = b"fLaC" + b"\x00" * 60
FAKE_MP3_SYNC_BYTES = b"\xff\xfb\x90\x64" + b"\x00" * 60
FAKE_ID3_BYTES = b"ID3\x04\x00\x00\x00\x00\x00\x00" + b"\x00" * 60
UNKNOWN_BYTES = b"OggS\x00\x02" + b"\x00" * 60


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class StubDecoder(BaseDecoder):
    """Decoder that returns a fixed buffer and records its inputs."""

    def __init__(self, buffer: SampleBuffer) -> None:
        self.buffer = buffer
        self.calls: List[bytes] = []

    @property
    def name(self) -> str:
        return "stub"

    async def decode(self, data: bytes) -> SampleBuffer:
        self.calls.append(data)
        return self.buffer


class FailingDecoder(BaseDecoder):
    """Decoder that rejects every input."""

    def __init__(self, message: str = "corrupt stream") -> None:
        self.message = message
        self.calls = 0

    @property
    def name(self) -> str:
        return "failing"

    async def decode(self, data: bytes) -> SampleBuffer:
        self.calls += 1
        raise DecodeError(self.message)


class UnreadableFile:
    """Input file whose read always fails with an OS error."""

    def __init__(self, name: str, error: Optional[OSError] = None) -> None:
        self.name = name
        self.size = 0
        self._error = error or PermissionError(13, "Permission denied")

    def read_bytes(self) -> bytes:
        raise self._error


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def stereo_wav_bytes():
    """Four stereo frames at 8 kHz with distinct left/right values."""
    return build_pcm16_wav(
        [[0, 0], [16384, -16384], [-32768, 32767], [100, -100]],
        sample_rate=8000,
    )


@pytest.fixture
def stereo_buffer():
    """A small stereo buffer with exact 16-bit boundary values."""
    return SampleBuffer.from_channels(
        [[0.0, 1.0, -1.0, 0.5], [0.0, -0.5, 2.0, -3.0]],
        sample_rate=22050,
    )


@pytest.fixture
def stub_decoder(stereo_buffer):
    return StubDecoder(stereo_buffer)


@pytest.fixture
def failing_decoder():
    return FailingDecoder()


@pytest.fixture
def wav_file(stereo_wav_bytes):
    return InMemoryFile(name="song.wav", data=stereo_wav_bytes)
