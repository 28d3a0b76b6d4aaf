"""Canonical RIFF/WAVE encoder with 16-bit PCM samples.

WHY: WAV is the one container every player opens and the only one
the converter writes natively. Its layout is fixed and byte-exact, so
other tools (and the tests) can rely on the 44-byte header.

HOW: Quantizes each channel to signed 16-bit integers with numpy,
interleaves frames by transposing the (channels, frames) array, and
prefixes the canonical header packed with ``struct``.

RULES:
- Header is exactly 44 bytes, little-endian throughout
- RIFF size = 36 + data bytes; data bytes = frames * channels * 2
- fmt chunk: size 16, PCM (1), channels, rate, byte rate, block align, 16 bits
- Samples clamp to [-1, 1]; negatives scale by 32768, the rest by 32767
- Scaled values truncate toward zero; NaN encodes as 0
- Frames are interleaved in increasing channel order
- Output suffix: ".wav"; media type: "audio/wav"
"""

from __future__ import annotations

import struct

import numpy as np

from audio_converter.core.ir import SampleBuffer
from audio_converter.encoders.base import BaseEncoder, EncodedAudio

WAV_HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
WAVE_FORMAT_PCM = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")

_NEGATIVE_SCALE = 32768.0
_POSITIVE_SCALE = 32767.0


def quantize_pcm16(samples: np.ndarray) -> np.ndarray:
    """Map float samples to little-endian signed 16-bit integers.

    The scaling is asymmetric so that -1.0 lands on -32768 and 1.0 on
    32767 without overflowing either end of the int16 range.

    Args:
        samples: Float samples of any shape.

    Returns:
        An array of the same shape with dtype ``<i2``.
    """
    values = np.nan_to_num(
        np.asarray(samples, dtype=np.float64), nan=0.0, posinf=1.0, neginf=-1.0
    )
    clipped = np.clip(values, -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * _NEGATIVE_SCALE, clipped * _POSITIVE_SCALE)
    return np.trunc(scaled).astype("<i2")


def build_wav_header(channel_count: int, sample_rate: int, frame_count: int) -> bytes:
    """Pack the canonical 44-byte RIFF/WAVE header for 16-bit PCM."""
    data_bytes = frame_count * channel_count * BYTES_PER_SAMPLE
    return _HEADER.pack(
        b"RIFF",
        36 + data_bytes,
        b"WAVE",
        b"fmt ",
        16,
        WAVE_FORMAT_PCM,
        channel_count,
        sample_rate,
        sample_rate * channel_count * BYTES_PER_SAMPLE,
        channel_count * BYTES_PER_SAMPLE,
        BITS_PER_SAMPLE,
        b"data",
        data_bytes,
    )


def encode_wav(buffer: SampleBuffer) -> bytes:
    """Serialize a SampleBuffer into canonical WAV bytes."""
    header = build_wav_header(buffer.channel_count, buffer.sample_rate, buffer.frame_count)
    # (channels, frames) -> (frames, channels) so C order interleaves frames.
    payload = quantize_pcm16(buffer.channels).T.tobytes()
    return header + payload


class WavEncoder(BaseEncoder):
    """Encoder that writes canonical 16-bit PCM WAV files."""

    key = "wav"

    @property
    def name(self) -> str:
        return "WAV (16-bit PCM)"

    def encode(self, buffer: SampleBuffer) -> EncodedAudio:
        return self.encode_as(buffer, self.key)

    def encode_as(self, buffer: SampleBuffer, requested_format: str) -> EncodedAudio:
        """Encode to WAV while recording which container was requested."""
        return EncodedAudio(
            content=encode_wav(buffer),
            container=self.key,
            requested_format=requested_format,
            media_type="audio/wav",
            suffix=".wav",
        )
