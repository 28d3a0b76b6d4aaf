"""FLAC and MP3 targets served by WAV substitution.

WHY: Users can pick FLAC or MP3 as a target, but the converter ships
no compressed-audio encoder. Rather than failing those conversions, it
writes WAV data and says so, so the user still gets a playable file.

HOW: SubstitutingEncoder delegates to WavEncoder, logs a warning, and
returns EncodedAudio whose ``container`` is "wav" while
``requested_format`` keeps the caller's choice. Callers inspect
``EncodedAudio.substituted`` to surface the swap.

RULES:
- Never raises for a valid SampleBuffer
- Always logs one WARNING per encode naming both containers
- Output suffix and media type are WAV's, never the requested format's
"""

from __future__ import annotations

import logging

from audio_converter.core.ir import SampleBuffer
from audio_converter.encoders.base import BaseEncoder, EncodedAudio
from audio_converter.encoders.wav import WavEncoder

logger = logging.getLogger(__name__)


class SubstitutingEncoder(BaseEncoder):
    """Base for targets that fall back to WAV output."""

    key = ""
    label = ""

    def __init__(self) -> None:
        self._wav = WavEncoder()

    @property
    def name(self) -> str:
        return "{} (written as WAV)".format(self.label)

    def encode(self, buffer: SampleBuffer) -> EncodedAudio:
        logger.warning(
            "%s encoding is not implemented natively; writing WAV instead",
            self.label,
        )
        return self._wav.encode_as(buffer, self.key)


class FlacEncoder(SubstitutingEncoder):
    key = "flac"
    label = "FLAC"


class Mp3Encoder(SubstitutingEncoder):
    key = "mp3"
    label = "MP3"
