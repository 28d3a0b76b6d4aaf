"""Native decoding through libsndfile (the ``soundfile`` package).

WHY: libsndfile reads WAV, FLAC, and — from version 1.1 — MP3 straight
from memory, returning float samples at the file's own rate. That is
exactly the "decode these bytes into a float buffer" capability the
pipeline needs, without shelling out to another process.

HOW: ``soundfile.read`` runs on a BytesIO in a worker thread via
``asyncio.to_thread`` so the event loop stays responsive while a large
file decodes. The (frames, channels) result is transposed into the
SampleBuffer layout.

RULES:
- No resampling and no channel remixing; native rate and layout are kept
- Any libsndfile error becomes DecodeError, chained to the libsndfile error
- A decode yielding zero frames is a DecodeError
"""

from __future__ import annotations

import asyncio
import io
import logging

import soundfile as sf

from audio_converter.core.errors import DecodeError
from audio_converter.core.ir import SampleBuffer
from audio_converter.decoders.base import BaseDecoder

logger = logging.getLogger(__name__)


class SoundFileDecoder(BaseDecoder):
    """Decoder backed by libsndfile."""

    @property
    def name(self) -> str:
        return "libsndfile {}".format(sf.__libsndfile_version__)

    async def decode(self, data: bytes) -> SampleBuffer:
        return await asyncio.to_thread(self._decode_sync, data)

    def _decode_sync(self, data: bytes) -> SampleBuffer:
        try:
            samples, sample_rate = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
        except (RuntimeError, TypeError, ValueError) as exc:
            # soundfile.LibsndfileError subclasses RuntimeError
            raise DecodeError("libsndfile could not decode the data: {}".format(exc)) from exc

        if samples.shape[0] == 0:
            raise DecodeError("Decoded audio contains no frames")

        logger.debug(
            "Decoded %d frame(s), %d channel(s) at %d Hz",
            samples.shape[0],
            samples.shape[1],
            sample_rate,
        )
        return SampleBuffer(channels=samples.T, sample_rate=sample_rate)
