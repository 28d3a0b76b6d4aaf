"""Decoding capabilities for the conversion pipeline.

WHY: The pipeline needs one object that turns bytes into samples, and
needs to know explicitly when no such capability exists.

HOW: create_decoder() picks the libsndfile decoder or the explicit
"unavailable" decoder. Callers may also pass their own BaseDecoder.
"""

from __future__ import annotations

from audio_converter.decoders.base import BaseDecoder, UnavailableDecoder
from audio_converter.decoders.soundfile_decoder import SoundFileDecoder


def create_decoder(native: bool = True) -> BaseDecoder:
    """Return the libsndfile decoder, or UnavailableDecoder when ``native`` is False."""
    if native:
        return SoundFileDecoder()
    return UnavailableDecoder()


__all__ = ["BaseDecoder", "SoundFileDecoder", "UnavailableDecoder", "create_decoder"]
