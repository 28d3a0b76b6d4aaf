"""Decoding capability interface and the "unavailable" variant.

WHY: Turning compressed or containerised audio into samples is the job
of a host library, and that library may be missing or may reject a
file. The pipeline depends on an injected decoder object rather than
probing the environment, so tests and embedders can swap it freely.

HOW: BaseDecoder is an ABC with a ``name`` property and an async
``decode()`` method. UnavailableDecoder is the explicit stand-in for an
absent capability: every call raises DecoderUnavailableError, which
SampleSource treats like any other decode failure.

RULES:
- decode() returns a SampleBuffer or raises DecodeError
- Decoders are created once per batch and never mutated while in use
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from audio_converter.core.errors import DecoderUnavailableError
from audio_converter.core.ir import SampleBuffer


class BaseDecoder(ABC):
    """Abstract base for decoding capabilities."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable decoder name, e.g. 'libsndfile'."""

    @abstractmethod
    async def decode(self, data: bytes) -> SampleBuffer:
        """Decode raw file bytes into samples.

        Raises:
            DecodeError: if the bytes cannot be decoded.
        """


class UnavailableDecoder(BaseDecoder):
    """Decoder used when no native decoding capability is configured."""

    @property
    def name(self) -> str:
        return "unavailable"

    async def decode(self, data: bytes) -> SampleBuffer:
        raise DecoderUnavailableError("No native audio decoder is available")
