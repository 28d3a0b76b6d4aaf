"""Abstract base encoder and encoded output container.

WHY: Every output container consumes the same SampleBuffer but
produces a different byte layout. This base class enforces a
consistent interface so the pipeline, batch driver and CLI can work
with any encoder generically.

HOW: BaseEncoder is an ABC with two requirements — a ``name`` property
and an ``encode()`` method. EncodedAudio is a plain dataclass that
bundles the bytes with the container actually written, the container
that was asked for, a file suffix, and a MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``encode()``
- ``suffix`` starts with a dot, e.g. ``".wav"``
- ``container`` names the layout of ``content``, not the request;
  they differ when an encoder substitutes another container
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from audio_converter.core.ir import SampleBuffer


@dataclass
class EncodedAudio:
    """One encoded output file.

    Attributes:
        content: The complete container bytes.
        container: Key of the container layout in ``content``, e.g. ``"wav"``.
        requested_format: Key the caller asked for, e.g. ``"flac"``.
        media_type: MIME type for the content, e.g. ``"audio/wav"``.
        suffix: File suffix for the content, e.g. ``".wav"``.
    """

    content: bytes
    container: str
    requested_format: str
    media_type: str
    suffix: str

    @property
    def substituted(self) -> bool:
        """True when the encoder wrote a different container than requested."""
        return self.container != self.requested_format


class BaseEncoder(ABC):
    """Abstract base for all container encoders.

    To add a new output container:
    1. Create a new file in encoders/
    2. Subclass BaseEncoder
    3. Implement encode() and name
    4. Register in ENCODERS dict in encoders/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable container name, e.g. 'WAV (16-bit PCM)'."""

    @abstractmethod
    def encode(self, buffer: SampleBuffer) -> EncodedAudio:
        """Serialize the sample buffer into container bytes.

        Args:
            buffer: Decoded (or synthesized) samples to serialize.

        Returns:
            EncodedAudio holding the bytes and their container metadata.
        """
