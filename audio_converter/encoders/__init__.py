"""Container encoder registry — pluggable output hub.

WHY: The pipeline, CLI and report need a single lookup to find the
right encoder by target name. A central dict makes it trivial to add
new containers: create the encoder class, import it here, add one line.

HOW: ENCODERS maps string keys to encoder *classes* (not instances).
``encode()`` instantiates the class for the requested key and runs it.

RULES:
- Keys are the lowercase target names used in CLI flags and config
- Values are BaseEncoder subclasses (not instances)
- Lookup is exact; any other key raises UnsupportedFormatError
- Every encoder listed here must be importable without side effects
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Type

from audio_converter.core.errors import UnsupportedFormatError
from audio_converter.encoders.base import EncodedAudio
from audio_converter.encoders.substitute import FlacEncoder, Mp3Encoder
from audio_converter.encoders.wav import WavEncoder

if TYPE_CHECKING:
    from audio_converter.core.ir import SampleBuffer
    from audio_converter.encoders.base import BaseEncoder

ENCODERS: Dict[str, Type[BaseEncoder]] = {
    "wav": WavEncoder,
    "flac": FlacEncoder,
    "mp3": Mp3Encoder,
}


def get_encoder(target_format: str) -> BaseEncoder:
    """Instantiate the encoder registered for ``target_format``.

    Raises:
        UnsupportedFormatError: if no encoder is registered for the key.
    """
    encoder_cls = ENCODERS.get(target_format)
    if encoder_cls is None:
        raise UnsupportedFormatError(target_format)
    return encoder_cls()


def encode(buffer: SampleBuffer, target_format: str) -> EncodedAudio:
    """Encode ``buffer`` into the container registered for ``target_format``."""
    return get_encoder(target_format).encode(buffer)


__all__ = ["ENCODERS", "EncodedAudio", "encode", "get_encoder"]
