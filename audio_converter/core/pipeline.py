"""Single-file conversion: read → sniff → decode → encode.

WHY: Each input file either becomes encoded output or a readable error,
never an exception that takes the batch down. This module owns that
boundary: it runs the four steps for one file and translates every
failure into a ConversionFailure naming the file.

HOW: ConversionPipeline wraps a SampleSource (the batch's decoding
handle). ``convert_one()`` reads the file, sniffs it, decodes it through
the source, and encodes it through the encoder registry. Files come in
through the SourceFile protocol so local paths, in-memory blobs, or any
host-specific object can be converted alike.

RULES:
- Read failures (any OSError) become FileReadError
- FormatTag.UNKNOWN becomes UnrecognizedFormatError; no decode attempted
- Decoding never fails unless the source is strict
- Unknown target formats become UnsupportedFormatError
- Failure messages read "Failed to convert <name>: <reason>"
- Unexpected exceptions are logged with traceback and also become failures
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from audio_converter.core.errors import (
    ConversionError,
    FileReadError,
    UnrecognizedFormatError,
)
from audio_converter.core.ir import (
    ConversionFailure,
    ConversionOutcome,
    ConversionSuccess,
    FormatTag,
)
from audio_converter.core.sniffer import detect_format
from audio_converter.core.source import SampleSource
from audio_converter.encoders import encode

logger = logging.getLogger(__name__)


class SourceFile(Protocol):
    """An input file handed to the pipeline by its caller.

    RULES:
    - name is the display name used in progress and error messages
    - read_bytes() returns the complete contents or raises OSError
    """

    @property
    def name(self) -> str: ...

    @property
    def size(self) -> int: ...

    def read_bytes(self) -> bytes: ...


@dataclass(frozen=True)
class LocalFile:
    """A file on the local filesystem."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class InMemoryFile:
    """A file whose contents are already in memory."""

    name: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    def read_bytes(self) -> bytes:
        return self.data


class ConversionPipeline:
    """Converts one file at a time using a shared SampleSource."""

    def __init__(self, source: Optional[SampleSource] = None) -> None:
        self.source = source if source is not None else SampleSource()

    async def convert_one(self, file: SourceFile, target_format: str) -> ConversionOutcome:
        """Convert a single file, returning a success or failure outcome.

        Args:
            file: The input file.
            target_format: Key of the target container, e.g. "wav".

        Returns:
            ConversionSuccess with the encoded bytes, or ConversionFailure
            with a message naming the file. Never raises.
        """
        name = file.name
        detected: Optional[FormatTag] = None
        try:
            data = self._read(file, name)
            detected = detect_format(data)
            logger.info(
                "Processing %s (%d bytes): detected %s, target %s",
                name,
                len(data),
                detected.value,
                target_format,
            )
            if detected is FormatTag.UNKNOWN:
                raise UnrecognizedFormatError(name)

            buffer = await self.source.decode(data, detected)
            encoded = encode(buffer, target_format)
        except ConversionError as exc:
            logger.error("Failed to convert %s: %s", name, exc)
            return ConversionFailure(
                source_file=file,
                error="Failed to convert {}: {}".format(name, exc),
                target_format=target_format,
                detected_format=detected,
            )
        except Exception as exc:
            logger.exception("Unexpected error while converting %s", name)
            return ConversionFailure(
                source_file=file,
                error="Failed to convert {}: {}".format(name, exc),
                target_format=target_format,
                detected_format=detected,
            )

        return ConversionSuccess(
            source_file=file,
            encoded=encoded,
            target_format=target_format,
            detected_format=detected,
            synthetic=buffer.synthetic,
        )

    @staticmethod
    def _read(file: SourceFile, name: str) -> bytes:
        try:
            return bytes(file.read_bytes())
        except FileReadError:
            raise
        except OSError as exc:
            raise FileReadError(name, exc.strerror or str(exc)) from exc
