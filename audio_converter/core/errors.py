"""Exception hierarchy for the conversion pipeline.

WHY: The pipeline must turn every per-file problem into a failure
outcome without aborting the batch. A shared base class lets it catch
exactly the expected errors and still let programming errors be logged
with a traceback.

HOW: ConversionError is the root. Each pipeline step that can fail has
its own subclass carrying the offending value.

RULES:
- FileReadError is also an OSError (the input could not be read)
- DecodeError never reaches the caller unless strict decoding is on
- UnsupportedFormatError is raised before any bytes are produced
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every expected per-file conversion error."""


class FileReadError(ConversionError, OSError):
    """Raised when an input file cannot be read or the read is aborted.

    RULES:
    - filename names the input that failed
    """

    def __init__(self, filename: str, reason: str) -> None:
        self.filename = filename
        self.reason = reason
        super().__init__("Cannot read file: {}".format(reason))

    def __str__(self) -> str:
        return "Cannot read file: {}".format(self.reason)


class UnrecognizedFormatError(ConversionError):
    """Raised when sniffing classifies a file as unknown."""

    def __init__(self, filename: str) -> None:
        self.filename = filename
        super().__init__("Unrecognized audio format")


class UnsupportedFormatError(ConversionError):
    """Raised when the requested target container has no encoder."""

    def __init__(self, target_format: str) -> None:
        self.target_format = target_format
        super().__init__("Unsupported target format: {}".format(target_format))


class DecodeError(ConversionError):
    """Raised by a decoder that cannot turn the bytes into samples."""


class DecoderUnavailableError(DecodeError):
    """Raised by the decoder that stands in for a missing decoding capability."""
