"""Intermediate representation dataclasses for the conversion pipeline.

WHY: Every stage of the pipeline hands data to the next one. Sniffing
produces a format tag, decoding produces samples, encoding consumes
samples, and the batch driver collects one outcome per file. Typed
containers keep those hand-offs explicit and make each stage testable
on its own.

HOW: Five types form the vocabulary of the pipeline:
  FormatTag          — container kind detected from magic bytes
  SampleBuffer       — multi-channel float samples at one sample rate
  ProgressEvent      — fraction + message emitted by the batch driver
  ConversionSuccess  — encoded output for one input file
  ConversionFailure  — human-readable error for one input file

RULES:
- SampleBuffer.channels is a 2-D float32 array shaped (channels, frames)
- Every channel has the same length; channel count >= 1; sample rate > 0
- Samples are nominally in [-1.0, 1.0] but may exceed it until encoding
- Exactly one outcome is produced per input file
- Python 3.9 compatible — no match/case, no slots=True
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import PurePath
from typing import TYPE_CHECKING, Optional, Sequence, Union

import numpy as np

if TYPE_CHECKING:
    from audio_converter.core.pipeline import SourceFile
    from audio_converter.encoders.base import EncodedAudio


class FormatTag(str, enum.Enum):
    """Container kind classified from a file's leading bytes.

    WHY: The pipeline refuses files it cannot recognise before spending
    any effort on decoding them.

    HOW: Inherits from str so values print and serialize as plain
    strings ("wav", "flac", ...).

    RULES:
    - UNKNOWN is a hard failure for the pipeline, never a decode attempt
    """

    WAV = "wav"
    FLAC = "flac"
    MP3 = "mp3"
    UNKNOWN = "unknown"


@dataclass
class SampleBuffer:
    """Decoded audio: one row of float samples per channel.

    WHY: Decoders and encoders need a single canonical form to meet in.
    Keeping all channels in one numpy array makes quantization and
    interleaving vectorised instead of per-sample Python loops.

    HOW: Validates its shape and sample rate on construction. The
    ``synthetic`` flag records that the samples are a generated test
    tone rather than the user's audio.

    RULES:
    - channels.shape == (channel_count, frame_count)
    - channel_count >= 1, frame_count >= 0
    - sample_rate is a positive integer (Hz)
    """

    channels: np.ndarray
    sample_rate: int
    synthetic: bool = False

    def __post_init__(self) -> None:
        self.channels = np.asarray(self.channels, dtype=np.float32)
        if self.channels.ndim != 2:
            raise ValueError(
                "SampleBuffer needs a 2-D (channels, frames) array, got {} dimension(s)".format(
                    self.channels.ndim
                )
            )
        if self.channels.shape[0] < 1:
            raise ValueError("SampleBuffer needs at least one channel")
        if int(self.sample_rate) != self.sample_rate or self.sample_rate <= 0:
            raise ValueError(
                "Sample rate must be a positive integer, got {}".format(self.sample_rate)
            )
        self.sample_rate = int(self.sample_rate)

    @classmethod
    def from_channels(
        cls,
        channels: Sequence[Sequence[float]],
        sample_rate: int,
        synthetic: bool = False,
    ) -> SampleBuffer:
        """Build a buffer from per-channel sample sequences.

        Raises:
            ValueError: if the channels have different lengths.
        """
        if len(channels) == 0:
            raise ValueError("SampleBuffer needs at least one channel")
        lengths = {len(channel) for channel in channels}
        if len(lengths) > 1:
            raise ValueError(
                "All channels must have the same length, got lengths {}".format(
                    sorted(lengths)
                )
            )
        return cls(
            channels=np.array(channels, dtype=np.float32),
            sample_rate=sample_rate,
            synthetic=synthetic,
        )

    @property
    def channel_count(self) -> int:
        return int(self.channels.shape[0])

    @property
    def frame_count(self) -> int:
        return int(self.channels.shape[1])

    @property
    def duration_s(self) -> float:
        return self.frame_count / self.sample_rate


@dataclass(frozen=True)
class ProgressEvent:
    """One progress notification from the batch driver.

    RULES:
    - fraction is in [0.0, 1.0] and never decreases within a batch
    - the final event of a batch always has fraction 1.0
    """

    fraction: float
    message: str


@dataclass
class ConversionSuccess:
    """A file that was converted and encoded.

    WHY: The caller needs the output bytes plus enough metadata to name
    and label them: which container was actually written, whether a
    compressed target was substituted, and whether the samples are a
    synthetic stand-in for audio that could not be decoded.

    RULES:
    - success is always True
    - encoded.container may differ from target_format (substitution)
    """

    source_file: SourceFile
    encoded: EncodedAudio
    target_format: str
    detected_format: FormatTag
    synthetic: bool = False
    success: bool = field(default=True, init=False)

    @property
    def output_bytes(self) -> bytes:
        return self.encoded.content

    @property
    def container(self) -> str:
        return self.encoded.container

    @property
    def substituted(self) -> bool:
        return self.encoded.substituted

    @property
    def output_name(self) -> str:
        """Output filename: the source stem plus the container's suffix."""
        return "{}{}".format(PurePath(self.source_file.name).stem, self.encoded.suffix)


@dataclass
class ConversionFailure:
    """A file that could not be converted.

    RULES:
    - success is always False
    - error is human-readable and names the source file
    """

    source_file: SourceFile
    error: str
    target_format: str
    detected_format: Optional[FormatTag] = None
    success: bool = field(default=False, init=False)


ConversionOutcome = Union[ConversionSuccess, ConversionFailure]
