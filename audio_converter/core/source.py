"""Sample source: native decoding with a synthetic-tone fallback.

WHY: Downstream stages should never have to special-case "decoding
failed". When the decoder rejects a file, the source substitutes a
deterministic test tone so the file still produces a valid output.
This silently replaces the user's audio with a 440 Hz tone, so every
substitution is logged and flagged on the returned buffer
(``synthetic=True``). Strict mode turns the substitution off and lets
the decode failure reach the pipeline as a per-file failure.

HOW: ``decode()`` awaits the injected decoder. If the decoder rejects
the data or throws anything else, it logs a warning and returns
``synthesize(fallback_duration_s)``: two identical channels of
``sin(2*pi*440*i / rate) * 0.3`` at the source's sample rate.

RULES:
- The decoder is tried first, regardless of the detected format tag
- Any exception from the decoder triggers the fallback
- Synthetic buffers: 2 channels, 440 Hz, amplitude 0.3, source sample rate
- Frame count = int(duration_s * sample_rate)
- strict=True raises DecodeError instead of synthesizing; non-DecodeError
  failures are wrapped so the pipeline reports them as decode failures
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import numpy as np

from audio_converter.config import FALLBACK_DURATION_S, FALLBACK_SAMPLE_RATE
from audio_converter.core.errors import DecodeError
from audio_converter.core.ir import FormatTag, SampleBuffer
from audio_converter.decoders.base import BaseDecoder, UnavailableDecoder

logger = logging.getLogger(__name__)

TONE_FREQUENCY_HZ = 440.0
TONE_AMPLITUDE = 0.3
TONE_CHANNELS = 2


class SampleSource:
    """Turns raw file bytes into a SampleBuffer for one batch.

    WHY: The decoding capability is the only shared resource in a batch.
    Holding it here, together with the fallback parameters, gives the
    batch one explicit, caller-owned handle instead of a process-wide
    audio context.

    RULES:
    - decoder=None means no decoding capability (UnavailableDecoder)
    - sample_rate must be positive; it applies to synthesized audio only
    """

    def __init__(
        self,
        decoder: Optional[BaseDecoder] = None,
        sample_rate: int = FALLBACK_SAMPLE_RATE,
        fallback_duration_s: float = FALLBACK_DURATION_S,
        strict: bool = False,
    ) -> None:
        if sample_rate <= 0:
            raise ValueError("sample_rate must be positive, got {}".format(sample_rate))
        if fallback_duration_s < 0:
            raise ValueError(
                "fallback_duration_s must not be negative, got {}".format(fallback_duration_s)
            )
        self.decoder = decoder if decoder is not None else UnavailableDecoder()
        self.sample_rate = int(sample_rate)
        self.fallback_duration_s = fallback_duration_s
        self.strict = strict

    async def decode(self, data: bytes, tag: FormatTag) -> SampleBuffer:
        """Decode ``data``, substituting a synthetic tone on failure.

        Args:
            data: Complete file contents.
            tag: Format detected by the sniffer (used for logging only).

        Returns:
            The decoded buffer, or a synthetic one flagged ``synthetic=True``.

        Raises:
            DecodeError: only when the source is strict.
        """
        try:
            return await self.decoder.decode(data)
        except Exception as exc:
            if self.strict:
                if isinstance(exc, DecodeError):
                    raise
                raise DecodeError(str(exc) or type(exc).__name__) from exc
            logger.warning(
                "%s decoding failed, substituting a synthetic %g Hz tone: %s",
                tag.value,
                TONE_FREQUENCY_HZ,
                exc,
            )
            return self.synthesize(self.fallback_duration_s)

    def synthesize(self, duration_s: float = FALLBACK_DURATION_S) -> SampleBuffer:
        """Generate the deterministic stereo test tone.

        Args:
            duration_s: Length of the tone in seconds.

        Returns:
            A 2-channel SampleBuffer at this source's sample rate.
        """
        frame_count = int(duration_s * self.sample_rate)
        index = np.arange(frame_count, dtype=np.float64)
        tone = np.sin(2 * math.pi * TONE_FREQUENCY_HZ * index / self.sample_rate) * TONE_AMPLITUDE
        channels = np.tile(tone.astype(np.float32), (TONE_CHANNELS, 1))
        return SampleBuffer(channels=channels, sample_rate=self.sample_rate, synthetic=True)
