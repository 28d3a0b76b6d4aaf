"""Configuration constants, supported formats, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Supported extensions, target formats and the
fallback tone parameters are plain data — not buried in logic — so
they can be changed with confidence.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level sets, tuples and scalars, each overridable through an
environment variable. load_sample_rate() validates the one value that
can make the pipeline misbehave when set wrong.

RULES:
- TARGET_FORMATS mirrors the keys of encoders.ENCODERS
- SUPPORTED_INPUT_EXTENSIONS is a pre-filter only; sniffing decides the format
- Boolean env vars are true only for the literal string "true" (any case)
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory (where the converter is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Formats
# ---------------------------------------------------------------------------

SUPPORTED_INPUT_EXTENSIONS: set[str] = {".wav", ".flac", ".mp3"}
"""Input file extensions accepted by the CLI (lowercase, with dot)."""

TARGET_FORMATS: tuple[str, ...] = ("wav", "flac", "mp3")
"""Target container keys a user may request."""

# ---------------------------------------------------------------------------
# Conversion defaults
# ---------------------------------------------------------------------------

FALLBACK_SAMPLE_RATE = 44100
"""Sample rate for synthesized audio when nothing else is configured."""

DEFAULT_TARGET_FORMAT = os.getenv("AUDIO_CONVERTER_TARGET_FORMAT", "wav")
FALLBACK_DURATION_S = float(os.getenv("AUDIO_CONVERTER_FALLBACK_SECONDS", "2.0"))
DEFAULT_STRICT_DECODE = os.getenv("AUDIO_CONVERTER_STRICT_DECODE", "false").lower() == "true"
DEFAULT_NATIVE_DECODE = os.getenv("AUDIO_CONVERTER_NATIVE_DECODE", "true").lower() == "true"


def load_sample_rate() -> int:
    """Load the sample rate used for synthesized fallback audio.

    WHY: The fallback tone is generated at the converter's own sample
    rate. A zero or negative rate would produce an invalid WAV header.

    HOW: Reads AUDIO_CONVERTER_SAMPLE_RATE from os.environ (populated by
    python-dotenv), falling back to FALLBACK_SAMPLE_RATE.

    RULES:
    - Raises ValueError if the value is not an integer or is not positive
    """
    raw = os.getenv("AUDIO_CONVERTER_SAMPLE_RATE", "").strip()
    if not raw:
        return FALLBACK_SAMPLE_RATE
    try:
        rate = int(raw)
    except ValueError:
        raise ValueError(
            "AUDIO_CONVERTER_SAMPLE_RATE must be an integer, got '{}'".format(raw)
        ) from None
    if rate <= 0:
        raise ValueError(
            "AUDIO_CONVERTER_SAMPLE_RATE must be positive, got {}".format(rate)
        )
    return rate
