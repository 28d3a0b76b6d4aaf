"""Magic-byte container sniffing.

WHY: File extensions lie. The pipeline decides whether a file is worth
decoding by looking at its first bytes, and rejects anything that does
not look like a supported container before any decoding work happens.

HOW: Inspects at most the first 12 bytes against a short ordered list
of signatures. First match wins.

RULES:
- RIFF at 0..3 and WAVE at 8..11 → wav
- "fLaC" at 0..3 → flac
- 0xFF followed by a byte with the top three bits set (MPEG frame sync) → mp3
- "ID3" at 0..2 (ID3v2 tag in front of MPEG audio) → mp3
- Anything else, including empty or truncated input → unknown
- Never raises; pure function of its input
"""

from __future__ import annotations

from audio_converter.core.ir import FormatTag

SNIFF_LENGTH = 12

_RIFF = b"RIFF"
_WAVE = b"WAVE"
_FLAC = b"fLaC"
_ID3 = b"ID3"
_MPEG_SYNC_MASK = 0xE0


def detect_format(data: bytes) -> FormatTag:
    """Classify a byte blob by its leading magic bytes.

    Args:
        data: The file contents, or any prefix of them.

    Returns:
        The detected FormatTag; FormatTag.UNKNOWN when nothing matches.
    """
    try:
        head = bytes(data[:SNIFF_LENGTH])
    except TypeError:
        return FormatTag.UNKNOWN

    if head[0:4] == _RIFF and head[8:12] == _WAVE:
        return FormatTag.WAV
    if head[0:4] == _FLAC:
        return FormatTag.FLAC
    if len(head) >= 2 and head[0] == 0xFF and head[1] & _MPEG_SYNC_MASK == _MPEG_SYNC_MASK:
        return FormatTag.MP3
    if head[0:3] == _ID3:
        return FormatTag.MP3
    return FormatTag.UNKNOWN
