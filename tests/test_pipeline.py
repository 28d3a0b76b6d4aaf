"""Unit tests for single-file conversion.

WHY: convert_one() is the boundary where every per-file problem turns
into a failure outcome. If an exception leaked here, one bad file would
abort a whole batch.

HOW: Each failure point (read, sniff, decode in strict mode, encode)
is triggered in isolation with in-memory files and stub decoders, and
the resulting outcome is inspected.

RULES:
- convert_one() must never raise
- Failure messages always name the source file
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from audio_converter.core.errors import DecodeError
from audio_converter.core.ir import ConversionFailure, ConversionSuccess, FormatTag
from audio_converter.core.pipeline import ConversionPipeline, InMemoryFile, LocalFile
from audio_converter.core.source import SampleSource
from audio_converter.decoders import SoundFileDecoder
from audio_converter.encoders.wav import encode_wav

from conftest import (
    FAKE_FLAC_BYTES,
    FAKE_MP3_SYNC_BYTES,
    UNKNOWN_BYTES,
    FailingDecoder,
    UnreadableFile,
)


def _pipeline(decoder=None, **kwargs) -> ConversionPipeline:
    return ConversionPipeline(SampleSource(decoder=decoder, **kwargs))


def _convert(pipeline, file, target="wav"):
    return asyncio.run(pipeline.convert_one(file, target))


class TestSuccess:
    """Readable, recognised files become ConversionSuccess."""

    def test_decoded_wav_to_wav(self, stub_decoder, stereo_buffer, wav_file):
        outcome = _convert(_pipeline(stub_decoder), wav_file)

        assert isinstance(outcome, ConversionSuccess)
        assert outcome.success is True
        assert outcome.source_file is wav_file
        assert outcome.target_format == "wav"
        assert outcome.detected_format is FormatTag.WAV
        assert outcome.output_bytes == encode_wav(stereo_buffer)
        assert outcome.synthetic is False
        assert outcome.output_name == "song.wav"

    def test_real_decoder_keeps_native_layout(self, wav_file):
        outcome = _convert(_pipeline(SoundFileDecoder()), wav_file)
        assert outcome.success is True
        assert outcome.synthetic is False
        # 44-byte header + 4 stereo frames of 16-bit samples
        assert len(outcome.output_bytes) == 44 + 4 * 2 * 2

    def test_flac_target_is_substituted(self, stub_decoder, wav_file):
        outcome = _convert(_pipeline(stub_decoder), wav_file, target="flac")
        assert outcome.success is True
        assert outcome.target_format == "flac"
        assert outcome.container == "wav"
        assert outcome.substituted is True
        assert outcome.output_bytes[:4] == b"RIFF"

    def test_decode_failure_yields_synthetic_success(self):
        pipeline = _pipeline(FailingDecoder(), sample_rate=8000, fallback_duration_s=1.0)
        outcome = _convert(pipeline, InMemoryFile("broken.flac", FAKE_FLAC_BYTES))

        assert outcome.success is True
        assert outcome.synthetic is True
        assert outcome.detected_format is FormatTag.FLAC
        assert len(outcome.output_bytes) == 44 + 8000 * 2 * 2

    def test_decoder_crash_yields_synthetic_success(self, wav_file):
        decoder = MagicMock()
        decoder.decode = AsyncMock(side_effect=RuntimeError("EncodingError: unable to decode audio data"))
        pipeline = ConversionPipeline(SampleSource(decoder=decoder, sample_rate=8000))

        outcome = _convert(pipeline, wav_file)

        assert outcome.success is True
        assert outcome.synthetic is True
        assert outcome.detected_format is FormatTag.WAV

    def test_no_decoder_yields_synthetic_success(self):
        outcome = _convert(_pipeline(None), InMemoryFile("a.mp3", FAKE_MP3_SYNC_BYTES))
        assert outcome.success is True
        assert outcome.synthetic is True

    def test_local_file(self, tmp_path, stereo_wav_bytes, stub_decoder):
        path = tmp_path / "take.wav"
        path.write_bytes(stereo_wav_bytes)
        file = LocalFile(path)
        assert file.name == "take.wav"
        assert file.size == len(stereo_wav_bytes)

        outcome = _convert(_pipeline(stub_decoder), file)
        assert outcome.success is True
        assert stub_decoder.calls == [stereo_wav_bytes]


class TestFailures:
    """Each failure point becomes a ConversionFailure naming the file."""

    def test_unreadable_file(self, stub_decoder):
        outcome = _convert(_pipeline(stub_decoder), UnreadableFile("locked.wav"))

        assert isinstance(outcome, ConversionFailure)
        assert outcome.success is False
        assert "locked.wav" in outcome.error
        assert "Cannot read file" in outcome.error
        assert "Permission denied" in outcome.error
        assert outcome.detected_format is None
        assert stub_decoder.calls == []

    def test_missing_local_file(self, tmp_path, stub_decoder):
        outcome = _convert(_pipeline(stub_decoder), LocalFile(tmp_path / "gone.wav"))
        assert outcome.success is False
        assert outcome.error.startswith("Failed to convert gone.wav: Cannot read file")

    def test_unknown_format_skips_decoding(self):
        decoder = MagicMock()
        decoder.decode = AsyncMock()
        pipeline = ConversionPipeline(SampleSource(decoder=decoder))

        outcome = _convert(pipeline, InMemoryFile("clip.ogg", UNKNOWN_BYTES))

        assert outcome.success is False
        assert outcome.error == "Failed to convert clip.ogg: Unrecognized audio format"
        assert outcome.detected_format is FormatTag.UNKNOWN
        decoder.decode.assert_not_called()

    def test_empty_file_is_unrecognized(self, stub_decoder):
        outcome = _convert(_pipeline(stub_decoder), InMemoryFile("empty.wav", b""))
        assert outcome.success is False
        assert "Unrecognized audio format" in outcome.error

    def test_unsupported_target(self, stub_decoder, wav_file):
        outcome = _convert(_pipeline(stub_decoder), wav_file, target="ogg")
        assert outcome.success is False
        assert outcome.target_format == "ogg"
        assert outcome.error == "Failed to convert song.wav: Unsupported target format: ogg"

    def test_strict_decode_failure(self):
        pipeline = _pipeline(FailingDecoder("bad frame header"), strict=True)
        outcome = _convert(pipeline, InMemoryFile("bad.mp3", FAKE_MP3_SYNC_BYTES))
        assert outcome.success is False
        assert outcome.detected_format is FormatTag.MP3
        assert outcome.error == "Failed to convert bad.mp3: bad frame header"

    def test_unexpected_exception_is_contained(self, stub_decoder, wav_file, caplog, monkeypatch):
        def broken_encode(buffer, target_format):
            raise ZeroDivisionError("division by zero")

        monkeypatch.setattr("audio_converter.core.pipeline.encode", broken_encode)

        outcome = _convert(_pipeline(stub_decoder), wav_file)

        assert outcome.success is False
        assert "song.wav" in outcome.error
        assert "division by zero" in outcome.error
        assert "Unexpected error while converting song.wav" in caplog.text

    @pytest.mark.parametrize("error", [IsADirectoryError(21, "Is a directory"), OSError("aborted")])
    def test_os_errors_are_read_failures(self, stub_decoder, error):
        outcome = _convert(_pipeline(stub_decoder), UnreadableFile("x.wav", error))
        assert outcome.success is False
        assert "Cannot read file" in outcome.error


def test_strict_mode_does_not_affect_working_decoder(stub_decoder, wav_file):
    outcome = _convert(_pipeline(stub_decoder, strict=True), wav_file)
    assert outcome.success is True


def test_decode_error_is_not_raised_by_default():
    pipeline = _pipeline(FailingDecoder())
    try:
        _convert(pipeline, InMemoryFile("x.flac", FAKE_FLAC_BYTES))
    except DecodeError:  # pragma: no cover
        pytest.fail("DecodeError escaped the pipeline")
