"""Command-line interface for the Audio Converter.

WHY: Users need a simple way to re-encode local audio files from the
terminal. The CLI wires together the full pipeline — input selection,
the batch driver with progress output, output saving, and an optional
JSON report — behind a single command.

HOW: Uses argparse to accept input files or directories, the target
format, output directory and decoding options. Runs the async batch via
asyncio.run(). Progress and status messages go to stderr; converted
files are saved next to their source (or to --output-dir).

RULES:
- Positional arguments: one or more files or directories
- Directories contribute their files with a supported extension, sorted
- Files with other extensions are skipped with a message (sniffing still
  decides the real format of the files that are kept)
- --format must be a registered encoder key; checked before any work
- Output naming: {stem}{suffix}, numeric suffix for conflicts (song-2.wav)
- Status output goes to stderr (not stdout)
- Exit status: 0 if every file converted, 1 otherwise
- Python 3.9 compatible — no match/case, no X | Y unions at runtime
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from audio_converter.config import (
    DEFAULT_NATIVE_DECODE,
    DEFAULT_STRICT_DECODE,
    DEFAULT_TARGET_FORMAT,
    FALLBACK_DURATION_S,
    SUPPORTED_INPUT_EXTENSIONS,
    load_sample_rate,
)
from audio_converter.core.batch import convert_files
from audio_converter.core.ir import ConversionOutcome, ConversionSuccess, ProgressEvent
from audio_converter.core.pipeline import LocalFile
from audio_converter.decoders import create_decoder
from audio_converter.encoders import ENCODERS
from audio_converter.report import build_report, write_report

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so the CLI can be piped.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _print_progress(event: ProgressEvent) -> None:
    _status("[{:>3}%] {}".format(int(round(event.fraction * 100)), event.message))


def _collect_inputs(paths: List[str]) -> Tuple[List[LocalFile], List[str]]:
    """Expand CLI paths into convertible files.

    WHY: Users point the CLI at loose files, folders, or both. Only
    files with a supported extension are converted, like a file picker
    filtered to audio types.

    HOW: Directories are scanned non-recursively and sorted. Explicit
    files are kept in the order given. Duplicates are dropped.

    Returns:
        Tuple of (files to convert, human-readable problems).
    """
    files: List[LocalFile] = []
    problems: List[str] = []
    seen: set = set()

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            candidates = sorted(
                p for p in path.iterdir()
                if p.is_file() and p.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS
            )
            if not candidates:
                problems.append("No supported audio files in directory: {}".format(path))
        elif path.is_file():
            if path.suffix.lower() not in SUPPORTED_INPUT_EXTENSIONS:
                problems.append(
                    "Skipping {}: unsupported file type (supported: {})".format(
                        path.name, ", ".join(sorted(SUPPORTED_INPUT_EXTENSIONS))
                    )
                )
                continue
            candidates = [path]
        else:
            problems.append("File not found: {}".format(path))
            continue

        for candidate in candidates:
            key = candidate.resolve()
            if key in seen:
                continue
            seen.add(key)
            files.append(LocalFile(candidate))

    return files, problems


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    WHY: Converting a WAV to WAV in place, or running the converter
    twice, must never overwrite an existing file.

    RULES:
    - First attempt: {stem}{suffix} (e.g. song.wav)
    - Conflict: {stem}-{n}{suffix}, counter starts at 2 and increments
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(stem, counter, suffix)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_outcome(outcome: ConversionSuccess, output_dir: Optional[Path]) -> Path:
    """Write a successful outcome's bytes to disk and return the path."""
    source: LocalFile = outcome.source_file  # type: ignore[assignment]
    target_dir = output_dir if output_dir is not None else source.path.parent
    path = _resolve_output_path(source.path.stem, outcome.encoded.suffix, target_dir)
    path.write_bytes(outcome.output_bytes)
    return path


def _describe(outcome: ConversionOutcome, saved: Optional[Path]) -> str:
    if not outcome.success:
        return "  FAILED  {}".format(outcome.error)
    notes = []
    if outcome.substituted:
        notes.append("{} requested, written as {}".format(
            outcome.target_format.upper(), outcome.container.upper()
        ))
    if outcome.synthetic:
        notes.append("could not decode, contains a synthetic test tone")
    line = "  OK      {} -> {}".format(outcome.source_file.name, saved.name)
    if notes:
        line += " ({})".format("; ".join(notes))
    return line


async def _run_batch(args: argparse.Namespace) -> int:
    """Execute one conversion batch and return the exit status.

    HOW: Collects inputs, builds the decoder, runs the batch driver with
    progress printed to stderr, saves successful outputs, prints a
    summary, and optionally writes the JSON report.
    """
    files, problems = _collect_inputs(args.inputs)
    logger.debug("Collected %d input file(s) from %d path(s)", len(files), len(args.inputs))
    for problem in problems:
        _status(problem)
    if not files:
        print("Error: No audio files to convert.", file=sys.stderr)
        return 1

    output_dir: Optional[Path] = None
    if args.output_dir:
        output_dir = Path(args.output_dir).resolve()
        if not output_dir.is_dir():
            print("Error: Output directory does not exist: {}".format(output_dir), file=sys.stderr)
            return 1

    decoder = create_decoder(native=args.native_decode)
    _status("Converting {} file(s) to {} (decoder: {})".format(
        len(files), args.format, decoder.name
    ))

    outcomes = await convert_files(
        files,
        args.format,
        on_progress=_print_progress,
        decoder=decoder,
        sample_rate=args.sample_rate,
        fallback_duration_s=args.fallback_seconds,
        strict=args.strict_decode,
    )

    saved_paths: Dict[int, Path] = {}
    write_failures = 0
    _status("")
    for index, outcome in enumerate(outcomes):
        saved: Optional[Path] = None
        if outcome.success:
            try:
                saved = _save_outcome(outcome, output_dir)
                saved_paths[index] = saved
            except OSError as exc:
                write_failures += 1
                _status("  FAILED  Cannot write output for {}: {}".format(
                    outcome.source_file.name, exc
                ))
                continue
        _status(_describe(outcome, saved))

    if args.report:
        report_path = write_report(build_report(outcomes, args.format, saved_paths), Path(args.report))
        _status("Report written to {}".format(report_path))

    failed = sum(1 for outcome in outcomes if not outcome.success) + write_failures
    _status("Done! {}/{} file(s) converted.".format(len(outcomes) - failed, len(outcomes)))
    return 0 if failed == 0 else 1


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer, got {}".format(value))
    return number


def _non_negative_float(value: str) -> float:
    number = float(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must not be negative, got {}".format(value))
    return number


def build_parser(default_sample_rate: Optional[int] = None) -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running a batch.

    RULES:
    - Positional: inputs (one or more files or directories)
    - Optional: --format, --output-dir, --report, --verbose
    - Optional: --sample-rate, --fallback-seconds, --strict-decode,
      --native-decode/--no-native-decode
    """
    parser = argparse.ArgumentParser(
        prog="audio_converter",
        description="Re-encode local audio files (WAV, FLAC, MP3) into another "
                    "container, entirely on this machine.",
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        help="Audio files or directories to convert.",
    )

    parser.add_argument(
        "--format",
        default=DEFAULT_TARGET_FORMAT,
        help="Target format. Available: {} (default: %(default)s). "
             "FLAC and MP3 are currently written as WAV.".format(", ".join(ENCODERS.keys())),
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save converted files (default: next to each input).",
    )

    parser.add_argument(
        "--sample-rate",
        type=_positive_int,
        default=default_sample_rate if default_sample_rate is not None else load_sample_rate(),
        help="Sample rate in Hz for synthesized fallback audio (default: %(default)s).",
    )

    parser.add_argument(
        "--fallback-seconds",
        type=_non_negative_float,
        default=FALLBACK_DURATION_S,
        help="Length of the synthetic tone used when decoding fails (default: %(default)s).",
    )

    parser.add_argument(
        "--strict-decode",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_STRICT_DECODE,
        help="Report undecodable files as failures instead of substituting a test tone.",
    )

    parser.add_argument(
        "--native-decode",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_NATIVE_DECODE,
        help="Decode with libsndfile (default: %(default)s). With --no-native-decode "
             "every file is replaced by the synthetic tone.",
    )

    parser.add_argument(
        "--report",
        default=None,
        help="Write a JSON report of the batch to this path.",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    WHY: This is the function that __main__.py and the console script
    call.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Returns the exit status instead of calling sys.exit()
    """
    try:
        parser = build_parser()
    except ValueError as e:
        # Invalid AUDIO_CONVERTER_SAMPLE_RATE in the environment
        print("Error: {}".format(e), file=sys.stderr)
        return 1
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.format not in ENCODERS:
        available = ", ".join(sorted(ENCODERS.keys()))
        print(
            "Error: Unknown format '{}'. Available formats: {}".format(args.format, available),
            file=sys.stderr,
        )
        return 1

    try:
        return asyncio.run(_run_batch(args))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
