"""Batch driver: many files through the pipeline with progress reporting.

WHY: Users convert several files at once and need to see how far along
the batch is. One bad file must not cost them the rest, so the batch
always runs to the end and reports one outcome per input.

HOW: BatchDriver walks the file list in order, emitting a ProgressEvent
before each file and a summary event after the last one. Files are
converted strictly one after another; the decoding handle inside the
pipeline is shared read-only across the batch. convert_files() builds
a fresh batch-scoped source, pipeline and driver for one call.

RULES:
- Outcomes come back in input order, one per input, for any input length
- Before file i: ProgressEvent(i / total, "converting <name> (<i+1>/<total>)")
- After the loop: ProgressEvent(1.0, "<succeeded>/<total> succeeded")
- on_progress is called exactly total + 1 times (once for an empty batch)
- An on_progress error before file i makes file i a ConversionFailure;
  an error on the summary event is logged. Neither escapes convert_all
- No concurrency, no cancellation; a started batch runs to completion
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import List, Optional

from audio_converter.config import FALLBACK_DURATION_S, FALLBACK_SAMPLE_RATE
from audio_converter.core.ir import ConversionFailure, ConversionOutcome, ProgressEvent
from audio_converter.core.pipeline import ConversionPipeline, SourceFile
from audio_converter.core.source import SampleSource
from audio_converter.decoders.base import BaseDecoder

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]


class BatchDriver:
    """Runs a list of files through a ConversionPipeline."""

    def __init__(self, pipeline: Optional[ConversionPipeline] = None) -> None:
        self.pipeline = pipeline if pipeline is not None else ConversionPipeline()

    async def convert_all(
        self,
        files: Sequence[SourceFile],
        target_format: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[ConversionOutcome]:
        """Convert every file, isolating per-file failures.

        Args:
            files: Input files, converted in this order.
            target_format: Key of the target container, e.g. "wav".
            on_progress: Optional observer for progress events.

        Returns:
            One ConversionOutcome per input file, in input order.
        """
        total = len(files)
        outcomes: List[ConversionOutcome] = []

        for index, file in enumerate(files):
            try:
                _emit(
                    on_progress,
                    ProgressEvent(
                        fraction=index / total,
                        message="converting {} ({}/{})".format(file.name, index + 1, total),
                    ),
                )
            except Exception as exc:
                logger.exception("Progress callback failed before %s", file.name)
                outcomes.append(
                    ConversionFailure(
                        source_file=file,
                        error="Failed to convert {}: {}".format(file.name, exc),
                        target_format=target_format,
                    )
                )
                continue
            outcomes.append(await self.pipeline.convert_one(file, target_format))

        succeeded = sum(1 for outcome in outcomes if outcome.success)
        logger.info("Batch finished: %d/%d succeeded", succeeded, total)
        try:
            _emit(
                on_progress,
                ProgressEvent(fraction=1.0, message="{}/{} succeeded".format(succeeded, total)),
            )
        except Exception:
            logger.exception("Progress callback failed on the batch summary")
        return outcomes


def _emit(on_progress: Optional[ProgressCallback], event: ProgressEvent) -> None:
    if on_progress is not None:
        on_progress(event)


async def convert_files(
    files: Sequence[SourceFile],
    target_format: str,
    on_progress: Optional[ProgressCallback] = None,
    decoder: Optional[BaseDecoder] = None,
    sample_rate: int = FALLBACK_SAMPLE_RATE,
    fallback_duration_s: float = FALLBACK_DURATION_S,
    strict: bool = False,
) -> List[ConversionOutcome]:
    """Run one batch with a freshly built, batch-scoped decoding handle.

    WHY: Most callers just want "convert these files". This wires the
    SampleSource, ConversionPipeline and BatchDriver together so the
    decoding handle lives exactly as long as the batch.

    RULES:
    - decoder=None means no native decoding; every file gets the fallback
    - All other arguments are forwarded to SampleSource
    """
    source = SampleSource(
        decoder=decoder,
        sample_rate=sample_rate,
        fallback_duration_s=fallback_duration_s,
        strict=strict,
    )
    driver = BatchDriver(ConversionPipeline(source))
    return await driver.convert_all(files, target_format, on_progress)
