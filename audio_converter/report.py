"""JSON summary of a conversion batch.

WHY: Scripts that drive the CLI need a machine-readable record of what
happened to each file: where the output went, which container was
really written, and whether the audio is synthetic.

HOW: build_report() flattens the outcome list into plain dicts;
write_report() serializes them as UTF-8 JSON. The shape is described
by conversion_report_schema.json next to this module.

RULES:
- results[] is in input order, one entry per input file
- output is the saved path as a string, or None when nothing was saved
- error is None for successes; container/bytes are None for failures
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from audio_converter.core.ir import ConversionOutcome

REPORT_SCHEMA_PATH = Path(__file__).resolve().parent / "conversion_report_schema.json"


def _outcome_entry(outcome: ConversionOutcome, saved_path: Optional[Path]) -> Dict[str, Any]:
    detected = outcome.detected_format.value if outcome.detected_format is not None else None
    entry: Dict[str, Any] = {
        "source": outcome.source_file.name,
        "success": outcome.success,
        "output": str(saved_path) if saved_path is not None else None,
        "container": None,
        "detected_format": detected,
        "bytes": None,
        "synthetic": False,
        "substituted": False,
        "error": None,
    }
    if outcome.success:
        entry["container"] = outcome.container
        entry["bytes"] = len(outcome.output_bytes)
        entry["synthetic"] = outcome.synthetic
        entry["substituted"] = outcome.substituted
    else:
        entry["error"] = outcome.error
    return entry


def build_report(
    outcomes: Sequence[ConversionOutcome],
    target_format: str,
    saved_paths: Optional[Mapping[int, Path]] = None,
) -> Dict[str, Any]:
    """Summarize a batch as a JSON-serializable dict.

    Args:
        outcomes: Outcomes returned by the batch driver.
        target_format: The target the batch was run with.
        saved_paths: Output path per outcome index, for outcomes that were saved.

    Returns:
        Dict matching conversion_report_schema.json.
    """
    saved_paths = saved_paths or {}
    results: List[Dict[str, Any]] = [
        _outcome_entry(outcome, saved_paths.get(index))
        for index, outcome in enumerate(outcomes)
    ]
    succeeded = sum(1 for outcome in outcomes if outcome.success)
    return {
        "target_format": target_format,
        "total": len(outcomes),
        "succeeded": succeeded,
        "failed": len(outcomes) - succeeded,
        "results": results,
    }


def write_report(report: Dict[str, Any], path: Path) -> Path:
    """Write a report dict as indented UTF-8 JSON and return the path."""
    path = Path(path)
    path.write_text(json.dumps(report, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return path
