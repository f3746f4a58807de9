"""
File Utilities
==============

Output directory housekeeping for generated PDFs and JSON reports.
"""

from pathlib import Path
from typing import Any, List
import json

from pdf_harness.config.logging import get_logger

logger = get_logger(__name__)

OUTPUT_PATTERNS = ("*.pdf", "*.json")


def find_outputs(output_path: Path) -> List[Path]:
    """Generated PDFs and JSON reports directly inside the output directory."""
    if not output_path.is_dir():
        return []

    found: List[Path] = []
    for pattern in OUTPUT_PATTERNS:
        found.extend(path for path in output_path.glob(pattern) if path.is_file())
    return sorted(found)


def clean_outputs(output_path: Path) -> List[Path]:
    """
    Delete generated PDFs and JSON reports.

    Returns:
        The removed files
    """
    removed = find_outputs(output_path)
    for path in removed:
        path.unlink()

    logger.info("Output directory cleaned", path=str(output_path), removed=len(removed))
    return removed


def write_json_report(path: Path, payload: Any) -> Path:
    """Write a JSON report, creating the parent directory if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return path
