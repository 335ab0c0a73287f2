"""Load and delete the raw results document written by a scan."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_RESULTS_FILE = "ast-results.json"


class ResultsError(Exception):
    """Raised when the results document exists but cannot be read or parsed."""


def load_results(path: Path) -> Optional[List[Dict[str, Any]]]:
    """Return the ``results`` records of the document at *path*.

    A missing document is not an error and yields ``None``. Malformed JSON
    raises ``ResultsError`` so a broken scan is never shown as an empty one.
    """
    if not path.is_file():
        logger.debug("No results document at %s", path)
        return None
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as exc:
        raise ResultsError(f"Failed to read results from {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise ResultsError(f"Results document {path} is not a JSON object")

    records = document.get("results")
    if records is None:
        return []
    if not isinstance(records, list):
        raise ResultsError(f"'results' in {path} is not a list")
    return records


def delete_results(path: Path) -> bool:
    """Remove the results document. Returns True if a file was deleted."""
    if not path.is_file():
        return False
    path.unlink()
    logger.debug("Deleted results document %s", path)
    return True
