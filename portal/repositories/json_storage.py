"""
JSON document persistence for the client collection.

Reads fail open (a missing or corrupt document is an empty collection) while
writes fail loudly, so a lost write never goes unnoticed.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageWriteError(Exception):
    """Raised when the collection document cannot be written."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Could not write {path}: {reason}")
        self.path = path
        self.reason = reason


def load(path: Path) -> list:
    """Return the stored sequence, or [] when it is absent, unreadable or not a list."""
    try:
        with Path(path).open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logger.debug("No client document at %s; starting empty", path)
        return []
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable client document %s: %s", path, exc)
        return []
    if not isinstance(data, list):
        logger.warning("Ignoring client document %s: expected a list, got %s", path, type(data).__name__)
        return []
    return data


def save(records: list, path: Path) -> None:
    """Replace the document with records; the old file stays intact on failure."""
    target = Path(path)
    payload = json.dumps(records, ensure_ascii=False, indent=2)
    tmp_name = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, target)
        tmp_name = None
    except OSError as exc:
        logger.error("Failed to write client document %s: %s", target, exc)
        raise StorageWriteError(target, str(exc)) from exc
    finally:
        if tmp_name:
            Path(tmp_name).unlink(missing_ok=True)
