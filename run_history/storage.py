"""Storage for the history log and generated output files.

The history log lives in a single JSON file (``history.json``). Reads are
forgiving: a missing or corrupted file is an empty log. Writes replace the
whole file and raise OutputWriteError on failure, since silently losing
history defeats its purpose.

There is no locking. Two jobs aggregating into the same file concurrently
will lose an update (last writer wins); the CI scheduler is expected to run
one history job at a time.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from .models import RunSummary

logger = logging.getLogger(__name__)

HistoryLog = list[dict[str, Any]]


class OutputWriteError(OSError):
    """Raised when an output file cannot be written."""


class HistoryStore(Protocol):
    """Storage backend protocol."""

    def load(self) -> HistoryLog:
        """Return the stored log, newest first. Never raises."""
        ...

    def save(self, log: HistoryLog) -> None:
        """Persist the full log, replacing what was stored."""
        ...

    def exists(self) -> bool:
        ...


def _atomic_write(path: Path, content: str) -> None:
    """Write ``content`` to a sibling temp file, then move it over ``path``."""
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
        ) as f:
            tmp_name = f.name
            f.write(content)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise OutputWriteError(f"Cannot write {path}: {e}") from e


class JSONHistoryStore:
    """History log stored as a JSON array in one file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> HistoryLog:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, RecursionError, OSError) as e:
            logger.warning(f"Corrupted history file {self.path} ({e}), starting fresh")
            return []
        if not isinstance(data, list):
            logger.warning(f"History file {self.path} is not a JSON array, starting fresh")
            return []

        entries = [entry for entry in data if isinstance(entry, dict)]
        if len(entries) != len(data):
            logger.warning(f"Dropped {len(data) - len(entries)} non-object history entries")
        return entries

    def save(self, log: HistoryLog) -> None:
        _atomic_write(self.path, json.dumps(log, indent=2, ensure_ascii=False))
        logger.info(f"History saved: {len(log)} runs → {self.path}")


class InMemoryHistoryStore:
    """History store for tests and dry runs."""

    def __init__(self, entries: Optional[HistoryLog] = None):
        self.entries = entries
        self.saves = 0

    def exists(self) -> bool:
        return self.entries is not None

    def load(self) -> HistoryLog:
        return list(self.entries or [])

    def save(self, log: HistoryLog) -> None:
        self.entries = list(log)
        self.saves += 1


def read_summary(path: Path) -> Optional[RunSummary]:
    """Load the current run summary written by the dashboard step.

    Missing, unreadable or invalid files give ``None``.
    """
    if not path.exists():
        logger.warning(f"Summary not found: {path}")
        return None
    try:
        return RunSummary.model_validate_json(path.read_bytes())
    except ValidationError as e:
        logger.warning(f"Invalid summary {path}: {e.error_count()} errors")
    except OSError as e:
        logger.warning(f"Cannot read summary {path}: {e}")
    return None


def write_summary(path: Path, summary: RunSummary) -> None:
    _atomic_write(path, json.dumps(summary.to_record(), indent=2, ensure_ascii=False))


def write_document(path: Path, markup: str) -> None:
    _atomic_write(path, markup)
