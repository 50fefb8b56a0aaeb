"""History aggregation: dedup by buildId, prepend, cap at retention."""

import logging
from typing import Optional

from .models import RunSummary
from .storage import HistoryLog, HistoryStore

logger = logging.getLogger(__name__)

DEFAULT_RETENTION = 30


def aggregate(
    prior: HistoryLog,
    new: Optional[RunSummary],
    retention: int = DEFAULT_RETENTION,
) -> HistoryLog:
    """Return the history log with ``new`` added at the front.

    Returns ``prior`` itself (no copy) when there is nothing to add or the
    build is already recorded, so re-running a CI step is a no-op. The log
    keeps insertion order; entries are never re-sorted by timestamp.
    """
    if retention < 1:
        raise ValueError(f"retention must be >= 1, got {retention}")
    if new is None:
        return prior
    if any(entry.get("buildId") == new.build_id for entry in prior):
        logger.info(f"Build {new.build_id} already in history, skipping")
        return prior
    return ([new.to_record()] + list(prior))[:retention]


class HistoryAggregator:
    """Loads the history log from a store, aggregates, and persists it."""

    def __init__(self, store: HistoryStore, retention: int = DEFAULT_RETENTION):
        self.store = store
        self.retention = retention

    def run(self, summary: Optional[RunSummary]) -> HistoryLog:
        """Aggregate ``summary`` into the stored log and return the result.

        Write failures propagate to the caller.
        """
        prior = self.store.load()
        updated = aggregate(prior, summary, self.retention)

        # Unchanged logs are left alone so the file stays byte-for-byte identical;
        # a first run still materializes the (possibly empty) history file.
        if updated is not prior or not self.store.exists():
            self.store.save(updated)
        return updated
