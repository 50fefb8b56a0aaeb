"""
Run History
===========
Test run summaries, rolling history and static dashboards for CI.

This package provides:
- Summary extraction from Playwright JSON reports
- A bounded, buildId-deduplicated history log (newest first)
- Static HTML rendering for the latest run and the history table

Usage:
    from run_history import (
        EnvironmentMetadata, HistoryAggregator, JSONHistoryStore,
        extract, load_report, render_history,
    )

    env = EnvironmentMetadata.from_env()
    summary = extract(load_report(Path("playwright-report/index.json")), env, timestamp)

    aggregator = HistoryAggregator(JSONHistoryStore(Path("public/history.json")))
    history = aggregator.run(summary)
    html = render_history(history)
"""

__version__ = "0.1.0"

# Models
from .models import (
    BrowserResult,
    ParseResult,
    ReportCounts,
    RunStatus,
    RunSummary,
    derive_status,
)

from .environment import EnvironmentMetadata
from .config import Settings, get_config, load_config, reload_config

# Pipeline stages
from .extractor import count_tests, extract, load_report, parse_report
from .aggregator import DEFAULT_RETENTION, HistoryAggregator, aggregate
from .storage import (
    HistoryLog,
    HistoryStore,
    InMemoryHistoryStore,
    JSONHistoryStore,
    OutputWriteError,
    read_summary,
    write_document,
    write_summary,
)

# Rendering
from .render import format_timestamp, percentage, render_dashboard, render_history


__all__ = [
    # Models
    "BrowserResult",
    "ParseResult",
    "ReportCounts",
    "RunStatus",
    "RunSummary",
    "derive_status",
    "EnvironmentMetadata",
    # Config
    "Settings",
    "get_config",
    "load_config",
    "reload_config",
    # Extractor
    "count_tests",
    "extract",
    "load_report",
    "parse_report",
    # Aggregator
    "DEFAULT_RETENTION",
    "HistoryAggregator",
    "aggregate",
    # Storage
    "HistoryLog",
    "HistoryStore",
    "InMemoryHistoryStore",
    "JSONHistoryStore",
    "OutputWriteError",
    "read_summary",
    "write_document",
    "write_summary",
    # Rendering
    "format_timestamp",
    "percentage",
    "render_dashboard",
    "render_history",
]
