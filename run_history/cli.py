"""Batch entry points for the two pipeline stages.

Stage 1 (generate-dashboard): Playwright report → test-summary.json + index.html
Stage 2 (generate-history):   test-summary.json → history.json + history.html

Neither takes arguments; paths come from config/run-history.yml
(CONFIG_PATH to override) and CI_* environment variables. Read problems
are logged and worked around; write problems exit 1.
"""

import argparse
import logging
import os
from datetime import datetime, timezone
from typing import Optional

from .aggregator import HistoryAggregator
from .config import Settings, load_config
from .environment import EnvironmentMetadata
from .extractor import extract, load_report
from .render import render_dashboard, render_history
from .storage import (
    JSONHistoryStore,
    OutputWriteError,
    read_summary,
    write_document,
    write_summary,
)

logger = logging.getLogger(__name__)


def _setup(description: str, argv: Optional[list[str]]) -> Settings:
    parser = argparse.ArgumentParser(description=description)
    parser.parse_args(argv)

    settings = load_config()
    logging.basicConfig(
        level=log_level(settings),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


def log_level(settings: Settings) -> str:
    """LOG_LEVEL env var, else the configured level, upper-cased for logging."""
    return os.environ.get("LOG_LEVEL", settings.log_level).upper()


def iso_timestamp(moment: datetime) -> str:
    """UTC ISO-8601 with milliseconds and a Z suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def dashboard_main(argv: Optional[list[str]] = None) -> int:
    settings = _setup("Generate the test dashboard from the latest Playwright report.", argv)
    paths = settings.paths

    generated_at = datetime.now(timezone.utc)
    env = EnvironmentMetadata.from_env(now=generated_at)
    print(f"📋 {env.pipeline_name} build #{env.build_id} ({env.branch})")

    report = load_report(paths.report_path)
    summary = extract(report, env, timestamp=iso_timestamp(generated_at))
    print(f"📊 {summary.total} tests: {summary.passed} passed, "
          f"{summary.failed} failed, {summary.skipped} skipped → {summary.status.value}")

    html = render_dashboard(summary, env, generated_at, settings)
    try:
        # Summary first: a failed write must not leave a new dashboard over a stale summary
        write_summary(paths.summary_path, summary)
        write_document(paths.dashboard_path, html)
    except OutputWriteError as e:
        logger.error(f"Dashboard generation failed: {e}")
        print(f"❌ {e}")
        return 1

    print("✅ Dashboard generated successfully!")
    print(f"📊 Dashboard saved to: {paths.dashboard_path}")
    print(f"📄 Summary saved to: {paths.summary_path}")
    return 0


def history_main(argv: Optional[list[str]] = None) -> int:
    settings = _setup("Append the latest run summary to the history log and render it.", argv)
    paths = settings.paths

    summary = read_summary(paths.summary_path)
    store = JSONHistoryStore(paths.history_path)
    aggregator = HistoryAggregator(store, retention=settings.history.retention)

    try:
        history = aggregator.run(summary)
        write_document(paths.history_page_path, render_history(history, settings))
    except OutputWriteError as e:
        logger.error(f"History generation failed: {e}")
        print(f"❌ {e}")
        return 1

    print("✅ History dashboard generated!")
    print(f"📊 History saved: Last {min(len(history), settings.history.retention)} runs")
    print(f"📄 File: {paths.history_page_path}")
    return 0
