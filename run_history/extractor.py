"""Playwright JSON report → RunSummary.

A broken or missing report never blocks dashboard publication: parsing
returns a ParseResult instead of raising, and ``extract`` turns a failed
result into an all-zero summary with status ``unknown``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterator, Optional

from .environment import EnvironmentMetadata
from .models import (
    BrowserResult,
    ParseResult,
    ReportCounts,
    RunStatus,
    RunSummary,
    derive_status,
)

logger = logging.getLogger(__name__)


def _walk_suites(suites: Any) -> Iterator[dict]:
    """Yield every suite object in the tree, nested ones included, depth-first."""
    if not isinstance(suites, list):
        return
    stack = list(reversed(suites))
    while stack:
        suite = stack.pop()
        if not isinstance(suite, dict):
            continue
        yield suite
        nested = suite.get("suites")
        if isinstance(nested, list):
            stack.extend(reversed(nested))


def count_tests(document: dict) -> ReportCounts:
    """Tally test statuses over the whole report tree.

    Each test is visited once. Entries that are not objects are ignored.
    """
    counts = ReportCounts()
    for suite in _walk_suites(document.get("suites")):
        tests = suite.get("tests")
        if not isinstance(tests, list):
            continue
        for test in tests:
            if not isinstance(test, dict):
                continue
            counts.record(test.get("status"), project=test.get("projectName"))
    return counts


def parse_report(text: str) -> ParseResult:
    """Parse raw report JSON. Never raises."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseResult(error=f"Invalid report JSON: {e}")
    except RecursionError:
        return ParseResult(error="Invalid report JSON: nested too deeply")
    if not isinstance(document, dict):
        return ParseResult(error=f"Report root must be an object, got {type(document).__name__}")
    return ParseResult(counts=count_tests(document))


def load_report(path: Path) -> ParseResult:
    """Read and parse the report at ``path``. Missing/unreadable → error result."""
    if not path.exists():
        return ParseResult(error=f"Report not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return ParseResult(error=f"Cannot read report {path}: {e}")
    return parse_report(text)


def _browser_results(counts: ReportCounts) -> dict[str, BrowserResult]:
    return {
        name: BrowserResult(
            total=c.total,
            passed=c.passed,
            failed=c.failed,
            skipped=c.skipped,
            status=derive_status(c.failed),
        )
        for name, c in sorted(counts.browsers.items())
    }


def extract(
    report: Optional[ParseResult],
    env: EnvironmentMetadata,
    timestamp: str,
) -> RunSummary:
    """Build the run summary for this execution.

    ``timestamp`` is supplied by the caller so the result is deterministic.
    """
    if report is None or not report.ok:
        if report is not None:
            logger.warning(f"Using empty summary: {report.error}")
        counts = ReportCounts()
        status = RunStatus.UNKNOWN
    else:
        counts = report.counts
        status = derive_status(counts.failed)

    return RunSummary(
        timestamp=timestamp,
        build_id=env.build_id,
        pipeline_name=env.pipeline_name,
        branch=env.branch,
        commit_sha=env.commit_sha,
        build_url=env.build_url,
        total=counts.total,
        passed=counts.passed,
        failed=counts.failed,
        skipped=counts.skipped,
        status=status,
        browsers=_browser_results(counts),
    )
