"""Data models for test run summaries and report tallies."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RunStatus(str, Enum):
    """Overall outcome of a test run."""

    PASSED = "passed"
    FAILED = "failed"
    UNKNOWN = "unknown"  # report missing or unreadable


# Statuses that land in a named bucket. Anything else only counts towards total.
RECOGNIZED_STATUSES = ("passed", "failed", "skipped")


def derive_status(failed: int) -> RunStatus:
    return RunStatus.PASSED if failed == 0 else RunStatus.FAILED


@dataclass
class ReportCounts:
    """Running tally of test statuses found while walking a report."""

    total: int = 0
    passed: int = 0
    failed: int = 0
    skipped: int = 0
    browsers: dict[str, "ReportCounts"] = field(default_factory=dict)

    def record(self, status: Any, project: Optional[str] = None) -> None:
        """Count one test.

        Unrecognized statuses increment ``total`` only, so
        ``total == passed + failed + skipped`` does not hold for such reports.
        """
        self.total += 1
        if status in RECOGNIZED_STATUSES:
            setattr(self, status, getattr(self, status) + 1)

        if isinstance(project, str) and project:
            self.browsers.setdefault(project, ReportCounts()).record(status)


@dataclass
class ParseResult:
    """Outcome of parsing a raw report: either counts or an error message."""

    counts: Optional[ReportCounts] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.counts is not None


class BrowserResult(BaseModel):
    """Per-browser (Playwright project) slice of a run."""

    total: int = Field(default=0, ge=0)
    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    status: RunStatus = RunStatus.UNKNOWN


class RunSummary(BaseModel):
    """Flattened pass/fail/skip record for one CI execution.

    Serialized with camelCase keys; this is the format of both
    ``test-summary.json`` and every entry of ``history.json``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    timestamp: str
    build_id: str = Field(alias="buildId", description="Dedup key for the history log")
    pipeline_name: str = Field(alias="pipelineName")
    branch: str
    commit_sha: str = Field(alias="commitSha")
    build_url: Optional[str] = Field(default=None, alias="buildUrl")
    total: int = Field(default=0, ge=0)
    passed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    status: RunStatus = RunStatus.UNKNOWN
    browsers: dict[str, BrowserResult] = {}

    @property
    def pass_rate(self) -> float:
        return self.passed / self.total * 100 if self.total > 0 else 0.0

    @property
    def status_emoji(self) -> str:
        if self.status == RunStatus.PASSED:
            return "✅"
        if self.status == RunStatus.FAILED:
            return "❌"
        return "⚠️"

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict as stored on disk."""
        return self.model_dump(mode="json", by_alias=True)
