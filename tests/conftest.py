"""
Run History Test Configuration

Shared fixtures for all tests.
"""
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

import pytest

from run_history.config import Settings
from run_history.environment import EnvironmentMetadata
from run_history.models import RunStatus, RunSummary


# =============================================================================
# FIXTURES: Sample Data
# =============================================================================

@pytest.fixture
def sample_report() -> Dict[str, Any]:
    """Two suites: three passes, then one failure and one skip."""
    return {
        "suites": [
            {
                "title": "login.spec.js",
                "tests": [
                    {"title": "valid login", "status": "passed", "projectName": "chromium"},
                    {"title": "logout", "status": "passed", "projectName": "chromium"},
                    {"title": "remember me", "status": "passed", "projectName": "firefox"},
                ],
            },
            {
                "title": "checkout.spec.js",
                "tests": [
                    {"title": "pay by card", "status": "failed", "projectName": "firefox"},
                    {"title": "pay by invoice", "status": "skipped", "projectName": "webkit"},
                ],
            },
        ]
    }


@pytest.fixture
def ci_env() -> EnvironmentMetadata:
    return EnvironmentMetadata(
        build_id="4242424242",
        build_url="https://ci.example.com/builds/4242424242",
        commit_sha="0123456789abcdef0123456789abcdef01234567",
        commit_ref="refs/heads/main",
        pipeline_name="Regression",
    )


@pytest.fixture
def generated_at() -> datetime:
    return datetime(2026, 3, 14, 9, 26, 53, tzinfo=timezone.utc)


@pytest.fixture
def make_summary():
    """Factory for RunSummary objects with sensible defaults."""

    def _make(build_id: str = "1", **overrides) -> RunSummary:
        data = {
            "timestamp": "2026-03-14T09:26:53.000Z",
            "build_id": build_id,
            "pipeline_name": "Regression",
            "branch": "main",
            "commit_sha": "0123456789abcdef",
            "build_url": f"https://ci.example.com/builds/{build_id}",
            "total": 5,
            "passed": 5,
            "failed": 0,
            "skipped": 0,
            "status": RunStatus.PASSED,
        }
        data.update(overrides)
        return RunSummary(**data)

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with all paths under tmp_path."""
    return Settings(
        paths={
            "report_path": tmp_path / "playwright-report" / "index.json",
            "public_dir": tmp_path / "public",
        }
    )


@pytest.fixture
def write_json():
    """Write ``payload`` as JSON to ``path`` (creating parents) and return the path."""

    def _write(path: Path, payload: Any) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    return _write
