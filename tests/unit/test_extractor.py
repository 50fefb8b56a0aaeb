"""Tests for Playwright report parsing and summary extraction."""

import json

import pytest

from run_history.extractor import count_tests, extract, load_report, parse_report
from run_history.models import ParseResult, RunStatus


TIMESTAMP = "2026-03-14T09:26:53.000Z"


class TestCountTests:
    """Tally over the report tree."""

    def test_two_suite_scenario(self, sample_report):
        counts = count_tests(sample_report)
        assert counts.total == 5
        assert counts.passed == 3
        assert counts.failed == 1
        assert counts.skipped == 1

    def test_nested_suites_counted_once(self):
        report = {
            "suites": [{
                "tests": [{"status": "passed"}],
                "suites": [{
                    "tests": [{"status": "failed"}],
                    "suites": [{"tests": [{"status": "skipped"}, {"status": "passed"}]}],
                }],
            }]
        }
        counts = count_tests(report)
        assert counts.total == 4
        assert (counts.passed, counts.failed, counts.skipped) == (2, 1, 1)

    def test_unrecognized_status_counts_toward_total_only(self):
        report = {"suites": [{"tests": [
            {"status": "passed"},
            {"status": "flaky"},
            {"status": None},
            {},
        ]}]}
        counts = count_tests(report)
        assert counts.total == 4
        assert counts.passed == 1
        assert counts.passed + counts.failed + counts.skipped == 1

    def test_malformed_entries_are_ignored(self):
        report = {"suites": [
            "not a suite",
            {"tests": "not a list"},
            {"tests": [42, None, {"status": "failed"}]},
            {"suites": {"nested": "object"}},
        ]}
        counts = count_tests(report)
        assert counts.total == 1
        assert counts.failed == 1

    def test_deeply_nested_suites(self):
        suite = {"tests": [{"status": "passed"}]}
        for _ in range(4999):
            suite = {"suites": [suite], "tests": [{"status": "passed"}]}
        counts = count_tests({"suites": [suite]})
        assert counts.total == 5000
        assert counts.passed == 5000

    def test_no_suites(self):
        counts = count_tests({})
        assert counts.total == 0

    def test_per_browser_breakdown(self, sample_report):
        browsers = count_tests(sample_report).browsers
        assert set(browsers) == {"chromium", "firefox", "webkit"}
        assert browsers["chromium"].passed == 2
        assert browsers["firefox"].failed == 1
        assert browsers["webkit"].skipped == 1

    def test_count_invariant_for_recognized_statuses(self, sample_report):
        counts = count_tests(sample_report)
        assert counts.total == counts.passed + counts.failed + counts.skipped


class TestParseReport:

    def test_valid_json(self, sample_report):
        result = parse_report(json.dumps(sample_report))
        assert result.ok
        assert result.counts.total == 5

    def test_invalid_json(self):
        result = parse_report("{not json")
        assert not result.ok
        assert result.counts is None
        assert "Invalid report JSON" in result.error

    def test_deeply_nested_json(self):
        result = parse_report("[" * 200000 + "]" * 200000)
        assert not result.ok
        assert result.counts is None

    def test_non_object_root(self):
        result = parse_report("[1, 2, 3]")
        assert not result.ok
        assert "list" in result.error


class TestLoadReport:

    def test_missing_file(self, tmp_path):
        result = load_report(tmp_path / "missing.json")
        assert not result.ok
        assert result.error.startswith("Report not found")

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "index.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        result = load_report(path)
        assert not result.ok

    def test_reads_file(self, tmp_path, sample_report, write_json):
        path = write_json(tmp_path / "index.json", sample_report)
        result = load_report(path)
        assert result.ok
        assert result.counts.failed == 1


class TestExtract:

    def test_scenario_summary(self, sample_report, ci_env):
        summary = extract(parse_report(json.dumps(sample_report)), ci_env, TIMESTAMP)
        assert summary.total == 5
        assert summary.passed == 3
        assert summary.failed == 1
        assert summary.skipped == 1
        assert summary.status == RunStatus.FAILED

    def test_zero_failures_is_passed(self, ci_env):
        report = parse_report(json.dumps({"suites": [{"tests": [{"status": "skipped"}]}]}))
        summary = extract(report, ci_env, TIMESTAMP)
        assert summary.status == RunStatus.PASSED

    def test_empty_report_is_passed(self, ci_env):
        summary = extract(parse_report("{}"), ci_env, TIMESTAMP)
        assert summary.total == 0
        assert summary.status == RunStatus.PASSED

    @pytest.mark.parametrize("report", [None, ParseResult(error="boom")])
    def test_absent_or_broken_report_is_unknown(self, report, ci_env):
        summary = extract(report, ci_env, TIMESTAMP)
        assert summary.status == RunStatus.UNKNOWN
        assert (summary.total, summary.passed, summary.failed, summary.skipped) == (0, 0, 0, 0)
        assert summary.browsers == {}

    def test_environment_passed_through(self, sample_report, ci_env):
        summary = extract(parse_report(json.dumps(sample_report)), ci_env, TIMESTAMP)
        assert summary.build_id == "4242424242"
        assert summary.pipeline_name == "Regression"
        assert summary.branch == "main"
        assert summary.commit_sha == ci_env.commit_sha
        assert summary.build_url == ci_env.build_url
        assert summary.timestamp == TIMESTAMP

    def test_browser_status(self, sample_report, ci_env):
        summary = extract(parse_report(json.dumps(sample_report)), ci_env, TIMESTAMP)
        assert list(summary.browsers) == ["chromium", "firefox", "webkit"]
        assert summary.browsers["chromium"].status == RunStatus.PASSED
        assert summary.browsers["firefox"].status == RunStatus.FAILED

    def test_record_uses_camel_case(self, sample_report, ci_env):
        record = extract(parse_report(json.dumps(sample_report)), ci_env, TIMESTAMP).to_record()
        assert record["buildId"] == "4242424242"
        assert record["pipelineName"] == "Regression"
        assert record["commitSha"] == ci_env.commit_sha
        assert record["status"] == "failed"
        assert "build_id" not in record
