"""Static HTML for the latest-run dashboard and the run history page.

Both renderers are pure: same input, same output. Nothing here reads the
clock or the filesystem; the caller passes the generated-at time in.
"""

import logging
from datetime import datetime
from html import escape
from typing import Optional

from pydantic import ValidationError

from .config import Settings
from .environment import EnvironmentMetadata
from .models import RunStatus, RunSummary
from .storage import HistoryLog

logger = logging.getLogger(__name__)


# ── Helpers ─────────────────────────────────────────────────────
def percentage(count: int, total: int) -> float:
    """``count / total * 100``, or 0 when there are no tests."""
    if total <= 0:
        return 0.0
    return count / total * 100


def _width(count: int, total: int) -> str:
    return f"{percentage(count, total):g}%"


def format_timestamp(value: Optional[str], fmt: str) -> str:
    """Format an ISO-8601 string for display; unparseable input is echoed back."""
    if not value:
        return "—"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return parsed.strftime(fmt)


def _e(value) -> str:
    return escape(str(value), quote=True)


def _css_class(value: str) -> str:
    return "-".join(value.lower().split())


_BASE_CSS = """
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
    background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
    min-height: 100vh; padding: 20px;
  }
  .container { max-width: 1400px; margin: 0 auto; }
  header {
    background: white; border-radius: 8px; padding: 30px;
    margin-bottom: 30px; box-shadow: 0 10px 30px rgba(0,0,0,0.2);
  }
  h1 { color: #333; font-size: 30px; margin-bottom: 10px; display: flex; align-items: center; gap: 15px; }
  .subtitle, .breadcrumb { color: #666; font-size: 14px; margin-top: 10px; }
  .status-badge, .status {
    display: inline-block; padding: 6px 14px; border-radius: 20px;
    font-weight: 600; font-size: 13px;
  }
  .passed { background: #d4edda; color: #155724; }
  .failed { background: #f8d7da; color: #721c24; }
  .unknown { background: #fff3cd; color: #856404; }
  .progress-bar {
    width: 100%; height: 8px; background: #e9ecef;
    border-radius: 4px; overflow: hidden; margin-top: 15px;
  }
  .progress-fill { height: 100%; background: linear-gradient(90deg, #28a745, #20c997); }
  .progress-fill.failed { background: linear-gradient(90deg, #dc3545, #ff6b6b); }
  .progress-fill.skipped { background: linear-gradient(90deg, #ffc107, #ffda6a); }
  .link-button, .nav-button {
    display: inline-block; padding: 10px 20px; background: #667eea; color: white;
    text-decoration: none; border-radius: 4px; font-size: 14px;
  }
  .nav-button.secondary { background: #6c757d; }
  code { background: #f5f5f5; padding: 4px 8px; border-radius: 4px; font-size: 12px; }
  footer { text-align: center; color: rgba(255,255,255,0.8); padding: 20px; margin-top: 40px; font-size: 14px; }
"""

_DASHBOARD_CSS = """
  .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(300px, 1fr)); gap: 20px; margin-bottom: 30px; }
  .card, .meta-card, .environment-card {
    background: white; border-radius: 8px; padding: 20px; box-shadow: 0 5px 15px rgba(0,0,0,0.1);
  }
  .card h3, .meta-card h3 { color: #333; font-size: 16px; margin-bottom: 15px; }
  .stat { display: flex; align-items: baseline; }
  .stat-value { font-size: 36px; font-weight: bold; color: #667eea; min-width: 60px; }
  .stat-label { color: #666; font-size: 14px; margin-left: 10px; }
  .environment-card { border-left: 4px solid #667eea; }
  .environment-card.passed { border-left-color: #28a745; background: white; }
  .environment-card.failed { border-left-color: #dc3545; background: white; }
  .env-name { font-weight: 600; color: #333; margin-bottom: 10px; }
  .env-status { color: #666; font-size: 14px; }
  .meta-item { display: flex; justify-content: space-between; padding: 10px 0; border-bottom: 1px solid #eee; }
  .meta-item:last-child { border-bottom: none; }
  .meta-label { color: #666; font-size: 14px; }
  .meta-value { color: #333; font-weight: 500; word-break: break-all; }
  .section-title { color: white; font-size: 24px; margin: 40px 0 20px; font-weight: 600; }
  .alert { background: white; border-radius: 8px; padding: 20px; margin-bottom: 20px; }
  .alert.success { border-left: 4px solid #28a745; background: #f0fdf4; }
  .alert.warning { border-left: 4px solid #ffc107; background: #fffbf0; }
  .alert.error { border-left: 4px solid #dc3545; background: #fdf6f6; }
  .alert-title { font-weight: 600; color: #333; margin-bottom: 5px; }
  .alert-message { color: #666; font-size: 14px; }
  .empty-note { color: white; opacity: 0.85; }
"""

_HISTORY_CSS = """
  .container { max-width: 1200px; }
  .nav-buttons { margin-top: 20px; display: flex; gap: 10px; flex-wrap: wrap; }
  .table-container {
    background: white; border-radius: 8px; padding: 20px;
    box-shadow: 0 10px 30px rgba(0,0,0,0.2); overflow-x: auto;
  }
  table { width: 100%; border-collapse: collapse; }
  thead { background: #f8f9fa; border-bottom: 2px solid #dee2e6; }
  th { padding: 15px; text-align: left; font-weight: 600; color: #333; font-size: 14px; }
  td { padding: 15px; border-bottom: 1px solid #dee2e6; font-size: 14px; }
  tr:hover { background: #f8f9fa; }
  .badge {
    display: inline-block; padding: 4px 8px; border-radius: 4px; font-size: 12px;
    font-weight: 600; background: #e9ecef; color: #495057;
  }
  .badge.smoke { background: #cfe2ff; color: #084298; }
  .badge.regression { background: #d3f9d8; color: #2b8a3e; }
  .progress-bar { max-width: 150px; height: 6px; margin-top: 0; }
  .link { color: #667eea; text-decoration: none; }
  .empty-state { text-align: center; padding: 40px; color: #666; }
  .empty-state h3 { margin-bottom: 10px; }
"""


def _page(title: str, language: str, css: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="{_e(language)}">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{_e(title)}</title>
<style>{_BASE_CSS}{css}</style>
</head>
<body>
<div class="container">
{body}
</div>
</body>
</html>
"""


# ── Dashboard ───────────────────────────────────────────────────
_STATUS_LABELS = {
    RunStatus.PASSED: "PASSED",
    RunStatus.FAILED: "FAILED",
    RunStatus.UNKNOWN: "UNKNOWN",
}


def _alert(summary: RunSummary) -> str:
    if summary.status == RunStatus.PASSED:
        return f"""<div class="alert success">
  <div class="alert-title">✅ All Tests Passed!</div>
  <div class="alert-message">All {summary.total} tests executed successfully across all environments.</div>
</div>"""
    if summary.status == RunStatus.FAILED:
        return f"""<div class="alert error">
  <div class="alert-title">❌ Some Tests Failed</div>
  <div class="alert-message">{summary.failed} out of {summary.total} tests failed. Please review the details below.</div>
</div>"""
    return """<div class="alert warning">
  <div class="alert-title">⚠️ No Test Results</div>
  <div class="alert-message">The test report was missing or could not be read.</div>
</div>"""


def _stat_card(
    title: str,
    value: int,
    label: str,
    color: str,
    bar_width: Optional[str] = None,
    bar_class: str = "",
) -> str:
    progress = ""
    if bar_width is not None:
        progress = (
            '\n  <div class="progress-bar">'
            f'<div class="progress-fill {bar_class}" style="width: {bar_width}"></div></div>'
        )
    return f"""<div class="card">
  <h3>{title}</h3>
  <div class="stat">
    <div class="stat-value" style="color: {color};">{value}</div>
    <div class="stat-label">{label}</div>
  </div>{progress}
</div>"""


def _stat_cards(summary: RunSummary) -> str:
    total = summary.total
    cards = [
        _stat_card("📈 Total Tests", total, "tests executed", "#667eea"),
        _stat_card("✅ Passed", summary.passed, "tests passed", "#28a745",
                   _width(summary.passed, total)),
        _stat_card("❌ Failed", summary.failed, "tests failed", "#dc3545",
                   _width(summary.failed, total), "failed"),
        _stat_card("⏭️ Skipped", summary.skipped, "tests skipped", "#ffc107",
                   _width(summary.skipped, total), "skipped"),
    ]
    return '<div class="grid">\n' + "\n".join(cards) + "\n</div>"


def _environment_cards(summary: RunSummary) -> str:
    if not summary.browsers:
        return '<p class="empty-note">No per-browser results in this report.</p>'
    cards = []
    for name, result in summary.browsers.items():
        if result.failed == 0:
            state = "✅ All tests passed"
        else:
            state = f"❌ {result.failed} of {result.total} tests failed"
        cards.append(f"""<div class="environment-card {result.status.value}">
  <div class="env-name">{_e(name)}</div>
  <div class="env-status">{state}</div>
  <div class="env-status">{result.passed} passed · {result.failed} failed · {result.skipped} skipped</div>
</div>""")
    return '<div class="grid">\n' + "\n".join(cards) + "\n</div>"


def _meta_item(label: str, value: str, code: bool = False) -> str:
    inner = f"<code>{value}</code>" if code else value
    return f"""  <div class="meta-item">
    <span class="meta-label">{label}</span>
    <span class="meta-value">{inner}</span>
  </div>"""


def render_dashboard(
    summary: RunSummary,
    env: EnvironmentMetadata,
    generated_at: datetime,
    settings: Optional[Settings] = None,
) -> str:
    """Render the latest-run dashboard (``index.html``)."""
    settings = settings or Settings()
    display = settings.display
    when = _e(generated_at.strftime(display.timestamp_format))
    pipeline = _e(env.pipeline_name)
    label = _STATUS_LABELS[summary.status]

    body = f"""<header>
  <h1>
    <span class="status-icon">{summary.status_emoji}</span>
    Test Dashboard - {pipeline}
    <span class="status-badge {summary.status.value}">{label}</span>
  </h1>
  <div class="breadcrumb">
    Branch: <strong>{_e(env.branch)}</strong> |
    Build: <strong>#{_e(env.build_id)}</strong> |
    Time: <strong>{when}</strong>
  </div>
</header>

{_alert(summary)}

<div class="section-title">📊 Test Summary</div>
{_stat_cards(summary)}

<div class="section-title">🌍 Environment Results</div>
{_environment_cards(summary)}

<div class="section-title">ℹ️ Pipeline Information</div>
<div class="grid">
<div class="meta-card">
  <h3>Build Details</h3>
{_meta_item("Pipeline Name", pipeline)}
{_meta_item("Build ID", _e(env.build_id), code=True)}
{_meta_item("Branch", _e(env.branch))}
{_meta_item("Timestamp", when)}
</div>
<div class="meta-card">
  <h3>Git Information</h3>
{_meta_item("Commit SHA", _e(env.short_sha), code=True)}
{_meta_item("Full SHA", _e(env.commit_sha), code=True)}
</div>
<div class="meta-card">
  <h3>Quick Links</h3>
{_meta_item("Test Report", f'<a href="{_e(display.report_link)}" class="link-button">View Report</a>')}
{_meta_item("CI/CD Pipeline", f'<a href="{_e(env.build_url)}" class="link-button" target="_blank">Open Build</a>')}
{_meta_item("History", f'<a href="{_e(settings.paths.history_page)}" class="link-button">Run History</a>')}
</div>
</div>

<footer>
  <p>Generated by Playwright CI/CD Pipeline | {when}</p>
</footer>"""

    return _page(f"Test Dashboard - {env.pipeline_name}", display.language, _DASHBOARD_CSS, body)


# ── History ─────────────────────────────────────────────────────
def _history_row(run: RunSummary, settings: Settings) -> str:
    display = settings.display
    short_id = _e(run.build_id[:8])
    build_cell = f"<code>{short_id}</code>"
    if run.build_url:
        build_cell = f'<a href="{_e(run.build_url)}" class="link" target="_blank">{build_cell}</a>'
    fill = "failed" if run.failed > 0 else ""
    when = _e(format_timestamp(run.timestamp, display.history_timestamp_format))
    return f"""<tr>
  <td>{build_cell}</td>
  <td><span class="badge {_e(_css_class(run.pipeline_name))}">{_e(run.pipeline_name)}</span></td>
  <td><span class="status {run.status.value}">{run.status.value.upper()}</span></td>
  <td><strong>{run.passed}</strong> ✅ / <strong>{run.failed}</strong> ❌ / <strong>{run.skipped}</strong> ⏭️</td>
  <td><div class="progress-bar"><div class="progress-fill {fill}" style="width: {run.pass_rate:g}%"></div></div></td>
  <td>{_e(run.branch)}</td>
  <td><small>{when}</small></td>
  <td><a href="{_e(display.history_report_link)}" class="link">Details →</a></td>
</tr>"""


def _valid_runs(log: HistoryLog) -> list[RunSummary]:
    runs = []
    for index, entry in enumerate(log):
        try:
            runs.append(RunSummary.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping history entry #{index}: {e.error_count()} invalid fields")
    return runs


def render_history(log: HistoryLog, settings: Optional[Settings] = None) -> str:
    """Render the run history table (``history.html``) in log order."""
    settings = settings or Settings()
    runs = _valid_runs(log)

    if runs:
        rows = "\n".join(_history_row(run, settings) for run in runs)
        content = f"""<table>
<thead>
<tr>
  <th>Build ID</th><th>Pipeline</th><th>Status</th><th>Results</th>
  <th>Progress</th><th>Branch</th><th>Timestamp</th><th>Action</th>
</tr>
</thead>
<tbody>
{rows}
</tbody>
</table>"""
    else:
        content = """<div class="empty-state">
  <h3>No test runs yet</h3>
  <p>Test history will appear here as workflows run</p>
</div>"""

    shown = min(len(runs), settings.history.retention)
    body = f"""<header>
  <h1>📊 Test Run History</h1>
  <p class="subtitle">Complete history of all test executions</p>
  <div class="nav-buttons">
    <a href="./{_e(settings.paths.dashboard_file)}" class="nav-button secondary">← Back to Latest</a>
    <a href="{_e(settings.display.history_report_link)}" class="nav-button secondary">View Latest Report</a>
  </div>
</header>

<div class="table-container">
{content}
</div>

<footer>
  <p>Generated by Playwright CI/CD Pipeline | Showing last {shown} runs</p>
</footer>"""

    return _page("Test History - Playwright Dashboard", settings.display.language, _HISTORY_CSS, body)
