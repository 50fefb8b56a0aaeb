#!/usr/bin/env python3
"""Test Dashboard Generator.

Reads the Playwright JSON report and CI metadata, writes the latest-run
dashboard and the machine-readable run summary.

Usage (CI):
    python scripts/generate-dashboard.py

Environment variables:
    CI_BUILD_ID, CI_BUILD_URL, CI_COMMIT_SHA, CI_COMMIT_REF, CI_PIPELINE_NAME
    CONFIG_PATH (default: config/run-history.yml), LOG_LEVEL

Output: public/index.html, public/test-summary.json
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from run_history.cli import dashboard_main  # noqa: E402

if __name__ == "__main__":
    sys.exit(dashboard_main())
