#!/usr/bin/env python3
"""Test History Generator.

Adds the summary written by generate-dashboard.py to the rolling run
history (last 30 runs, one entry per build) and renders the history page.
Run it after generate-dashboard.py in the same job.

Usage (CI):
    python scripts/generate-history.py

Output: public/history.json, public/history.html
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from run_history.cli import history_main  # noqa: E402

if __name__ == "__main__":
    sys.exit(history_main())
