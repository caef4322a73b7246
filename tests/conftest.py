"""
Test configuration - ensures repo root is in sys.path + fixed clocks.

Scheduling reads the wall clock at the start of every run, so tests always
inject a fixed clock to keep results deterministic.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add repo root to sys.path so tests can import windowplanner.*
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from windowplanner.config import SchedulerSettings  # noqa: E402
from windowplanner.scheduling import Scheduler  # noqa: E402

# Monday 2026-03-02, 09:00
SCHEDULE_START = datetime(2026, 3, 2, 9, 0)


@pytest.fixture
def schedule_start():
    return SCHEDULE_START


@pytest.fixture
def scheduler():
    """Scheduler with 30 minute blocks and a clock frozen at 09:00."""
    return Scheduler(SchedulerSettings(block_size_minutes=30), clock=lambda: SCHEDULE_START)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep host overrides out of settings tests."""
    monkeypatch.delenv("WINDOWPLANNER_BLOCK_SIZE", raising=False)
    monkeypatch.delenv("WINDOWPLANNER_CONFIG", raising=False)
    monkeypatch.delenv("WINDOWPLANNER_HOME", raising=False)
