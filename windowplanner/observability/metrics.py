"""
In-process counters for scheduling runs.

Tracks how many runs happened, how many failed, how many blocks went to tasks
and how long runs took. Safe to update from concurrent runs.
"""

import threading
from dataclasses import dataclass, field

# Only the most recent durations are kept
MAX_DURATIONS = 1000


@dataclass
class SchedulingMetrics:
    runs: int = 0
    errors: int = 0
    blocks_assigned: int = 0
    durations: list[float] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_run(self, assigned_blocks: int, seconds: float) -> None:
        """Count a finished run and the blocks it handed to tasks."""
        with self._lock:
            self.runs += 1
            self.blocks_assigned += assigned_blocks
            self._observe(seconds)

    def record_error(self, seconds: float) -> None:
        """Count a run that raised before producing a schedule."""
        with self._lock:
            self.runs += 1
            self.errors += 1
            self._observe(seconds)

    def _observe(self, seconds: float) -> None:
        self.durations.append(seconds)
        if len(self.durations) > MAX_DURATIONS:
            del self.durations[:-MAX_DURATIONS]

    def snapshot(self) -> dict[str, int | float]:
        with self._lock:
            count = len(self.durations)
            total = sum(self.durations)
            return {
                "schedule_runs_total": self.runs,
                "schedule_errors_total": self.errors,
                "blocks_assigned_total": self.blocks_assigned,
                "schedule_duration_seconds_count": count,
                "schedule_duration_seconds_avg": total / count if count else 0.0,
            }


# Shared by every Scheduler in the process
METRICS = SchedulingMetrics()
