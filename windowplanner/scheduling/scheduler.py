"""
Scheduler - Greedily assign tasks to free time blocks.

Builds a BlockTimeline from now until the furthest task due date, stamps in
time already taken by calendar events, then fills every remaining free block
with the most urgent task that still has unassigned work.

Single pass, no backtracking: once a block is stamped it is final for the run.
"""

import logging
import time
from collections import Counter
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

from windowplanner.config import SchedulerSettings, load_settings
from windowplanner.observability import METRICS, RunContext, RunIdFilter

from .block_timeline import BUSY, EMPTY, RESERVED_OCCUPANTS, BlockTimeline, is_task_occupant
from .errors import DuplicateTaskError, EmptyInputError, InvalidIntervalError, ScheduleError
from .models import CalendarLike, ScheduledEvent, TaskLike

logger = logging.getLogger(__name__)
logger.addFilter(RunIdFilter())


@dataclass
class ScheduleRun:
    """Everything produced by one scheduling run."""

    run_id: str
    schedule_start: datetime
    horizon_end: datetime
    timeline: BlockTimeline
    task_index: dict[Hashable, TaskLike]
    events: list[ScheduledEvent] = field(default_factory=list)
    assigned_blocks: int = 0

    @property
    def block_size(self) -> int:
        return self.timeline.block_size

    def summary(self) -> dict:
        """Block usage for this run, per state and per task."""
        per_task = Counter(e.task_id for e in self.events)
        return {
            "run_id": self.run_id,
            "schedule_start": self.schedule_start.isoformat(),
            "horizon_end": self.horizon_end.isoformat(),
            "block_size_minutes": self.block_size,
            "blocks": self.timeline.counts(),
            "blocks_by_task": dict(per_task),
            "unscheduled_tasks": [tid for tid in self.task_index if tid not in per_task],
        }


@dataclass
class ValidationResult:
    valid: bool
    issues: list[str]
    stats: dict


# =============================================================================
# PURE HELPERS
# =============================================================================


def build_task_index(tasks: Sequence[TaskLike]) -> dict[Hashable, TaskLike]:
    """
    Map task id to task.

    Raises:
        EmptyInputError: If there are no tasks
        DuplicateTaskError: If an id repeats or collides with an occupancy marker
        InvalidIntervalError: If a task's due date does not come after its start
    """
    if not tasks:
        raise EmptyInputError("No tasks to schedule")

    index: dict[Hashable, TaskLike] = {}
    for task in tasks:
        if task.id in RESERVED_OCCUPANTS:
            raise DuplicateTaskError(f"Task id {task.id!r} is reserved for block occupancy")
        if task.id in index:
            raise DuplicateTaskError(f"Duplicate task id {task.id!r}")
        if task.due <= task.start:
            raise InvalidIntervalError(task.start, task.due, what=f"window for task {task.id!r}")
        index[task.id] = task
    return index


def find_horizon_end(tasks: Sequence[TaskLike]) -> datetime:
    """Latest due date across all tasks."""
    if not tasks:
        raise EmptyInputError("No tasks to schedule")
    return max(t.due for t in tasks)


def eligible_at(tasks: Iterable[TaskLike], t: datetime) -> list[TaskLike]:
    """Tasks whose availability has started at or before t, in input order."""
    return [task for task in tasks if task.start <= t]


def order_by_urgency(tasks: Iterable[TaskLike]) -> list[TaskLike]:
    """Earliest due date first; ties keep input order."""
    return sorted(tasks, key=lambda task: task.due)


def pick_task(tasks: Iterable[TaskLike], t: datetime) -> TaskLike | None:
    """Most urgent task available at t that still has unassigned work."""
    for task in order_by_urgency(eligible_at(tasks, t)):
        if task.get_free_job() is not None:
            return task
    return None


# =============================================================================
# SCHEDULER
# =============================================================================


class Scheduler:
    """
    Block scheduler for tasks around existing calendar commitments.

    Block states:
    - EMPTY -> BUSY        (calendar pass, irrevocable)
    - EMPTY -> task id     (greedy pass, at most once)
    - EMPTY                (no eligible task with free work)

    Constraints:
    - A task is eligible for a block once its availability has started
    - Among eligible tasks, the earliest due date wins
    - Tasks without unassigned work are skipped
    """

    def __init__(
        self,
        settings: SchedulerSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.settings = settings or SchedulerSettings()
        self.clock = clock or datetime.now

    @classmethod
    def from_config(cls, config_path=None, clock: Callable[[], datetime] | None = None) -> "Scheduler":
        """Build a scheduler from the settings file (see windowplanner.config)."""
        return cls(load_settings(config_path), clock=clock)

    @property
    def block_size(self) -> int:
        return self.settings.block_size_minutes

    def schedule(
        self, calendar: CalendarLike | None, tasks: Sequence[TaskLike]
    ) -> list[ScheduledEvent]:
        """
        Schedule tasks into free blocks.

        Args:
            calendar: Provider of existing busy intervals (None for an empty calendar)
            tasks: Candidate tasks; read, never mutated

        Returns:
            One ScheduledEvent per block assigned to a task, in time order
        """
        return self.plan(calendar, tasks).events

    def plan(self, calendar: CalendarLike | None, tasks: Sequence[TaskLike]) -> ScheduleRun:
        """Run the scheduler and return the full run, including the stamped timeline."""
        started = time.perf_counter()
        with RunContext() as ctx:
            try:
                run = self._plan(ctx.run_id, calendar, tasks)
            except ScheduleError as e:
                METRICS.record_error(time.perf_counter() - started)
                logger.warning(f"Could not build schedule: {e}")
                raise

            METRICS.record_run(run.assigned_blocks, time.perf_counter() - started)
            counts = run.timeline.counts()
            logger.info(
                "Schedule complete",
                extra={
                    "task_count": len(run.task_index),
                    "block_count": counts["total"],
                    "busy_blocks": counts["busy"],
                    "assigned_blocks": run.assigned_blocks,
                    "empty_blocks": counts["empty"],
                },
            )
            return run

    def _plan(
        self, run_id: str, calendar: CalendarLike | None, tasks: Sequence[TaskLike]
    ) -> ScheduleRun:
        tasks = list(tasks)
        task_index = build_task_index(tasks)
        horizon_end = find_horizon_end(tasks)
        schedule_start = self.clock()

        timeline = BlockTimeline.create(schedule_start, horizon_end, self.block_size)
        logger.debug(f"Allocated {timeline!r} until {horizon_end.isoformat()}")

        events = calendar.get_events() if calendar is not None else []
        self._stamp_calendar(timeline, events)
        assigned = self._fill_free_blocks(timeline, tasks)

        return ScheduleRun(
            run_id=run_id,
            schedule_start=schedule_start,
            horizon_end=horizon_end,
            timeline=timeline,
            task_index=task_index,
            events=self._make_events(timeline, task_index),
            assigned_blocks=assigned,
        )

    def _stamp_calendar(self, timeline: BlockTimeline, events: Iterable) -> None:
        """Mark every block overlapped by a calendar event as busy."""
        for event in events:
            if event.end <= event.start:
                raise InvalidIntervalError(event.start, event.end, what="calendar event")

            span = timeline.span_for_interval(event.start, event.end)
            if span is None:
                # Entirely outside the horizon
                continue
            timeline.occupy(span[0], span[1], BUSY)

    def _fill_free_blocks(self, timeline: BlockTimeline, tasks: list[TaskLike]) -> int:
        """
        Greedy pass over free blocks. Returns the number of blocks assigned.

        A trailing block that would end after horizon_end stays EMPTY.
        """
        assigned = 0
        for i, occupant in timeline:
            if occupant != EMPTY:
                continue

            block_start = timeline.time_for_index(i)
            if block_start + timeline.block_delta > timeline.horizon_end:
                continue

            task = pick_task(tasks, block_start)
            if task is None:
                logger.debug(f"No eligible task for block {i} at {block_start.isoformat()}")
                continue

            timeline.occupy(i, i, task.id)
            assigned += 1
        return assigned

    def _make_events(
        self, timeline: BlockTimeline, task_index: dict[Hashable, TaskLike]
    ) -> list[ScheduledEvent]:
        events = []
        for i, occupant in timeline:
            if not is_task_occupant(occupant):
                continue
            task = task_index[occupant]
            start = timeline.time_for_index(i)
            events.append(ScheduledEvent(start=start, end=start + timeline.block_delta, task_id=task.id))
        return events

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, run: ScheduleRun) -> ValidationResult:
        """
        Validate that all scheduling invariants hold for a run.

        Invariants:
        1. No two events overlap
        2. Every event lasts exactly one block
        3. Every event references a task in the run
        4. Every event sits on a block stamped with its own task (never a busy block)
        5. No event ends after horizon_end

        Returns:
            ValidationResult with issues and stats
        """
        issues = []
        timeline = run.timeline

        # Check 1: overlaps
        ordered = sorted(run.events, key=lambda e: e.start)
        for prev, curr in zip(ordered, ordered[1:]):
            if curr.start < prev.end:
                issues.append(
                    f"Event overlap: {prev.start.isoformat()} ({prev.task_id}) "
                    f"and {curr.start.isoformat()} ({curr.task_id})"
                )

        for e in ordered:
            # Check 2: duration
            if e.end - e.start != timeline.block_delta:
                issues.append(
                    f"Event at {e.start.isoformat()} lasts {e.duration_min} min, "
                    f"expected {timeline.block_size}"
                )

            # Check 5: horizon
            if e.end > run.horizon_end:
                issues.append(
                    f"Event at {e.start.isoformat()} ends after horizon {run.horizon_end.isoformat()}"
                )

            # Check 3: task reference
            if e.task_id not in run.task_index:
                issues.append(f"Event at {e.start.isoformat()} references unknown task {e.task_id!r}")

            # Check 4: block occupancy
            i = timeline.index_for_time(e.start)
            if not 0 <= i < len(timeline) or timeline.time_for_index(i) != e.start:
                issues.append(f"Event at {e.start.isoformat()} is not aligned to a block")
                continue
            occupant = timeline.occupant_at(i)
            if occupant == BUSY:
                issues.append(f"Event at {e.start.isoformat()} sits on a busy block")
            elif occupant != e.task_id:
                issues.append(
                    f"Reference mismatch: block {i} -> {occupant!r}, event -> {e.task_id!r}"
                )

        counts = timeline.counts()
        stats = {
            "total_blocks": counts["total"],
            "busy_blocks": counts["busy"],
            "assigned_blocks": counts["assigned"],
            "empty_blocks": counts["empty"],
            "events": len(run.events),
            "scheduled_tasks": len({e.task_id for e in run.events}),
            "issues": len(issues),
        }

        return ValidationResult(valid=len(issues) == 0, issues=issues, stats=stats)

    def summarize(self, run: ScheduleRun) -> dict:
        """Summary of block usage plus validation state for a run."""
        validation = self.validate(run)
        summary = run.summary()
        summary["validation"] = {
            "valid": validation.valid,
            "issue_count": len(validation.issues),
            "issues": validation.issues[:5],  # First 5 issues
        }
        return summary
