"""
Scheduling Module

Places pending tasks into fixed-size time blocks around existing calendar
commitments.

Objects:
- Task / Job (candidate work with an availability window)
- CalendarEvent (external busy interval)
- BlockTimeline (quantized horizon with per-block occupancy)
- ScheduledEvent (one block assigned to one task)

Invariants:
- Every block holds at most one occupant
- Calendar busy time is never overwritten by a task
- Among eligible tasks, the earliest due date is placed first
- Inputs are read, never mutated
"""

from .block_timeline import BUSY, EMPTY, BlockTimeline, blocks_in_interval
from .errors import (
    DuplicateTaskError,
    EmptyInputError,
    InvalidIntervalError,
    OutOfRangeError,
    ScheduleError,
)
from .models import (
    CalendarEvent,
    CalendarLike,
    Job,
    ScheduledEvent,
    StaticCalendar,
    Task,
    TaskLike,
)
from .scheduler import (
    Scheduler,
    ScheduleRun,
    ValidationResult,
    eligible_at,
    order_by_urgency,
    pick_task,
)

__all__ = [
    "BUSY",
    "EMPTY",
    "BlockTimeline",
    "blocks_in_interval",
    "CalendarEvent",
    "CalendarLike",
    "Job",
    "ScheduledEvent",
    "StaticCalendar",
    "Task",
    "TaskLike",
    "Scheduler",
    "ScheduleRun",
    "ValidationResult",
    "eligible_at",
    "order_by_urgency",
    "pick_task",
    "ScheduleError",
    "EmptyInputError",
    "InvalidIntervalError",
    "OutOfRangeError",
    "DuplicateTaskError",
]
