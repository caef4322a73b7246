"""
Scheduling data types.

Objects:
- Task / Job (candidate work, with an availability window)
- CalendarEvent (pre-existing busy interval)
- ScheduledEvent (output: one block assigned to one task)

Tasks and calendars are owned by the surrounding application. The scheduler
only reads them through the TaskLike and CalendarLike protocols.
"""

from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

# =============================================================================
# PROVIDER PROTOCOLS
# =============================================================================


@runtime_checkable
class TaskLike(Protocol):
    """Anything the scheduler can place into blocks."""

    id: Hashable
    start: datetime
    due: datetime

    def get_free_job(self) -> Any | None: ...


@runtime_checkable
class CalendarLike(Protocol):
    """Source of already-committed busy intervals."""

    def get_events(self) -> Iterable["CalendarEvent"]: ...


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass
class Job:
    """A single unit of work belonging to a task."""

    id: str
    assigned: bool = False


@dataclass
class Task:
    id: Hashable
    start: datetime
    due: datetime
    title: str = ""
    jobs: list[Job] = field(default_factory=list)

    def get_free_job(self) -> Job | None:
        """Return the first job not yet assigned, or None when all work is taken."""
        for job in self.jobs:
            if not job.assigned:
                return job
        return None


@dataclass(frozen=True)
class CalendarEvent:
    start: datetime
    end: datetime
    task_id: Hashable | None = 0
    title: str = ""


@dataclass
class StaticCalendar:
    """In-memory calendar provider backed by a list of events."""

    events: list[CalendarEvent] = field(default_factory=list)

    def get_events(self) -> list[CalendarEvent]:
        return list(self.events)


@dataclass(frozen=True)
class ScheduledEvent:
    """One block of time assigned to a task."""

    start: datetime
    end: datetime
    task_id: Hashable

    @property
    def duration_min(self) -> int:
        """Event duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

