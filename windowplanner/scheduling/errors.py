"""
Scheduling errors.

Every error is raised at the point of detection and propagates unchanged to
the caller of the scheduling run. No partial schedule is ever returned.
"""


class ScheduleError(Exception):
    """Base class for all scheduling failures."""

    pass


class EmptyInputError(ScheduleError):
    """Raised when the task list is empty - there is no horizon to schedule against."""

    pass


class InvalidIntervalError(ScheduleError, ValueError):
    """Raised when an interval's end does not come after its start."""

    def __init__(self, start, end, what: str = "interval"):
        self.start = start
        self.end = end
        self.what = what
        super().__init__(f"Invalid {what}: end {end} does not come after start {start}")


class OutOfRangeError(ScheduleError, IndexError):
    """Raised when a block index falls outside the allocated timeline."""

    pass


class DuplicateTaskError(ScheduleError):
    """Raised when a task id repeats within a run or collides with an occupancy marker."""

    pass
