"""
Run ID propagation for scheduling logs.

Every scheduling run gets its own ID. RunIdFilter copies the active ID onto
log records so all lines from one run can be grouped.
"""

import contextvars
import logging
import uuid
from typing import Optional

_run_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "run_id", default=None
)


def get_run_id() -> Optional[str]:
    """Run ID of the scheduling run in progress, if any."""
    return _run_id_var.get()


def generate_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:16]}"


class RunContext:
    """
    Scope a run ID to a block of work.

    Usage:
        with RunContext() as ctx:
            logger.info("Run started")  # record.run_id == ctx.run_id
    """

    def __init__(self, run_id: Optional[str] = None):
        self.run_id = run_id or generate_run_id()
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> "RunContext":
        self._token = _run_id_var.set(self.run_id)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._token is not None:
            _run_id_var.reset(self._token)
            self._token = None


class RunIdFilter(logging.Filter):
    """Attach the active run ID to every record as `run_id` (None outside a run)."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = get_run_id()
        return True
