"""
Observability for scheduling runs: run IDs on log records, run counters.

Usage:
    from windowplanner.observability import METRICS, RunContext, RunIdFilter

    logger.addFilter(RunIdFilter())
    with RunContext() as ctx:
        logger.info("Run started")   # record.run_id == ctx.run_id

    METRICS.snapshot()
"""

from .context import RunContext, RunIdFilter, generate_run_id, get_run_id
from .metrics import METRICS, SchedulingMetrics

__all__ = [
    "METRICS",
    "RunContext",
    "RunIdFilter",
    "SchedulingMetrics",
    "generate_run_id",
    "get_run_id",
]
