"""Run execution domain exports."""

from .batch_run_use_case import (
    RunExecutionError,
    execute_batch_run,
    fetch_batch_run_status,
    poll_batch_run,
    run_batch,
)
from .run_contracts import PollingPolicy, PollResult, RunOutcome, RunRequest, RunState

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunState",
    "PollingPolicy",
    "PollResult",
    "RunExecutionError",
    "execute_batch_run",
    "fetch_batch_run_status",
    "poll_batch_run",
    "run_batch",
]
