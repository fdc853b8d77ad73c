"""Run execution entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum

from magicpod_batch_runner.configuration.runtime_settings import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    WaitSettings,
)
from magicpod_batch_runner.remote_api.api_models import RunHandle


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one batch run."""

    config_path: str | None = None
    environ: Mapping[str, str] | None = None


class RunState(str, Enum):
    """Terminal state of one invocation."""

    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class PollingPolicy:
    """Fixed-interval polling, optionally bounded by a total wait.

    Without a deadline the loop waits until the run leaves the running state.
    With one, a new wait starts only while the time already waited is below
    `max_wait_seconds`, so at most ceil(max_wait_seconds / interval_seconds)
    waits happen.
    """

    interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS
    max_wait_seconds: int | None = None

    def __post_init__(self) -> None:
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero.")
        if self.max_wait_seconds is not None and self.max_wait_seconds <= 0:
            raise ValueError("max_wait_seconds must be greater than zero when set.")

    @staticmethod
    def from_settings(settings: WaitSettings) -> PollingPolicy:
        return PollingPolicy(
            interval_seconds=settings.poll_interval_seconds,
            max_wait_seconds=settings.max_wait_seconds or None,
        )

    @property
    def has_deadline(self) -> bool:
        return self.max_wait_seconds is not None

    def deadline_reached(self, waited_seconds: int) -> bool:
        return self.max_wait_seconds is not None and waited_seconds >= self.max_wait_seconds


@dataclass(frozen=True)
class PollResult:
    """Last observed batch run state when polling stopped."""

    batch_run: RunHandle
    timed_out: bool
    waits: int


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one invocation."""

    state: RunState
    batch_run: RunHandle
    reported_status: str
    message: str

    @property
    def succeeded(self) -> bool:
        return self.state in (RunState.STARTED, RunState.SUCCEEDED)
