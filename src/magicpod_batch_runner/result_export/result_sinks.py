"""Exporters for run result key/value pairs consumed by later pipeline steps."""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from magicpod_batch_runner.configuration.runtime_settings import (
    RESULT_SINK_ENVMAN,
    RESULT_SINK_FILE,
    ExportSettings,
)

CommandRunner = Callable[[tuple[str, ...]], None]

TEST_URL_KEY = "MAGIC_POD_TEST_URL"
BATCH_RUN_NUMBER_KEY = "MAGIC_POD_TEST_BATCH_RUN_NUMBER"
STATUS_KEY = "MAGIC_POD_TEST_STATUS"
SUCCEEDED_COUNT_KEY = "MAGIC_POD_TEST_SUCCEEDED_COUNT"
FAILED_COUNT_KEY = "MAGIC_POD_TEST_FAILED_COUNT"
TOTAL_COUNT_KEY = "MAGIC_POD_TEST_TOTAL_COUNT"


class ResultExportError(Exception):
    """Raised when a result value cannot be exported."""


class ResultSink(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol for result exporters."""

    def export(self, key: str, value: str) -> None: ...


class EnvmanResultSink:  # pylint: disable=too-few-public-methods
    """Export values to the Bitrise env store with `envman add`."""

    def __init__(self, run_command: CommandRunner | None = None) -> None:
        self._run_command = run_command or _run_checked_command

    def export(self, key: str, value: str) -> None:
        self._run_command(("envman", "add", "--key", key, "--value", value))


class KeyValueFileResultSink:  # pylint: disable=too-few-public-methods
    """Append `KEY=value` lines to a file, e.g. the one named by $GITHUB_OUTPUT."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def export(self, key: str, value: str) -> None:
        if "\n" in value:
            raise ResultExportError(f"Cannot export multi-line value for {key}.")
        try:
            with self._path.open("a", encoding="utf-8") as handle:
                handle.write(f"{key}={value}\n")
        except OSError as exc:
            raise ResultExportError(f"Failed to write {key} to {self._path}: {exc}") from exc


class NullResultSink:  # pylint: disable=too-few-public-methods
    """Discard exported values."""

    def export(self, key: str, value: str) -> None:
        return None


def create_result_sink(settings: ExportSettings) -> ResultSink:
    """Build the exporter selected in the configuration."""
    if settings.sink == RESULT_SINK_ENVMAN:
        return EnvmanResultSink()
    if settings.sink == RESULT_SINK_FILE:
        if settings.result_file is None:
            raise ResultExportError("result_file is required for the file result sink.")
        return KeyValueFileResultSink(settings.result_file)
    return NullResultSink()


def _run_checked_command(command: tuple[str, ...]) -> None:
    """Run one export command and wrap subprocess errors with export-friendly messages."""
    try:
        subprocess.run(list(command), check=True, capture_output=True)
    except FileNotFoundError as exc:
        raise ResultExportError(f"Export command not found: {command[0]}") from exc
    except subprocess.CalledProcessError as exc:
        # Values are never echoed.
        command_text = shlex.join(command[:4])
        raise ResultExportError(
            f"Export command failed with exit code {exc.returncode}: {command_text}"
        ) from exc
