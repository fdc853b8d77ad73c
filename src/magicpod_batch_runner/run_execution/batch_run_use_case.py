"""Batch run use-case service: upload, start, poll and report."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol

from magicpod_batch_runner.artifact_packaging import (
    ArtifactArchiveError,
    archive_app_directory,
    requires_archive,
)
from magicpod_batch_runner.configuration import (
    Configuration,
    ConfigurationError,
    describe_settings,
    load_configuration,
)
from magicpod_batch_runner.configuration.runtime_settings import ApiSettings
from magicpod_batch_runner.parameter_normalization import (
    ParameterValidationError,
    RunConfiguration,
    UploadedAppFile,
    normalize_run_settings,
)
from magicpod_batch_runner.remote_api import (
    BatchRunApiClient,
    BatchRunApiError,
    RunHandle,
    RunStatus,
    UploadedArtifact,
)
from magicpod_batch_runner.request_building import build_batch_run_payload
from magicpod_batch_runner.result_export import (
    BATCH_RUN_NUMBER_KEY,
    FAILED_COUNT_KEY,
    STATUS_KEY,
    SUCCEEDED_COUNT_KEY,
    TEST_URL_KEY,
    TOTAL_COUNT_KEY,
    ResultExportError,
    ResultSink,
    create_result_sink,
)

from .run_contracts import PollingPolicy, PollResult, RunOutcome, RunRequest, RunState

LOGGER = logging.getLogger(__name__)

Sleeper = Callable[[float], None]


class RunExecutionError(Exception):
    """Raised when a batch run invocation cannot be completed."""


class BatchRunApi(Protocol):
    """Remote operations used by the use case."""

    def upload_file(self, file_path: Path) -> UploadedArtifact: ...

    def start_batch_run(self, payload: Mapping[str, Any]) -> RunHandle: ...

    def get_batch_run(self, batch_run_number: int) -> RunHandle: ...


def execute_batch_run(
    request: RunRequest,
    *,
    api_client_factory: Callable[[ApiSettings], BatchRunApi] | None = None,
    result_sink: ResultSink | None = None,
    sleep: Sleeper | None = None,
) -> RunOutcome:
    """Load configuration, then start one batch run and wait for it as configured."""
    configuration = _load(request)
    LOGGER.info("Configuration:")
    for name, value in describe_settings(configuration):
        LOGGER.info("- %s: %s", name, value)
    run_configuration = _normalize(configuration)

    resolved_client_factory = api_client_factory or BatchRunApiClient
    try:
        sink = result_sink or create_result_sink(configuration.export)
    except ResultExportError as exc:
        raise RunExecutionError(str(exc)) from exc

    return run_batch(
        run_configuration,
        api=resolved_client_factory(configuration.api),
        result_sink=sink,
        polling_policy=PollingPolicy.from_settings(configuration.wait),
        wait_for_result=configuration.wait.wait_for_result,
        sleep=sleep or time.sleep,
    )


def fetch_batch_run_status(
    request: RunRequest,
    batch_run_number: int,
    *,
    api_client_factory: Callable[[ApiSettings], BatchRunApi] | None = None,
    result_sink: ResultSink | None = None,
) -> RunOutcome:
    """Fetch one batch run once and export its current result."""
    configuration = _load(request)
    resolved_client_factory = api_client_factory or BatchRunApiClient
    try:
        sink = result_sink or create_result_sink(configuration.export)
        batch_run = resolved_client_factory(configuration.api).get_batch_run(batch_run_number)
        if batch_run.is_running:
            outcome = RunOutcome(
                state=RunState.STARTED,
                batch_run=batch_run,
                reported_status=batch_run.status,
                message=f"Batch run #{batch_run_number} is still running: {batch_run.url}",
            )
        else:
            outcome = _classify(PollResult(batch_run=batch_run, timed_out=False, waits=0))
        _export_result(sink, outcome)
    except (BatchRunApiError, ResultExportError) as exc:
        raise RunExecutionError(str(exc)) from exc
    return outcome


def run_batch(
    run_configuration: RunConfiguration,
    *,
    api: BatchRunApi,
    result_sink: ResultSink,
    polling_policy: PollingPolicy,
    wait_for_result: bool = True,
    sleep: Sleeper = time.sleep,
) -> RunOutcome:
    """Upload the app if needed, start the batch run and poll it to a terminal state."""
    try:
        uploaded_artifact = _upload_app_file_if_needed(run_configuration, api)
        batch_run = _start_batch_run(run_configuration, api, uploaded_artifact)
        result_sink.export(TEST_URL_KEY, batch_run.url)
        result_sink.export(BATCH_RUN_NUMBER_KEY, str(batch_run.batch_run_number))

        if not wait_for_result:
            message = "Exit without waiting because 'wait_for_result' is set to false"
            LOGGER.info(message)
            return RunOutcome(
                state=RunState.STARTED,
                batch_run=batch_run,
                reported_status=batch_run.status,
                message=message,
            )

        LOGGER.info("Waiting for the test result ...")
        poll_result = poll_batch_run(api, batch_run.batch_run_number, polling_policy, sleep)
        outcome = _classify(poll_result)
        _export_result(result_sink, outcome)
    except (BatchRunApiError, ArtifactArchiveError, ResultExportError) as exc:
        raise RunExecutionError(str(exc)) from exc
    return outcome


def poll_batch_run(
    api: BatchRunApi,
    batch_run_number: int,
    policy: PollingPolicy,
    sleep: Sleeper = time.sleep,
) -> PollResult:
    """Fetch the batch run until it stops running or the policy deadline passes.

    On timeout the last fetched state is returned as-is; it is not fetched again.
    """
    waited_seconds = 0
    waits = 0
    while True:
        batch_run = api.get_batch_run(batch_run_number)
        LOGGER.debug("Batch run #%d status: %s", batch_run_number, batch_run.status)
        if not batch_run.is_running:
            return PollResult(batch_run=batch_run, timed_out=False, waits=waits)
        if policy.deadline_reached(waited_seconds):
            return PollResult(batch_run=batch_run, timed_out=True, waits=waits)
        sleep(policy.interval_seconds)
        waited_seconds += policy.interval_seconds
        waits += 1


def _load(request: RunRequest) -> Configuration:
    try:
        return load_configuration(request.config_path, request.environ)
    except ConfigurationError as exc:
        raise RunExecutionError(str(exc)) from exc


def _normalize(configuration: Configuration) -> RunConfiguration:
    try:
        return normalize_run_settings(configuration).require_valid()
    except ParameterValidationError as exc:
        raise RunExecutionError(f"Invalid configuration:\n{exc}") from exc


def _upload_app_file_if_needed(
    run_configuration: RunConfiguration, api: BatchRunApi
) -> UploadedArtifact | None:
    source = run_configuration.app_source
    if not isinstance(source, UploadedAppFile):
        return None
    app_path = source.path
    if requires_archive(run_configuration.os_name, app_path):
        app_path = archive_app_directory(app_path)
    LOGGER.info("Upload app file %s to Magic Pod cloud", app_path)
    uploaded_artifact = api.upload_file(app_path)
    LOGGER.info("Done. File number = %d", uploaded_artifact.file_number)
    return uploaded_artifact


def _start_batch_run(
    run_configuration: RunConfiguration,
    api: BatchRunApi,
    uploaded_artifact: UploadedArtifact | None,
) -> RunHandle:
    LOGGER.info("Start batch run")
    batch_run = api.start_batch_run(build_batch_run_payload(run_configuration, uploaded_artifact))
    LOGGER.info(
        "Batch run #%d has started. You can check detail progress on %s",
        batch_run.batch_run_number,
        batch_run.url,
    )
    return batch_run


def _classify(poll_result: PollResult) -> RunOutcome:
    batch_run = poll_result.batch_run
    if poll_result.timed_out:
        state = RunState.TIMED_OUT
        reported_status = RunStatus.FAILED.value
        headline = f"Magic Pod test timed out while {batch_run.status}"
    elif batch_run.is_succeeded:
        state = RunState.SUCCEEDED
        reported_status = batch_run.status
        headline = f"Magic Pod test {batch_run.status}"
    else:
        state = RunState.FAILED
        reported_status = batch_run.status
        headline = f"Magic Pod test {batch_run.status}"
    tally = batch_run.test_cases
    message = (
        f"{headline}:\n"
        f"\tSucceeded : {tally.succeeded}\n"
        f"\tFailed : {tally.failed}\n"
        f"\tTotal : {tally.total}\n"
        f"Please see {batch_run.url} for detail"
    )
    return RunOutcome(
        state=state, batch_run=batch_run, reported_status=reported_status, message=message
    )


def _export_result(result_sink: ResultSink, outcome: RunOutcome) -> None:
    tally = outcome.batch_run.test_cases
    result_sink.export(STATUS_KEY, outcome.reported_status)
    result_sink.export(SUCCEEDED_COUNT_KEY, str(tally.succeeded))
    result_sink.export(FAILED_COUNT_KEY, str(tally.failed))
    result_sink.export(TOTAL_COUNT_KEY, str(tally.total))
