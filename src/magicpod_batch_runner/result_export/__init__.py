"""Result export exports."""

from .result_sinks import (
    BATCH_RUN_NUMBER_KEY,
    FAILED_COUNT_KEY,
    STATUS_KEY,
    SUCCEEDED_COUNT_KEY,
    TEST_URL_KEY,
    TOTAL_COUNT_KEY,
    EnvmanResultSink,
    KeyValueFileResultSink,
    NullResultSink,
    ResultExportError,
    ResultSink,
    create_result_sink,
)

__all__ = [
    "BATCH_RUN_NUMBER_KEY",
    "FAILED_COUNT_KEY",
    "STATUS_KEY",
    "SUCCEEDED_COUNT_KEY",
    "TEST_URL_KEY",
    "TOTAL_COUNT_KEY",
    "EnvmanResultSink",
    "KeyValueFileResultSink",
    "NullResultSink",
    "ResultExportError",
    "ResultSink",
    "create_result_sink",
]
