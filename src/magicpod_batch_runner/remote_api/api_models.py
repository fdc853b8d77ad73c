"""Batch-run API response entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResponseShapeError(ValueError):
    """Raised when a successful response body lacks the expected fields."""


class RunStatus(str, Enum):
    """Batch run status tokens reported by the service."""

    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    ABORTED = "aborted"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class UploadedArtifact:
    """App file stored by the service, referenced by number when starting a run."""

    file_name: str
    file_number: int

    @staticmethod
    def from_payload(payload: Any) -> UploadedArtifact:
        body = _require_mapping(payload, "upload-file")
        return UploadedArtifact(
            file_name=str(body.get("file_name", "")),
            file_number=_require_int(body, "file_no"),
        )


@dataclass(frozen=True)
class TestCaseTally:
    """Aggregate test case counts of one batch run."""

    __test__ = False

    succeeded: int = 0
    failed: int = 0
    total: int = 0

    @staticmethod
    def from_payload(payload: Any) -> TestCaseTally:
        if payload is None:
            return TestCaseTally()
        body = _require_mapping(payload, "test_cases")
        return TestCaseTally(
            succeeded=_optional_int(body, "succeeded"),
            failed=_optional_int(body, "failed"),
            total=_optional_int(body, "total"),
        )


@dataclass(frozen=True)
class RunHandle:
    """Latest known state of a batch run; replaced wholesale on every fetch."""

    organization_name: str
    project_name: str
    batch_run_number: int
    status: str
    test_cases: TestCaseTally
    url: str

    @property
    def is_running(self) -> bool:
        return self.status == RunStatus.RUNNING

    @property
    def is_succeeded(self) -> bool:
        return self.status == RunStatus.SUCCEEDED

    @staticmethod
    def from_payload(payload: Any) -> RunHandle:
        body = _require_mapping(payload, "batch-run")
        status = body.get("status")
        if not isinstance(status, str) or not status:
            raise ResponseShapeError("batch-run response is missing 'status'.")
        return RunHandle(
            organization_name=str(body.get("organization_name", "")),
            project_name=str(body.get("project_name", "")),
            batch_run_number=_require_int(body, "batch_run_number"),
            status=status,
            test_cases=TestCaseTally.from_payload(body.get("test_cases")),
            url=str(body.get("url", "")),
        )


def _require_mapping(payload: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ResponseShapeError(f"{label} response must be a JSON object.")
    return payload


def _require_int(body: Mapping[str, Any], key: str) -> int:
    value = body.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseShapeError(f"Response field '{key}' must be an integer.")
    return value


def _optional_int(body: Mapping[str, Any], key: str) -> int:
    value = body.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ResponseShapeError(f"Response field '{key}' must be an integer.")
    return value
