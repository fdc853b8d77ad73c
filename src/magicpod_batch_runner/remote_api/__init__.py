"""Remote batch-run API exports."""

from .api_models import ResponseShapeError, RunHandle, RunStatus, TestCaseTally, UploadedArtifact
from .batch_run_client import (
    BatchRunApiClient,
    BatchRunApiError,
    HttpSession,
    describe_error_response,
)

__all__ = [
    "ResponseShapeError",
    "RunHandle",
    "RunStatus",
    "TestCaseTally",
    "UploadedArtifact",
    "BatchRunApiClient",
    "BatchRunApiError",
    "HttpSession",
    "describe_error_response",
]
