"""HTTP client for the upload-file and batch-run endpoints."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, Protocol, TypeVar
from urllib.parse import quote

import requests

from magicpod_batch_runner.configuration.runtime_settings import ApiSettings

from .api_models import ResponseShapeError, RunHandle, UploadedArtifact

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

AUTH_SCHEME = "Token"
UPLOAD_FILE_PATH = "/{organization_name}/{project_name}/upload-file/"
BATCH_RUN_PATH = "/{organization_name}/{project_name}/batch-run/"
BATCH_RUN_DETAIL_PATH = "/{organization_name}/{project_name}/batch-run/{batch_run_number}/"


class BatchRunApiError(Exception):
    """Raised when a remote API call fails or answers with an unusable body."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HttpResponse(Protocol):
    """Subset of the requests response API used by the client."""

    status_code: int
    reason: str
    text: str

    def json(self) -> Any: ...


class HttpSession(Protocol):  # pylint: disable=too-few-public-methods
    """Protocol implemented by requests.Session and test fakes."""

    def request(self, method: str, url: str, **kwargs: Any) -> HttpResponse: ...


class BatchRunApiClient:
    """Request template sharing base URL, auth header and organization/project path parameters."""

    def __init__(self, settings: ApiSettings, session: HttpSession | None = None) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._path_params = {
            "organization_name": settings.organization_name,
            "project_name": settings.project_name,
        }

    def upload_file(self, file_path: Path) -> UploadedArtifact:
        """Upload an app file and return the file number assigned by the service."""
        try:
            with file_path.open("rb") as handle:
                response = self._send(
                    "POST", UPLOAD_FILE_PATH, files={"file": (file_path.name, handle)}
                )
        except OSError as exc:
            raise BatchRunApiError(f"Cannot read app file {file_path}: {exc}") from exc
        return self._decode(response, UploadedArtifact.from_payload)

    def start_batch_run(self, payload: Mapping[str, Any]) -> RunHandle:
        """Start a batch run with the given request body."""
        response = self._send("POST", BATCH_RUN_PATH, json=dict(payload))
        return self._decode(response, RunHandle.from_payload)

    def get_batch_run(self, batch_run_number: int) -> RunHandle:
        """Fetch the current state of a batch run."""
        response = self._send(
            "GET", BATCH_RUN_DETAIL_PATH, batch_run_number=str(batch_run_number)
        )
        return self._decode(response, RunHandle.from_payload)

    def _url(self, path_template: str, **path_params: str) -> str:
        params = {**self._path_params, **path_params}
        path = path_template.format(
            **{key: quote(value, safe="") for key, value in params.items()}
        )
        return self._settings.base_url.rstrip("/") + path

    def _send(
        self, method: str, path_template: str, *, batch_run_number: str | None = None, **kwargs
    ) -> HttpResponse:
        path_params = {"batch_run_number": batch_run_number} if batch_run_number else {}
        url = self._url(path_template, **path_params)
        LOGGER.debug("%s %s", method, url)
        try:
            return self._session.request(
                method,
                url,
                headers={"Authorization": f"{AUTH_SCHEME} {self._settings.api_token}"},
                timeout=self._settings.request_timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise BatchRunApiError(f"{method} {url} failed: {exc}") from exc

    @staticmethod
    def _decode(response: HttpResponse, parse: Callable[[Any], T]) -> T:
        if not 200 <= response.status_code < 300:
            raise BatchRunApiError(describe_error_response(response), response.status_code)
        try:
            return parse(response.json())
        except (ValueError, ResponseShapeError) as exc:
            raise BatchRunApiError(
                f"{_status_line(response)}: unexpected response body ({exc})",
                response.status_code,
            ) from exc


def describe_error_response(response: HttpResponse) -> str:
    """Render a non-2xx response as one message, falling back when the body is not JSON."""
    status = _status_line(response)
    try:
        body = response.json()
    except ValueError:
        # e.g. an HTML error page from a proxy
        return f"{status}: unexpected error response"
    if not isinstance(body, Mapping):
        return f"{status}: unexpected error response"

    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return f"{status}: {detail}"

    title = body.get("title")
    if isinstance(title, str) and title:
        code = body.get("code")
        return f"{status}: {title} ({code})" if code else f"{status}: {title}"

    field_errors = _format_field_errors(body)
    if field_errors:
        return f"{status}:\n" + "\n".join(field_errors)
    return f"{status}: unexpected error response"


def _format_field_errors(body: Mapping[str, Any]) -> list[str]:
    lines = []
    for key, value in body.items():
        if isinstance(value, (list, tuple)):
            lines.append(f"\t{key}: {','.join(str(item) for item in value)}")
        elif isinstance(value, str):
            lines.append(f"\t{key}: {value}")
    return lines


def _status_line(response: HttpResponse) -> str:
    reason = getattr(response, "reason", "") or ""
    return f"{response.status_code} {reason}".strip()
