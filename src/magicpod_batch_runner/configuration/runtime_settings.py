"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_BASE_URL = "https://app.magicpod.com/api/v1.0"
DEFAULT_POLL_INTERVAL_SECONDS = 15
DEFAULT_REQUEST_TIMEOUT_SECONDS = 60
DEFAULT_PARAMETER_PROFILE = "standard"

RESULT_SINK_ENVMAN = "envman"
RESULT_SINK_FILE = "file"
RESULT_SINK_NONE = "none"
RESULT_SINK_CHOICES = (RESULT_SINK_ENVMAN, RESULT_SINK_FILE, RESULT_SINK_NONE)


@dataclass(frozen=True)
class ApiSettings:
    """Remote API connectivity and identity."""

    base_url: str
    organization_name: str
    project_name: str
    api_token: str = field(repr=False)
    request_timeout_seconds: int = DEFAULT_REQUEST_TIMEOUT_SECONDS


@dataclass(frozen=True)
class ExternalServiceSettings:
    """Credentials for device farms reached through the remote service."""

    token: str | None = field(default=None, repr=False)
    server_url: str | None = None
    user_name: str | None = None
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class RunSettings:  # pylint: disable=too-many-instance-attributes
    """Human-facing run parameters exactly as configured, before normalization."""

    environment: str
    os_name: str
    device_type: str
    version: str
    model: str
    app_type: str
    capture_type: str
    device_language: str = ""
    device_region: str = ""
    app_path: str | None = None
    app_url: str | None = None
    bundle_id: str | None = None
    app_package: str | None = None
    app_activity: str | None = None
    send_mail: bool | None = None
    retry_count: int = 0
    multi_lang_data: str | None = None


@dataclass(frozen=True)
class WaitSettings:
    """How long and how often to wait for a started batch run."""

    wait_for_result: bool = True
    max_wait_seconds: int | None = None
    poll_interval_seconds: int = DEFAULT_POLL_INTERVAL_SECONDS


@dataclass(frozen=True)
class ExportSettings:
    """Where result key/value pairs are exported."""

    sink: str = RESULT_SINK_ENVMAN
    result_file: Path | None = None


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    source_path: Path | None
    api: ApiSettings
    external_service: ExternalServiceSettings
    run: RunSettings
    wait: WaitSettings
    export: ExportSettings
    parameter_profile: str = DEFAULT_PARAMETER_PROFILE


SECRET_SETTING_NAMES = frozenset(
    {"magic_pod_api_token", "external_service_token", "external_service_password"}
)
MASKED_SECRET = "***"


def describe_settings(configuration: Configuration) -> list[tuple[str, str]]:
    """Return the effective settings as display pairs with every secret masked."""
    api = configuration.api
    external = configuration.external_service
    run = configuration.run
    wait = configuration.wait

    def secret(value: str | None) -> str:
        return MASKED_SECRET if value else ""

    def plain(value: object) -> str:
        return "" if value is None else str(value)

    return [
        ("base_url", api.base_url),
        ("magic_pod_api_token", secret(api.api_token)),
        ("organization_name", api.organization_name),
        ("project_name", api.project_name),
        ("environment", run.environment),
        ("external_service_token", secret(external.token)),
        ("external_service_server_url", plain(external.server_url)),
        ("external_service_user_name", plain(external.user_name)),
        ("external_service_password", secret(external.password)),
        ("os", run.os_name),
        ("device_type", run.device_type),
        ("version", run.version),
        ("model", run.model),
        ("app_type", run.app_type),
        ("app_path", plain(run.app_path)),
        ("app_url", plain(run.app_url)),
        ("bundle_id", plain(run.bundle_id)),
        ("app_package", plain(run.app_package)),
        ("app_activity", plain(run.app_activity)),
        ("capture_type", run.capture_type),
        ("device_language", run.device_language),
        ("device_region", run.device_region),
        ("multi_lang_data", plain(run.multi_lang_data)),
        ("send_mail", plain(run.send_mail)),
        ("retry_count", str(run.retry_count)),
        ("wait_for_result", str(wait.wait_for_result)),
        ("max_wait_seconds", plain(wait.max_wait_seconds)),
        ("poll_interval_seconds", str(wait.poll_interval_seconds)),
        ("parameter_profile", configuration.parameter_profile),
        ("result_sink", configuration.export.sink),
    ]
