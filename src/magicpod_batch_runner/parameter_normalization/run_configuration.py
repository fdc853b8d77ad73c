"""Normalized run configuration entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EnvironmentKind(str, Enum):
    """Where the target devices are hosted."""

    CLOUD = "cloud"
    REMOTE_HOSTED = "remote_hosted"
    ON_PREMISE = "on_premise"


class AppSourceKind(str, Enum):
    """Wire tokens for the app_type field."""

    APP_FILE = "app_file"
    APP_URL = "app_url"
    INSTALLED = "installed"


@dataclass(frozen=True)
class UploadedAppFile:
    """App binary uploaded before the batch run starts."""

    path: Path
    bundle_id: str | None = None

    @property
    def kind(self) -> AppSourceKind:
        return AppSourceKind.APP_FILE


@dataclass(frozen=True)
class RemoteAppUrl:
    """App binary downloaded by the remote service from a URL."""

    url: str
    bundle_id: str | None = None

    @property
    def kind(self) -> AppSourceKind:
        return AppSourceKind.APP_URL


@dataclass(frozen=True)
class InstalledIosApp:
    """iOS app already installed on the device, addressed by bundle identifier."""

    bundle_id: str

    @property
    def kind(self) -> AppSourceKind:
        return AppSourceKind.INSTALLED


@dataclass(frozen=True)
class InstalledAndroidApp:
    """App already installed on the device, addressed by package and launch activity."""

    app_package: str
    app_activity: str

    @property
    def kind(self) -> AppSourceKind:
        return AppSourceKind.INSTALLED


AppSource = UploadedAppFile | RemoteAppUrl | InstalledIosApp | InstalledAndroidApp


@dataclass(frozen=True)
class ExternalServiceCredentials:
    """Device farm credentials forwarded to the remote service."""

    token: str | None = field(default=None, repr=False)
    server_url: str | None = None
    user_name: str | None = None
    password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class RunConfiguration:  # pylint: disable=too-many-instance-attributes
    """Normalized inputs required to start one batch run."""

    organization_name: str
    project_name: str
    environment: str
    environment_kind: EnvironmentKind
    os_name: str
    device_type: str
    version: str
    model: str
    app_source: AppSource
    capture_type: str
    device_language: str
    device_region: str | None = None
    retry_count: int = 0
    send_mail: bool | None = None
    multi_lang_data: str | None = None
    external_service: ExternalServiceCredentials = field(
        default_factory=ExternalServiceCredentials
    )
