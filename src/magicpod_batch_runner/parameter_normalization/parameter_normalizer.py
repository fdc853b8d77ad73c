"""Conversion of human-facing run settings into batch-run API parameters.

Every field is checked before anything is reported, so a configuration with
several unselectable values yields all of its errors at once.
"""

from __future__ import annotations

from pathlib import Path
from typing import cast

from magicpod_batch_runner.configuration.runtime_settings import (
    Configuration,
    ExternalServiceSettings,
    RunSettings,
)

from .enum_tables import ENVIRONMENT_KINDS, EnumTable, ParameterProfile, get_parameter_profile
from .normalization_outcomes import NormalizationResult, ParameterError
from .run_configuration import (
    AppSource,
    AppSourceKind,
    EnvironmentKind,
    ExternalServiceCredentials,
    InstalledAndroidApp,
    InstalledIosApp,
    RemoteAppUrl,
    RunConfiguration,
    UploadedAppFile,
)

IOS = "ios"

_APP_TYPE_LABELS = {
    AppSourceKind.APP_FILE: "App file (cloud upload)",
    AppSourceKind.APP_URL: "App file (URL)",
    AppSourceKind.INSTALLED: "Installed app",
}


def convert_to_snake_case(value: str) -> str:
    """Lower-case free text and replace spaces with underscores."""
    return value.lower().replace(" ", "_")


class _ErrorCollector:
    def __init__(self) -> None:
        self.errors: list[ParameterError] = []

    def convert(self, table: EnumTable, display_value: str) -> str | None:
        try:
            return table.to_wire(display_value)
        except ParameterError as error:
            self.errors.append(error)
            return None

    def require(self, field_name: str, value: str | None, reason: str) -> str | None:
        if not value:
            self.errors.append(ParameterError(field_name, f"{field_name} is required {reason}"))
            return None
        return value


def normalize_run_settings(
    configuration: Configuration, profile: ParameterProfile | None = None
) -> NormalizationResult:
    """Normalize the configured run settings against a parameter profile.

    Args:
      configuration: Loaded configuration.
      profile: Enum tables to validate against; defaults to the profile named in
        the configuration.

    Returns:
      A result holding either the normalized run configuration or every error.
    """
    try:
        resolved_profile = profile or get_parameter_profile(configuration.parameter_profile)
    except ParameterError as error:
        return NormalizationResult(configuration=None, errors=(error,))

    run = configuration.run
    collector = _ErrorCollector()

    environment = collector.convert(resolved_profile.environment, run.environment)
    os_name = convert_to_snake_case(run.os_name)
    device_type = convert_to_snake_case(run.device_type)
    app_type = collector.convert(resolved_profile.app_type, run.app_type)
    capture_type = collector.convert(resolved_profile.capture_type, run.capture_type)
    device_language = collector.convert(resolved_profile.device_language, run.device_language)
    device_region = _convert_device_region(resolved_profile, run.device_region, collector)

    environment_kind = ENVIRONMENT_KINDS.get(environment) if environment else None
    if environment and environment_kind is None:
        collector.errors.append(
            ParameterError("environment", f"Environment '{environment}' has no hosting kind")
        )
    app_source = (
        _build_app_source(AppSourceKind(app_type), os_name, run, collector) if app_type else None
    )
    credentials = (
        _select_external_credentials(
            environment_kind, configuration.external_service, collector
        )
        if environment_kind
        else None
    )

    if collector.errors:
        return NormalizationResult(configuration=None, errors=tuple(collector.errors))

    return NormalizationResult(
        configuration=RunConfiguration(
            organization_name=configuration.api.organization_name,
            project_name=configuration.api.project_name,
            environment=cast(str, environment),
            environment_kind=cast(EnvironmentKind, environment_kind),
            os_name=os_name,
            device_type=device_type,
            version=run.version,
            model=run.model,
            app_source=cast(AppSource, app_source),
            capture_type=cast(str, capture_type),
            device_language=cast(str, device_language),
            device_region=device_region,
            retry_count=run.retry_count,
            send_mail=run.send_mail,
            multi_lang_data=run.multi_lang_data,
            external_service=cast(ExternalServiceCredentials, credentials),
        ),
        errors=(),
    )


def _convert_device_region(
    profile: ParameterProfile, display_value: str, collector: _ErrorCollector
) -> str | None:
    if profile.device_region is None:
        if display_value:
            collector.errors.append(
                ParameterError(
                    "device_region",
                    f"Device region is not supported by parameter profile '{profile.name}'",
                )
            )
        return None
    return collector.convert(profile.device_region, display_value)


def _build_app_source(
    kind: AppSourceKind, os_name: str, run: RunSettings, collector: _ErrorCollector
) -> AppSource | None:
    reason = f"when app type is '{_APP_TYPE_LABELS[kind]}'"
    if kind is AppSourceKind.APP_FILE:
        app_path = collector.require("app_path", run.app_path, reason)
        return UploadedAppFile(path=Path(app_path), bundle_id=run.bundle_id) if app_path else None
    if kind is AppSourceKind.APP_URL:
        app_url = collector.require("app_url", run.app_url, reason)
        return RemoteAppUrl(url=app_url, bundle_id=run.bundle_id) if app_url else None
    if os_name == IOS:
        bundle_id = collector.require("bundle_id", run.bundle_id, f"{reason} on iOS")
        return InstalledIosApp(bundle_id=bundle_id) if bundle_id else None
    app_package = collector.require("app_package", run.app_package, reason)
    app_activity = collector.require("app_activity", run.app_activity, reason)
    if app_package and app_activity:
        return InstalledAndroidApp(app_package=app_package, app_activity=app_activity)
    return None


def _select_external_credentials(
    kind: EnvironmentKind,
    settings: ExternalServiceSettings,
    collector: _ErrorCollector,
) -> ExternalServiceCredentials | None:
    if kind is EnvironmentKind.CLOUD:
        return ExternalServiceCredentials()
    if kind is EnvironmentKind.REMOTE_HOSTED:
        token = collector.require(
            "external_service_token", settings.token, "for Remote TestKit environments"
        )
        return ExternalServiceCredentials(token=token) if token else None
    reason = "for on-premise environments"
    server_url = collector.require("external_service_server_url", settings.server_url, reason)
    user_name = collector.require("external_service_user_name", settings.user_name, reason)
    password = collector.require("external_service_password", settings.password, reason)
    if server_url and user_name and password:
        return ExternalServiceCredentials(
            server_url=server_url, user_name=user_name, password=password
        )
    return None
