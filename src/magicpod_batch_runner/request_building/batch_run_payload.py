"""Assembly of the batch-run request body."""

from __future__ import annotations

from typing import Any

from magicpod_batch_runner.parameter_normalization.run_configuration import (
    AppSource,
    EnvironmentKind,
    InstalledAndroidApp,
    InstalledIosApp,
    RemoteAppUrl,
    RunConfiguration,
    UploadedAppFile,
)
from magicpod_batch_runner.remote_api.api_models import UploadedArtifact

IOS = "ios"
SHARED_DATA_PATTERN_KEY = "shared_data_pattern"
MULTI_LANG_DATA_KEY = "multi_lang_data"


def build_batch_run_payload(
    configuration: RunConfiguration, uploaded_artifact: UploadedArtifact | None = None
) -> dict[str, Any]:
    """Build the ordered request body for starting a batch run.

    Args:
      configuration: Normalized run configuration.
      uploaded_artifact: Upload result; required when the app source is an uploaded file.

    Returns:
      Request body with only the fields relevant to the environment and app source.

    Raises:
      ValueError: If an uploaded-file source is built without its upload result.
    """
    payload: dict[str, Any] = {"environment": configuration.environment}
    payload.update(_external_service_fields(configuration))
    payload["os"] = configuration.os_name
    payload["device_type"] = configuration.device_type
    payload["version"] = configuration.version
    payload["model"] = configuration.model
    payload["app_type"] = configuration.app_source.kind.value
    payload.update(_app_source_fields(configuration, uploaded_artifact))
    if configuration.send_mail is not None:
        payload["send_mail"] = configuration.send_mail
    payload["retry_count"] = configuration.retry_count
    payload["capture_type"] = configuration.capture_type
    payload["device_language"] = configuration.device_language
    if configuration.device_region is not None:
        payload["device_region"] = configuration.device_region
    if configuration.multi_lang_data:
        payload[SHARED_DATA_PATTERN_KEY] = {MULTI_LANG_DATA_KEY: configuration.multi_lang_data}
    return payload


def _external_service_fields(configuration: RunConfiguration) -> dict[str, Any]:
    credentials = configuration.external_service
    if configuration.environment_kind is EnvironmentKind.REMOTE_HOSTED:
        return {"external_service_token": credentials.token}
    if configuration.environment_kind is EnvironmentKind.ON_PREMISE:
        return {
            "external_service_server_url": credentials.server_url,
            "external_service_user_name": credentials.user_name,
            "external_service_password": credentials.password,
        }
    return {}


def _app_source_fields(
    configuration: RunConfiguration, uploaded_artifact: UploadedArtifact | None
) -> dict[str, Any]:
    source: AppSource = configuration.app_source
    if isinstance(source, UploadedAppFile):
        if uploaded_artifact is None:
            raise ValueError("An uploaded app file source requires the upload result.")
        fields: dict[str, Any] = {"app_file_number": uploaded_artifact.file_number}
        fields.update(_device_farm_bundle_id(configuration, source.bundle_id))
        return fields
    if isinstance(source, RemoteAppUrl):
        fields = {"app_url": source.url}
        fields.update(_device_farm_bundle_id(configuration, source.bundle_id))
        return fields
    if isinstance(source, InstalledIosApp):
        return {"bundle_id": source.bundle_id}
    if isinstance(source, InstalledAndroidApp):
        return {"app_package": source.app_package, "app_activity": source.app_activity}
    raise TypeError(f"Unsupported app source: {source!r}")


def _device_farm_bundle_id(
    configuration: RunConfiguration, bundle_id: str | None
) -> dict[str, Any]:
    # Device farms launch iOS app files by bundle id.
    if (
        configuration.os_name == IOS
        and configuration.environment_kind is not EnvironmentKind.CLOUD
        and bundle_id
    ):
        return {"bundle_id": bundle_id}
    return {}
