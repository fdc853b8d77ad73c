"""Configuration loader service."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import (
    DEFAULT_BASE_URL,
    DEFAULT_PARAMETER_PROFILE,
    DEFAULT_POLL_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    RESULT_SINK_CHOICES,
    RESULT_SINK_ENVMAN,
    RESULT_SINK_FILE,
    ApiSettings,
    Configuration,
    ExportSettings,
    ExternalServiceSettings,
    RunSettings,
    WaitSettings,
)

SETTING_NAMES = (
    "base_url",
    "magic_pod_api_token",
    "organization_name",
    "project_name",
    "environment",
    "external_service_token",
    "external_service_server_url",
    "external_service_user_name",
    "external_service_password",
    "os",
    "device_type",
    "version",
    "model",
    "app_type",
    "app_path",
    "app_url",
    "bundle_id",
    "app_package",
    "app_activity",
    "capture_type",
    "device_language",
    "device_region",
    "multi_lang_data",
    "send_mail",
    "retry_count",
    "wait_for_result",
    "max_wait_seconds",
    "poll_interval_seconds",
    "request_timeout_seconds",
    "parameter_profile",
    "result_sink",
    "result_file",
)

REQUIRED_PLACEHOLDER = "<REQUIRED>"
OPTIONAL_PLACEHOLDER = "<OPTIONAL>"

_TRUE_VALUES = frozenset({"true", "yes", "1", "on"})
_FALSE_VALUES = frozenset({"false", "no", "0", "off"})

# `OS=Windows_NT` is always set on Windows, where os.environ ignores case.
PROCESS_ENVIRONMENT_SKIPPED_NAMES = frozenset({"os"}) if os.name == "nt" else frozenset()


class ConfigurationError(Exception):
    """Raised when the configuration is missing or structurally invalid."""


def load_configuration(
    config_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Configuration:
    """Load settings from the optional config file, overlaid by environment variables.

    Environment variables use the same lowercase names as the config file keys
    and take precedence over the file. On Windows the process environment does
    not override `os`, because the system `OS` variable would shadow it.
    """
    path = Path(config_path) if config_path else None
    values: dict[str, Any] = dict(_read_config_file(path)) if path else {}
    environment = os.environ if environ is None else environ
    skipped_names = PROCESS_ENVIRONMENT_SKIPPED_NAMES if environ is None else frozenset()
    for name in SETTING_NAMES:
        if name in skipped_names:
            continue
        raw = environment.get(name)
        if raw is not None and raw.strip():
            values[name] = raw

    base_path = path.parent if path else Path.cwd()
    return Configuration(
        source_path=path,
        api=_parse_api_settings(values),
        external_service=_parse_external_service_settings(values),
        run=_parse_run_settings(values, base_path),
        wait=_parse_wait_settings(values),
        export=_parse_export_settings(values, base_path),
        parameter_profile=_require_non_empty_string(
            values.get("parameter_profile", DEFAULT_PARAMETER_PROFILE), "parameter_profile"
        ),
    )


def _read_config_file(path: Path) -> Mapping[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        return {}
    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")
    unknown = sorted(str(key) for key in parsed if key not in SETTING_NAMES)
    if unknown:
        raise ConfigurationError(f"Unknown configuration settings: {', '.join(unknown)}")
    placeholders = sorted(
        str(key) for key, value in parsed.items() if value == REQUIRED_PLACEHOLDER
    )
    if placeholders:
        raise ConfigurationError(
            f"Replace the {REQUIRED_PLACEHOLDER} placeholder for: {', '.join(placeholders)}"
        )
    return {
        key: value
        for key, value in parsed.items()
        if value is not None and value != OPTIONAL_PLACEHOLDER
    }


def _parse_api_settings(values: Mapping[str, Any]) -> ApiSettings:
    return ApiSettings(
        base_url=_require_non_empty_string(values.get("base_url", DEFAULT_BASE_URL), "base_url"),
        organization_name=_require_non_empty_string(
            values.get("organization_name"), "organization_name"
        ),
        project_name=_require_non_empty_string(values.get("project_name"), "project_name"),
        api_token=_require_non_empty_string(
            values.get("magic_pod_api_token"), "magic_pod_api_token"
        ),
        request_timeout_seconds=_require_positive_int(
            values.get("request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT_SECONDS),
            "request_timeout_seconds",
        ),
    )


def _parse_external_service_settings(values: Mapping[str, Any]) -> ExternalServiceSettings:
    return ExternalServiceSettings(
        token=_optional_string(values.get("external_service_token"), "external_service_token"),
        server_url=_optional_string(
            values.get("external_service_server_url"), "external_service_server_url"
        ),
        user_name=_optional_string(
            values.get("external_service_user_name"), "external_service_user_name"
        ),
        password=_optional_string(
            values.get("external_service_password"), "external_service_password"
        ),
    )


def _parse_run_settings(values: Mapping[str, Any], base_path: Path) -> RunSettings:
    app_path = _optional_string(values.get("app_path"), "app_path")
    return RunSettings(
        environment=_require_non_empty_string(values.get("environment"), "environment"),
        os_name=_require_non_empty_string(values.get("os"), "os"),
        device_type=_require_non_empty_string(values.get("device_type"), "device_type"),
        version=_require_non_empty_string(_version_text(values.get("version")), "version"),
        model=_require_non_empty_string(values.get("model"), "model"),
        app_type=_require_non_empty_string(values.get("app_type"), "app_type"),
        capture_type=_require_non_empty_string(values.get("capture_type"), "capture_type"),
        device_language=_optional_string(values.get("device_language"), "device_language") or "",
        device_region=_optional_string(values.get("device_region"), "device_region") or "",
        app_path=str(_resolve_path(base_path, app_path)) if app_path else None,
        app_url=_optional_string(values.get("app_url"), "app_url"),
        bundle_id=_optional_string(values.get("bundle_id"), "bundle_id"),
        app_package=_optional_string(values.get("app_package"), "app_package"),
        app_activity=_optional_string(values.get("app_activity"), "app_activity"),
        send_mail=_optional_bool(values.get("send_mail"), "send_mail"),
        retry_count=_require_non_negative_int(values.get("retry_count", 0), "retry_count"),
        multi_lang_data=_normalize_multi_lang_data(values.get("multi_lang_data")),
    )


def _parse_wait_settings(values: Mapping[str, Any]) -> WaitSettings:
    wait_for_result = _optional_bool(values.get("wait_for_result"), "wait_for_result")
    max_wait_seconds = _require_non_negative_int(
        values.get("max_wait_seconds", 0), "max_wait_seconds"
    )
    return WaitSettings(
        wait_for_result=True if wait_for_result is None else wait_for_result,
        max_wait_seconds=max_wait_seconds or None,
        poll_interval_seconds=_require_positive_int(
            values.get("poll_interval_seconds", DEFAULT_POLL_INTERVAL_SECONDS),
            "poll_interval_seconds",
        ),
    )


def _parse_export_settings(values: Mapping[str, Any], base_path: Path) -> ExportSettings:
    sink = _require_non_empty_string(
        values.get("result_sink", RESULT_SINK_ENVMAN), "result_sink"
    ).lower()
    if sink not in RESULT_SINK_CHOICES:
        raise ConfigurationError(
            f"result_sink must be one of {', '.join(RESULT_SINK_CHOICES)}, got '{sink}'."
        )
    result_file_value = _optional_string(values.get("result_file"), "result_file")
    if sink == RESULT_SINK_FILE and result_file_value is None:
        raise ConfigurationError("result_file is required when result_sink is 'file'.")
    result_file = _resolve_path(base_path, result_file_value) if result_file_value else None
    return ExportSettings(sink=sink, result_file=result_file)


def _normalize_multi_lang_data(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (Mapping, list)):
        if not value:
            return None
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    raise ConfigurationError("multi_lang_data must be a string, mapping or list.")


def _version_text(value: Any) -> Any:
    # YAML reads unquoted 12.10 as the float 12.1; only integers convert losslessly.
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        raise ConfigurationError('version must be quoted, e.g. "12.10".')
    if isinstance(value, int):
        return str(value)
    return value


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if value is None:
        raise ConfigurationError(f"{field_name} is required.")
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _optional_bool(value: Any, field_name: str) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        if not lowered:
            return None
    raise ConfigurationError(f"{field_name} must be a boolean.")


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ConfigurationError(f"{field_name} must be an integer.") from exc
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number


def _require_non_negative_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return number
