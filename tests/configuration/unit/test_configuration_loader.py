"""Configuration loader tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from magicpod_batch_runner.configuration.loader import ConfigurationError, load_configuration
from magicpod_batch_runner.configuration.runtime_settings import (
    DEFAULT_BASE_URL,
    describe_settings,
)


def _write_file(path: Path, contents: str) -> Path:
    path.write_text(contents, encoding="utf-8")
    return path


_MINIMAL_YAML = """
magic_pod_api_token: secret-token
organization_name: acme
project_name: mobile-app
environment: Magic Pod
os: Android
device_type: Emulator
version: "13"
model: Pixel 7
app_type: Installed app
app_package: com.example.app
app_activity: .MainActivity
capture_type: Every UI transit
device_language: English
"""


def test_loads_yaml_configuration_with_defaults(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "magicpod.yaml", _MINIMAL_YAML)

    configuration = load_configuration(config_path, environ={})

    assert configuration.source_path == config_path
    assert configuration.api.base_url == DEFAULT_BASE_URL
    assert configuration.api.organization_name == "acme"
    assert configuration.api.api_token == "secret-token"
    assert configuration.api.request_timeout_seconds == 60
    assert configuration.run.os_name == "Android"
    assert configuration.run.device_region == ""
    assert configuration.run.retry_count == 0
    assert configuration.run.send_mail is None
    assert configuration.wait.wait_for_result is True
    assert configuration.wait.max_wait_seconds is None
    assert configuration.wait.poll_interval_seconds == 15
    assert configuration.export.sink == "envman"
    assert configuration.parameter_profile == "standard"


def test_environment_variables_override_file_values(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "magicpod.yaml", _MINIMAL_YAML)

    configuration = load_configuration(
        config_path,
        environ={
            "magic_pod_api_token": "from-env",
            "wait_for_result": "false",
            "max_wait_seconds": "600",
            "retry_count": "2",
            "send_mail": "Yes",
            "unrelated": "ignored",
        },
    )

    assert configuration.api.api_token == "from-env"
    assert configuration.wait.wait_for_result is False
    assert configuration.wait.max_wait_seconds == 600
    assert configuration.run.retry_count == 2
    assert configuration.run.send_mail is True


def test_loads_configuration_from_environment_only() -> None:
    environ = {
        "magic_pod_api_token": "token",
        "organization_name": "acme",
        "project_name": "web",
        "environment": "Remote TestKit",
        "external_service_token": "rtk-token",
        "os": "iOS",
        "device_type": "Real device",
        "version": "17.0",
        "model": "iPhone 15",
        "app_type": "App file (URL)",
        "app_url": "https://example.com/app.ipa",
        "capture_type": "Every step",
    }

    configuration = load_configuration(None, environ=environ)

    assert configuration.source_path is None
    assert configuration.external_service.token == "rtk-token"
    assert configuration.run.app_url == "https://example.com/app.ipa"
    assert configuration.run.device_language == ""


def test_integer_version_and_structured_multi_lang_data_are_converted(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.json",
        json.dumps(
            {
                "magic_pod_api_token": "token",
                "organization_name": "acme",
                "project_name": "web",
                "environment": "Magic Pod",
                "os": "iOS",
                "device_type": "Simulator",
                "version": 17,
                "model": "iPhone 14",
                "app_type": "App file (cloud upload)",
                "app_path": "build/App.app",
                "capture_type": "Every step",
                "multi_lang_data": {"greeting": {"en": "Hello", "ja": "こんにちは"}},
            }
        ),
    )

    configuration = load_configuration(config_path, environ={})

    assert configuration.run.version == "17"
    assert configuration.run.multi_lang_data == '{"greeting":{"en":"Hello","ja":"こんにちは"}}'


def test_unquoted_decimal_version_is_rejected(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.yaml",
        _MINIMAL_YAML.replace('version: "13"', "version: 12.10"),
    )

    with pytest.raises(ConfigurationError, match="version must be quoted"):
        load_configuration(config_path, environ={})


def test_quoted_decimal_version_is_kept_verbatim(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.yaml",
        _MINIMAL_YAML.replace('version: "13"', 'version: "12.10"'),
    )

    configuration = load_configuration(config_path, environ={})

    assert configuration.run.version == "12.10"


def test_process_environment_skips_names_shadowed_by_system_variables(
    tmp_path: Path, monkeypatch
) -> None:
    config_path = _write_file(tmp_path / "magicpod.yaml", _MINIMAL_YAML)
    monkeypatch.setattr(
        "magicpod_batch_runner.configuration.loader.PROCESS_ENVIRONMENT_SKIPPED_NAMES",
        frozenset({"os"}),
    )
    monkeypatch.setenv("os", "Windows_NT")
    monkeypatch.setenv("model", "Pixel 8")

    configuration = load_configuration(config_path)

    assert configuration.run.os_name == "Android"
    assert configuration.run.model == "Pixel 8"


def test_explicit_environment_mapping_may_set_os(tmp_path: Path, monkeypatch) -> None:
    config_path = _write_file(tmp_path / "magicpod.yaml", _MINIMAL_YAML)
    monkeypatch.setattr(
        "magicpod_batch_runner.configuration.loader.PROCESS_ENVIRONMENT_SKIPPED_NAMES",
        frozenset({"os"}),
    )

    configuration = load_configuration(config_path, environ={"os": "iOS"})

    assert configuration.run.os_name == "iOS"


def test_missing_configuration_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        load_configuration(tmp_path / "missing.yaml", environ={})


def test_missing_required_setting_raises() -> None:
    with pytest.raises(ConfigurationError, match="magic_pod_api_token is required"):
        load_configuration(None, environ={"organization_name": "acme"})


def test_unknown_setting_raises(tmp_path: Path) -> None:
    config_path = _write_file(tmp_path / "magicpod.yaml", _MINIMAL_YAML + "colour: blue\n")

    with pytest.raises(ConfigurationError, match="Unknown configuration settings: colour"):
        load_configuration(config_path, environ={})


def test_unreplaced_required_placeholder_raises(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.yaml",
        _MINIMAL_YAML.replace("model: Pixel 7", 'model: "<REQUIRED>"'),
    )

    with pytest.raises(ConfigurationError, match="placeholder for: model"):
        load_configuration(config_path, environ={})


def test_optional_placeholders_are_treated_as_unset(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.yaml", _MINIMAL_YAML + 'app_url: "<OPTIONAL>"\n'
    )

    configuration = load_configuration(config_path, environ={})

    assert configuration.run.app_url is None


@pytest.mark.parametrize(
    ("extra", "message"),
    [
        ("retry_count: -1\n", "retry_count must not be negative"),
        ("poll_interval_seconds: 0\n", "poll_interval_seconds must be greater than zero"),
        ("wait_for_result: maybe\n", "wait_for_result must be a boolean"),
        ("result_sink: slack\n", "result_sink must be one of"),
        ("result_sink: file\n", "result_file is required"),
    ],
)
def test_invalid_option_values_raise(tmp_path: Path, extra: str, message: str) -> None:
    config_path = _write_file(tmp_path / "magicpod.yaml", _MINIMAL_YAML + extra)

    with pytest.raises(ConfigurationError, match=message):
        load_configuration(config_path, environ={})


def test_result_file_is_resolved_relative_to_configuration(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.yaml",
        _MINIMAL_YAML + "result_sink: file\nresult_file: out/results.env\n",
    )

    configuration = load_configuration(config_path, environ={})

    assert configuration.export.result_file == (tmp_path / "out" / "results.env").resolve()


def test_app_path_is_resolved_relative_to_configuration(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.yaml", _MINIMAL_YAML + "app_path: build/app.apk\n"
    )

    configuration = load_configuration(config_path, environ={})

    assert configuration.run.app_path == str((tmp_path / "build" / "app.apk").resolve())


def test_describe_settings_masks_secrets(tmp_path: Path) -> None:
    config_path = _write_file(
        tmp_path / "magicpod.yaml",
        _MINIMAL_YAML + "external_service_password: hunter2\n",
    )
    configuration = load_configuration(config_path, environ={})

    described = dict(describe_settings(configuration))

    assert described["magic_pod_api_token"] == "***"
    assert described["external_service_password"] == "***"
    assert described["external_service_token"] == ""
    assert described["organization_name"] == "acme"
    rendered = repr(configuration) + " ".join(value for _, value in described.items())
    assert "secret-token" not in rendered
    assert "hunter2" not in rendered
