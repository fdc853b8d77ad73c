"""CLI orchestration integration tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from click.testing import CliRunner
from magicpod_batch_runner.cli import cli
from magicpod_batch_runner.configuration.loader import SETTING_NAMES
from magicpod_batch_runner.remote_api.api_models import RunHandle, TestCaseTally, UploadedArtifact

_URL = "https://magicpod.example.com/acme/mobile/batch-run/5/"


def _handle(status: str, succeeded: int = 0, failed: int = 0, total: int = 2) -> RunHandle:
    return RunHandle(
        organization_name="acme",
        project_name="mobile",
        batch_run_number=5,
        status=status,
        test_cases=TestCaseTally(succeeded=succeeded, failed=failed, total=total),
        url=_URL,
    )


def _write_config(tmp_path: Path, **overrides: Any) -> Path:
    config: dict[str, Any] = {
        "magic_pod_api_token": "cli-secret-token",
        "organization_name": "acme",
        "project_name": "mobile",
        "environment": "Magic Pod",
        "os": "Android",
        "device_type": "Emulator",
        "version": "13",
        "model": "Pixel 7",
        "app_type": "App file (cloud upload)",
        "app_path": "app.apk",
        "capture_type": "Every UI transit",
        "device_language": "English",
        "result_sink": "file",
        "result_file": "results.env",
    }
    config.update(overrides)
    (tmp_path / "app.apk").write_bytes(b"apk")
    path = tmp_path / "magicpod.yaml"
    path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return path


def _fake_client(*polls: RunHandle, started: RunHandle | None = None):
    calls: dict[str, list[Any]] = {"settings": [], "uploads": [], "payloads": [], "fetches": []}
    remaining = list(polls)

    class FakeBatchRunApiClient:
        def __init__(self, settings) -> None:
            calls["settings"].append(settings)

        def upload_file(self, file_path) -> UploadedArtifact:
            calls["uploads"].append(Path(file_path))
            return UploadedArtifact(file_name=Path(file_path).name, file_number=31)

        def start_batch_run(self, payload) -> RunHandle:
            calls["payloads"].append(payload)
            return started or _handle("running")

        def get_batch_run(self, batch_run_number: int) -> RunHandle:
            calls["fetches"].append(batch_run_number)
            return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    return FakeBatchRunApiClient, calls


def _exported(tmp_path: Path) -> dict[str, str]:
    lines = (tmp_path / "results.env").read_text(encoding="utf-8").splitlines()
    return dict(line.split("=", 1) for line in lines)


def test_generate_config_command_writes_placeholder_file_with_default_name(tmp_path: Path) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=str(tmp_path)):
        result = runner.invoke(cli, ["generate-config"])
        output_path = Path("magicpod.yaml").resolve()

        assert result.exit_code == 0
        assert output_path.exists()
        content = output_path.read_text(encoding="utf-8")
        for name in SETTING_NAMES:
            assert f"{name}:" in content
        assert "<REQUIRED>" in content
        assert "<OPTIONAL>" in content
        assert str(output_path) in result.output


def test_generate_config_command_fails_when_output_file_already_exists(tmp_path: Path) -> None:
    runner = CliRunner()
    output_path = tmp_path / "magicpod.yaml"
    output_path.write_text("already-there", encoding="utf-8")

    result = runner.invoke(cli, ["generate-config", "--output", str(output_path)])

    assert result.exit_code != 0
    assert "already exists" in str(result.exception).lower()
    assert output_path.read_text(encoding="utf-8") == "already-there"


def test_run_command_uploads_starts_waits_and_exports(tmp_path: Path, monkeypatch) -> None:
    client_class, calls = _fake_client(_handle("succeeded", 2, 0, 2))
    monkeypatch.setattr("magicpod_batch_runner.cli.BatchRunApiClient", client_class)
    config_path = _write_config(tmp_path)

    result = CliRunner().invoke(cli, ["run", "--config", str(config_path)])

    assert result.exit_code == 0, result.output
    assert calls["uploads"] == [(tmp_path / "app.apk").resolve()]
    assert calls["payloads"][0]["app_file_number"] == 31
    assert calls["settings"][0].api_token == "cli-secret-token"
    assert "Magic Pod test succeeded" in result.output
    assert "- magic_pod_api_token: ***" in result.output
    assert "cli-secret-token" not in result.output
    assert _exported(tmp_path) == {
        "MAGIC_POD_TEST_URL": _URL,
        "MAGIC_POD_TEST_BATCH_RUN_NUMBER": "5",
        "MAGIC_POD_TEST_STATUS": "succeeded",
        "MAGIC_POD_TEST_SUCCEEDED_COUNT": "2",
        "MAGIC_POD_TEST_FAILED_COUNT": "0",
        "MAGIC_POD_TEST_TOTAL_COUNT": "2",
    }


def test_run_command_fails_when_batch_run_fails(tmp_path: Path, monkeypatch) -> None:
    client_class, _ = _fake_client(_handle("failed", 1, 1, 2))
    monkeypatch.setattr("magicpod_batch_runner.cli.BatchRunApiClient", client_class)
    config_path = _write_config(tmp_path)

    result = CliRunner().invoke(cli, ["run", "--config", str(config_path)])

    assert result.exit_code == 1
    assert "Magic Pod test failed" in str(result.exception)
    assert _exported(tmp_path)["MAGIC_POD_TEST_STATUS"] == "failed"


def test_run_command_environment_overrides_file_values(tmp_path: Path, monkeypatch) -> None:
    client_class, calls = _fake_client(_handle("succeeded"))
    monkeypatch.setattr("magicpod_batch_runner.cli.BatchRunApiClient", client_class)
    config_path = _write_config(tmp_path)

    result = CliRunner().invoke(
        cli,
        ["run", "--config", str(config_path)],
        env={"wait_for_result": "false", "retry_count": "3"},
    )

    assert result.exit_code == 0, result.output
    assert "Exit without waiting" in result.output
    assert calls["fetches"] == []
    assert calls["payloads"][0]["retry_count"] == 3
    assert "MAGIC_POD_TEST_STATUS" not in _exported(tmp_path)


def test_run_command_reports_invalid_parameters_without_calling_service(
    tmp_path: Path, monkeypatch
) -> None:
    client_class, calls = _fake_client(_handle("succeeded"))
    monkeypatch.setattr("magicpod_batch_runner.cli.BatchRunApiClient", client_class)
    config_path = _write_config(tmp_path, environment="Sauce Labs", capture_type="Sometimes")

    result = CliRunner().invoke(cli, ["run", "--config", str(config_path)])

    assert result.exit_code == 1
    message = str(result.exception)
    assert "Invalid configuration:" in message
    assert "Environment should be" in message
    assert "Capture type should be" in message
    assert calls["settings"] == []


def test_status_command_exports_current_result(tmp_path: Path, monkeypatch) -> None:
    client_class, calls = _fake_client(_handle("succeeded", 4, 0, 4))
    monkeypatch.setattr("magicpod_batch_runner.cli.BatchRunApiClient", client_class)
    config_path = _write_config(tmp_path)

    result = CliRunner().invoke(
        cli, ["status", "--config", str(config_path), "--batch-run-number", "5"]
    )

    assert result.exit_code == 0, result.output
    assert calls["fetches"] == [5]
    assert calls["uploads"] == []
    assert _exported(tmp_path)["MAGIC_POD_TEST_TOTAL_COUNT"] == "4"
