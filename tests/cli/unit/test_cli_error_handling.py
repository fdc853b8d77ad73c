"""CLI error-handling tests."""

from __future__ import annotations

from magicpod_batch_runner.cli import main


def test_missing_required_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["status"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Missing option" in captured.err
    assert "--batch-run-number" in captured.err
    assert "Traceback" not in captured.err


def test_unknown_option_returns_clean_click_error(capsys) -> None:
    exit_code = main(["run", "--bogus"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "No such option: --bogus" in captured.err
    assert "Traceback" not in captured.err


def test_invalid_batch_run_number_is_rejected(capsys) -> None:
    exit_code = main(["status", "--batch-run-number", "0"])
    captured = capsys.readouterr()

    assert exit_code == 2
    assert "Traceback" not in captured.err


def test_configuration_errors_exit_with_status_one(tmp_path, capsys) -> None:
    exit_code = main(["run", "--config", str(tmp_path / "missing.yaml")])
    captured = capsys.readouterr()

    assert exit_code == 1
    assert "not found" in captured.err
    assert "Traceback" not in captured.err
