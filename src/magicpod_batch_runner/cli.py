"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from magicpod_batch_runner.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from magicpod_batch_runner.remote_api import BatchRunApiClient
from magicpod_batch_runner.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_batch_run,
    fetch_batch_run_status,
)

PACKAGE_LOGGER_NAME = "magicpod_batch_runner"


class CliError(Exception):
    """Custom CLI error."""


class ClickEchoHandler(logging.Handler):
    """Write log records through click so CliRunner and terminals both capture them."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=record.levelno >= logging.WARNING)
        except Exception:  # pylint: disable=broad-exception-caught
            self.handleError(record)


def configure_logging(verbose: bool) -> None:
    """Route package logs to the console; DEBUG when verbose."""
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            logger.removeHandler(handler)
    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="magicpod-batch-runner")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log HTTP calls and polls.")
def cli(verbose: bool) -> None:
    """Start MagicPod batch runs and wait for their results."""
    configure_logging(verbose)


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML batch run configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML batch run configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="run")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML/JSON configuration file; environment variables override its values",
)
def run_batch(config_path: str | None) -> None:
    """Upload the app if needed, start a batch run and wait for its result."""
    try:
        outcome = execute_batch_run(
            RunRequest(config_path=config_path),
            api_client_factory=BatchRunApiClient,
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    if not outcome.succeeded:
        raise CliError(outcome.message)
    click.echo(outcome.message)


@cli.command(name="status")
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(path_type=str),
    help="Optional YAML/JSON configuration file; environment variables override its values",
)
@click.option(
    "--batch-run-number",
    "batch_run_number",
    required=True,
    type=click.IntRange(min=1),
    help="Number of a batch run started earlier",
)
def batch_run_status(config_path: str | None, batch_run_number: int) -> None:
    """Fetch and export the current result of an existing batch run."""
    try:
        outcome = fetch_batch_run_status(
            RunRequest(config_path=config_path),
            batch_run_number,
            api_client_factory=BatchRunApiClient,
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    if not outcome.succeeded:
        raise CliError(outcome.message)
    click.echo(outcome.message)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
