# src/cliharness/cli/utils.py

import logging

import click

from cliharness.telemetry import setup_logging

LOG_LEVEL_CHOICES = click.Choice(list(logging._nameToLevel.keys()), case_sensitive=False)


def logging_options(f):
    """Decorator to add logging options to any command."""
    f = click.option(
        "-l",
        "--log-level",
        type=LOG_LEVEL_CHOICES,
        default="WARNING",
        envvar="CLIHARNESS_LOG_LEVEL",
        help="Set the logging level.",
    )(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, writable=True, resolve_path=True),
        default=None,
        envvar="CLIHARNESS_LOG_FILE",
        help="Path to write logs to a file (JSON format).",
    )(f)
    f = click.option(
        "--json-logs",
        is_flag=True,
        default=False,
        envvar="CLIHARNESS_JSON_LOGS",
        help="Output console logs as JSON.",
    )(f)
    return f


def setup_logging_from_options(log_level: str, log_file: str | None, json_logs: bool) -> None:
    setup_logging(
        level=logging.getLevelName(log_level.upper()),
        json_logs=json_logs,
        log_file=log_file,
    )

# ⚙️🛠️
