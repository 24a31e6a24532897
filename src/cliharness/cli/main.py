# src/cliharness/cli/main.py

"""
Main CLI entry point for cliharness using Click.
Handles global options like logging level.
"""

from importlib.metadata import PackageNotFoundError, version

import click

from cliharness.cli.run_cmds import expect_cli, run_cli
from cliharness.cli.utils import logging_options, setup_logging_from_options

try:
    __version__ = version("cliharness")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, "-V", "--version", package_name="cliharness")
@logging_options
def cli(log_level: str, log_file: str | None, json_logs: bool):
    """
    cliharness: drive command-line programs as test subjects.

    Each invocation runs exactly one test and exits 0 when it passes,
    1 when an assertion fails and 2 when the run is aborted.
    """
    setup_logging_from_options(log_level, log_file, json_logs)


cli.add_command(run_cli)
cli.add_command(expect_cli)

if __name__ == "__main__":
    cli()

# 🖥️⚙️
