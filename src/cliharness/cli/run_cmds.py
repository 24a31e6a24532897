# src/cliharness/cli/run_cmds.py

import asyncio
import importlib
import logging
import sys
from pathlib import Path

import attrs
import click
import structlog

from cliharness.config import HarnessConfig, load_config
from cliharness.exceptions import ConfigurationError
from cliharness.telemetry import StructLogger
from cliharness.tester import BaseTester

log: StructLogger = structlog.get_logger("cli.run")

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_ABORTED = 2


class ExpectTester(BaseTester):
    """Checks a single command given on the command line."""

    def __init__(
        self,
        command: str,
        stdout: str | None = None,
        stderr: str | None = None,
        exit_code: int = 0,
        under: float | None = None,
        config: HarnessConfig | None = None,
    ):
        super().__init__(config=config)
        self.command = command
        self.expected_stdout = stdout
        self.expected_stderr = stderr
        self.expected_exit_code = exit_code
        self.under = under

    async def do_test(self) -> None:
        if self.under is not None:
            await self.assert_time_under(self.under, self._check)
        else:
            await self._check()

    async def _check(self) -> None:
        result = await self.run_command(self.command)
        self.check_result(
            result,
            self.expected_exit_code,
            stdout=self.expected_stdout,
            stderr=self.expected_stderr,
        )


def load_tester_class(target: str) -> type[BaseTester]:
    """Resolves ``package.module:ClassName`` to a BaseTester subclass."""
    module_name, sep, class_name = target.partition(":")
    if not sep or not module_name or not class_name:
        raise click.BadParameter(f"Expected 'module:ClassName', got '{target}'", param_hint="TARGET")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"Cannot import module '{module_name}': {e}", param_hint="TARGET") from e

    tester_class = getattr(module, class_name, None)
    if not (isinstance(tester_class, type) and issubclass(tester_class, BaseTester)):
        raise click.BadParameter(
            f"'{class_name}' in '{module_name}' is not a BaseTester subclass", param_hint="TARGET"
        )
    return tester_class


def build_config(config_path: Path | None, log_dir: Path | None, echo: bool | None) -> HarnessConfig:
    """Loads the config file (if any) and applies command-line overrides."""
    try:
        config = load_config(config_path) if config_path else HarnessConfig()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    overrides = {}
    if log_dir is not None:
        overrides["log_dir"] = log_dir
    if echo is not None:
        overrides["echo_output"] = echo
    return attrs.evolve(config, **overrides) if overrides else config


def run_tester(tester: BaseTester) -> int:
    """Runs one test and maps its outcome to a process exit code."""
    try:
        passed = asyncio.run(tester.test())
    except KeyboardInterrupt:
        log.warning("Test run interrupted by KeyboardInterrupt (CTRL-C).")
        return 130
    except Exception:
        log.critical("Test run aborted by an unexpected error.", exc_info=True)
        click.secho("ABORTED", fg="yellow", err=True)
        return EXIT_ABORTED
    finally:
        logging.shutdown()

    if passed:
        click.secho("PASS", fg="green")
        return EXIT_PASSED
    click.secho("FAIL", fg="red")
    return EXIT_FAILED


def harness_options(f):
    """Decorator adding the options shared by every test-running command."""
    f = click.option(
        "--echo/--no-echo",
        default=None,
        help="Echo subprocess output live, prefixed, while capturing it.",
    )(f)
    f = click.option(
        "--log-dir",
        type=click.Path(file_okay=False, path_type=Path),
        default=None,
        help="Directory for the captured stdout/stderr files.",
    )(f)
    f = click.option(
        "-c",
        "--config-path",
        type=click.Path(exists=True, file_okay=True, dir_okay=False, readable=True, path_type=Path),
        default=None,
        envvar="CLIHARNESS_CONF",
        show_envvar=True,
        help="TOML file with a [harness] table.",
    )(f)
    return f


@click.command(name="run")
@click.argument("target")
@harness_options
def run_cli(target: str, config_path: Path | None, log_dir: Path | None, echo: bool | None):
    """Run the BaseTester subclass TARGET (module:ClassName) once."""
    tester_class = load_tester_class(target)
    config = build_config(config_path, log_dir, echo)
    log.info("Running tester", target=target)

    exit_code = run_tester(tester_class(config=config))
    if exit_code != EXIT_PASSED:
        sys.exit(exit_code)


@click.command(name="expect")
@click.argument("command")
@click.option("--stdout", "expected_stdout", default=None, help="Text that must appear in stdout.")
@click.option("--stderr", "expected_stderr", default=None, help="Text that must appear in stderr.")
@click.option("--exit-code", type=int, default=0, show_default=True, help="Expected exit code.")
@click.option("--under", type=float, default=None, help="Fail if the check takes longer than this many seconds.")
@harness_options
def expect_cli(
    command: str,
    expected_stdout: str | None,
    expected_stderr: str | None,
    exit_code: int,
    under: float | None,
    config_path: Path | None,
    log_dir: Path | None,
    echo: bool | None,
):
    """Run COMMAND once and check its output and exit code."""
    config = build_config(config_path, log_dir, echo)
    tester = ExpectTester(
        command,
        stdout=expected_stdout,
        stderr=expected_stderr,
        exit_code=exit_code,
        under=under,
        config=config,
    )

    exit_code = run_tester(tester)
    if exit_code != EXIT_PASSED:
        sys.exit(exit_code)

# 🔼⚙️
