#
# src/cliharness/tester.py
#
"""
Base class for tests that drive external command-line processes.

Subclasses implement ``do_test()`` using the assertion helpers; callers invoke
``test()`` and get a single boolean back. Only ``TestFailure`` becomes
``False``. Any other exception (spawn failures, I/O errors, bugs in the test
itself) escapes ``test()`` untouched.
"""
import asyncio
import itertools
import math
import sys
import time
from collections.abc import Awaitable, Callable
from enum import Enum, auto
from pathlib import Path
from typing import NoReturn

import structlog

from cliharness.config import HarnessConfig
from cliharness.exceptions import TestFailure
from cliharness.protocols import ProcessResult, ProcessRunner, TextSink
from cliharness.relay import setup_io_relay
from cliharness.runner import SubprocessRunner
from cliharness.writers import PrefixedLineWriter

log = structlog.get_logger("tester")


class TestState(Enum):
    """Lifecycle of a single ``test()`` invocation."""

    __test__ = False

    RUNNING = auto()
    PASSED = auto()
    FAILED = auto()


class BaseTester:
    """Runs commands and turns their observable behaviour into pass/fail."""

    __test__ = False

    def __init__(
        self,
        config: HarnessConfig | None = None,
        runner: ProcessRunner | None = None,
    ):
        self.config = config or HarnessConfig()
        self.runner = runner or SubprocessRunner(encoding=self.config.encoding)
        self.state: TestState | None = None
        self._log_counter = itertools.count(1)
        self._log = log.bind(tester=type(self).__name__)

    async def test(self) -> bool:
        """Returns True if the test passed, False if an assertion failed."""
        self.state = TestState.RUNNING
        self._log.info("Test started")
        try:
            await self.do_test()
        except TestFailure:
            self.state = TestState.FAILED
            self._log.info("Test failed")
            return False

        self.state = TestState.PASSED
        self._log.info("Test passed")
        return True

    async def do_test(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement do_test()")

    # --- Assertions ---

    async def assert_stdout_contains(
        self,
        command: str,
        expected_stdout: str,
        expected_exit_code: int = 0,
    ) -> None:
        result = await self.run_command(command)
        self.check_result(result, expected_exit_code, stdout=expected_stdout)

    async def assert_stderr_contains(
        self,
        command: str,
        expected_stderr: str,
        expected_exit_code: int = 0,
    ) -> None:
        result = await self.run_command(command)
        self.check_result(result, expected_exit_code, stderr=expected_stderr)

    def check_result(
        self,
        result: ProcessResult,
        expected_exit_code: int = 0,
        stdout: str | None = None,
        stderr: str | None = None,
    ) -> None:
        """Checks an already captured run: exit code first, then each given stream."""
        if result.exit_code != expected_exit_code:
            self.fail(f"Process exited with code {result.exit_code} (expected: {expected_exit_code})")
        if stdout is not None:
            self._check_contains(self._decode(result.stdout), stdout, "stdout")
        if stderr is not None:
            self._check_contains(self._decode(result.stderr), stderr, "stderr")

    def assert_that(self, condition: bool, message: str) -> None:
        if not condition:
            self.fail(message)

    async def assert_time_under(
        self,
        threshold_seconds: float,
        body: Callable[[], Awaitable[object]] | None = None,
    ) -> int:
        """
        Times one run of ``body`` (``do_test`` when omitted) in whole seconds.

        Without an explicit ``body`` the full test body runs again, including
        all of its side effects. Pass a re-runnable coroutine function when
        that matters. Nothing is cancelled: the measurement is taken after the
        body returns.
        """
        target = body or self.do_test
        before = time.monotonic()
        await target()
        after = time.monotonic()
        time_taken = math.floor(after - before + 0.5)

        if time_taken > threshold_seconds:
            self.fail(f"Measured time ({time_taken}s) was above {threshold_seconds} seconds")

        self._log.debug("Time check passed", seconds=time_taken, threshold=threshold_seconds)
        return time_taken

    def fail(self, message: str) -> NoReturn:
        """Logs ``message`` and raises TestFailure."""
        self._log.error(message)
        raise TestFailure()

    # --- Relays ---

    def setup_io_relay(
        self,
        source: asyncio.StreamReader,
        prefixed_destination: TextSink,
        other_destination: TextSink,
    ) -> "asyncio.Task[bytes]":
        return setup_io_relay(
            source,
            prefixed_destination,
            other_destination,
            prefix=self.config.relay_prefix,
            encoding=self.config.encoding,
        )

    # --- Running ---

    async def run_command(self, command: str) -> ProcessResult:
        """Runs ``command`` once and writes its captured output to the log files."""
        stdout_sink = stderr_sink = None
        if self.config.echo_output:
            stdout_sink = PrefixedLineWriter(self.config.relay_prefix, sys.stdout)
            stderr_sink = PrefixedLineWriter(self.config.relay_prefix, sys.stderr)

        result = await self.runner.run(
            command,
            cwd=self.config.cwd,
            env=self.config.env,
            stdout_sink=stdout_sink,
            stderr_sink=stderr_sink,
        )

        stdout_path, stderr_path = self._log_paths()
        stdout_path.parent.mkdir(parents=True, exist_ok=True)
        stdout_path.write_bytes(result.stdout)
        stderr_path.write_bytes(result.stderr)
        self._log.debug(
            "Captured output written",
            stdout_log=str(stdout_path),
            stderr_log=str(stderr_path),
        )
        return result

    def _log_paths(self) -> tuple[Path, Path]:
        log_dir = self.config.log_dir
        if not self.config.unique_log_names:
            return log_dir / self.config.stdout_log, log_dir / self.config.stderr_log

        n = next(self._log_counter)
        return (
            log_dir / _numbered(self.config.stdout_log, n),
            log_dir / _numbered(self.config.stderr_log, n),
        )

    # --- Internals ---

    def _check_contains(self, output: str, expected: str, stream: str) -> None:
        if expected not in output:
            self.fail(f"Expected '{expected}' to be present in {stream}.")

    def _decode(self, data: bytes) -> str:
        return data.decode(self.config.encoding, errors="replace")


def _numbered(file_name: str, n: int) -> str:
    """stdout.txt -> stdout-0001.txt"""
    path = Path(file_name)
    return f"{path.stem}-{n:04d}{path.suffix}"

# 🔼⚙️
