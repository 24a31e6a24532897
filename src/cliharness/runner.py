#
# src/cliharness/runner.py
#
"""
A shell-command runner using asyncio.subprocess.
"""
import asyncio
import contextlib
import os
from collections.abc import Mapping
from pathlib import Path

import structlog

from cliharness.exceptions import ProcessSpawnError
from cliharness.protocols import ProcessResult, ProcessRunner, TextSink
from cliharness.relay import relay_stream

log = structlog.get_logger("runner")


class SubprocessRunner(ProcessRunner):
    """
    Implements the ProcessRunner protocol by executing a command through the shell.
    """
    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    async def run(
        self,
        command: str,
        *,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
        stdout_sink: TextSink | None = None,
        stderr_sink: TextSink | None = None,
    ) -> ProcessResult:
        """
        Executes the command using asyncio.create_subprocess_shell.

        Both pipes are drained to EOF before the exit code is read, so the
        result always holds the complete output and the final exit status.
        """
        runner_log = log.bind(command=command, cwd=str(cwd) if cwd else os.getcwd())
        runner_log.info("Executing command")

        try:
            process = await asyncio.create_subprocess_shell(
                command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=cwd,
                env=dict(env) if env is not None else None,
            )
        except OSError as e:
            runner_log.error("Command could not be started", error=str(e))
            raise ProcessSpawnError("Failed to spawn process", command=command, details=e) from e

        if stdout_sink is None and stderr_sink is None:
            stdout_bytes, stderr_bytes = await process.communicate()
        else:
            relays = [
                asyncio.ensure_future(relay_stream(process.stdout, stdout_sink, self.encoding)),
                asyncio.ensure_future(relay_stream(process.stderr, stderr_sink, self.encoding)),
            ]
            try:
                stdout_bytes, stderr_bytes = await asyncio.gather(*relays)
            except BaseException:
                await self._abort(process, relays, runner_log)
                raise
            await process.wait()

        exit_code = process.returncode if process.returncode is not None else -1

        runner_log.info("Command finished", exit_code=exit_code)
        runner_log.debug(
            "Command output",
            stdout_len=len(stdout_bytes),
            stderr_len=len(stderr_bytes),
        )

        return ProcessResult(
            exit_code=exit_code,
            stdout=stdout_bytes,
            stderr=stderr_bytes,
        )

    async def _abort(self, process: asyncio.subprocess.Process, relays: list[asyncio.Future], runner_log) -> None:
        """Stops the relays and the child so nothing outlives a failed run."""
        for relay in relays:
            relay.cancel()
        if process.returncode is None:
            runner_log.warning("Killing command after output relay failed")
            with contextlib.suppress(ProcessLookupError):
                process.kill()
        await asyncio.gather(*relays, return_exceptions=True)
        await process.wait()

# 🔼⚙️
