#
# src/cliharness/protocols.py
#
"""
Defines protocols and data structures for process execution and output sinks.
"""
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from attrs import define


@define(frozen=True, slots=True)
class ProcessResult:
    """
    Structured result from a single subprocess execution.
    """
    exit_code: int
    stdout: bytes
    stderr: bytes


@runtime_checkable
class TextSink(Protocol):
    """
    Anything a relay can write decoded text to (files, consoles, writers).

    ``flush`` is optional: it is called after each relayed chunk when present.
    """

    def write(self, data: str, /) -> int | None: ...

    def close(self) -> None: ...


@runtime_checkable
class ProcessRunner(Protocol):
    """
    Protocol for a runner that executes a shell command to completion.
    """
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
        Runs the command and waits for it to terminate.

        Args:
            command: The shell command line to execute.
            cwd: Working directory override; inherited when None.
            env: Environment override; inherited when None.
            stdout_sink: Optional sink receiving stdout live as it arrives.
            stderr_sink: Optional sink receiving stderr live as it arrives.

        Returns:
            A ProcessResult with the exit code and the complete captured output.
        """
        ...

# 🔼⚙️
