#
# src/cliharness/__init__.py
#
"""
cliharness: a base class for testing command-line programs by running them.
"""
from .config import HarnessConfig, load_config
from .exceptions import CliHarnessError, ConfigurationError, ProcessSpawnError, TestFailure
from .protocols import ProcessResult, ProcessRunner, TextSink
from .relay import relay_stream, setup_io_relay
from .runner import SubprocessRunner
from .tester import BaseTester, TestState
from .writers import MultiWriter, PrefixedLineWriter

__all__ = [
    "BaseTester",
    "CliHarnessError",
    "ConfigurationError",
    "HarnessConfig",
    "MultiWriter",
    "PrefixedLineWriter",
    "ProcessResult",
    "ProcessRunner",
    "ProcessSpawnError",
    "SubprocessRunner",
    "TestFailure",
    "TestState",
    "TextSink",
    "load_config",
    "relay_stream",
    "setup_io_relay",
]

# 🔼⚙️
