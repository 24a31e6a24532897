# src/cliharness/exceptions.py

"""
Exceptions for cliharness.

``TestFailure`` is the only expected-domain signal. Everything deriving from
``CliHarnessError`` is an infrastructure problem and must never be reported
as a failed test.
"""


class TestFailure(Exception):
    """Raised by an assertion that did not hold. Carries no payload."""

    __test__ = False

    def __init__(self) -> None:
        super().__init__("Test failed")


class CliHarnessError(Exception):
    """Base class for infrastructure errors raised by cliharness."""

    pass


class ConfigurationError(CliHarnessError):
    """Invalid or unreadable harness configuration."""

    pass


class ProcessSpawnError(CliHarnessError):
    """The command could not be started at the OS level."""

    def __init__(self, message: str, command: str | None = None, details: Exception | None = None):
        self.command = command
        self.details = details
        full_message = message
        if command:
            full_message += f" (Command: '{command}')"
        super().__init__(full_message)
        if details and hasattr(self, "add_note"):
            self.add_note(f"Original error: {type(details).__name__}: {details}")

# 🔼⚙️
