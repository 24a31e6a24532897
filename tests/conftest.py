import logging
from pathlib import Path

import pytest
import structlog

from cliharness.config import HarnessConfig
from cliharness.tester import BaseTester


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any logging configuration a test (e.g. a CLI invocation) applied."""
    yield
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)


@pytest.fixture
def harness_config(tmp_path: Path) -> HarnessConfig:
    """Config writing capture logs into a per-test directory."""
    return HarnessConfig(log_dir=tmp_path / "logs")


class CommandTester(BaseTester):
    """A tester whose body is an async callable set by the test."""

    def __init__(self, body=None, **kwargs):
        super().__init__(**kwargs)
        self.body = body
        self.runs = 0

    async def do_test(self) -> None:
        self.runs += 1
        if self.body is not None:
            await self.body(self)


@pytest.fixture
def make_tester(harness_config: HarnessConfig):
    def _make(body=None, config: HarnessConfig | None = None, runner=None) -> CommandTester:
        return CommandTester(body, config=config or harness_config, runner=runner)

    return _make
