#
# src/cliharness/config.py
#
"""
Attrs-based configuration for the test harness, plus a TOML loader.
"""

import codecs
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import attrs
import structlog
from attrs import define, field

from cliharness.exceptions import ConfigurationError

log = structlog.get_logger("config")

DEFAULT_RELAY_PREFIX = "     "


def _validate_file_name(inst: Any, attr: Any, value: str) -> None:
    """Log file names must be bare names, not paths."""
    if not value or Path(value).name != value:
        raise ValueError(f"Field '{attr.name}' must be a plain file name, got {value!r}")


def _validate_encoding(inst: Any, attr: Any, value: str) -> None:
    try:
        codecs.lookup(value)
    except LookupError as e:
        raise ValueError(f"Unknown encoding '{value}'") from e


def _optional_path(value: Any) -> Path | None:
    return None if value is None else Path(value)


@define(frozen=True, slots=True)
class HarnessConfig:
    """Settings shared by every assertion a tester runs."""
    log_dir: Path = field(default=Path("."), converter=Path)
    stdout_log: str = field(default="stdout.txt", validator=_validate_file_name)
    stderr_log: str = field(default="stderr.txt", validator=_validate_file_name)
    # Off by default: later calls overwrite the same two files.
    unique_log_names: bool = field(default=False)
    relay_prefix: str = field(default=DEFAULT_RELAY_PREFIX)
    echo_output: bool = field(default=False)
    encoding: str = field(default="utf-8", validator=_validate_encoding)
    cwd: Path | None = field(default=None, converter=_optional_path)
    env: Mapping[str, str] | None = field(default=None)


def load_config(config_path: Path) -> HarnessConfig:
    """
    Loads the ``[harness]`` table of a TOML file into a HarnessConfig.

    A missing table yields the defaults. Any read, parse or validation
    problem is raised as ConfigurationError.
    """
    config_log = log.bind(config_path=str(config_path))
    config_log.debug("Loading harness configuration")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file '{config_path}': {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Invalid TOML in '{config_path}': {e}") from e

    section = data.get("harness", {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"'harness' in '{config_path}' must be a table")

    known = {a.name for a in attrs.fields(HarnessConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigurationError(f"Unknown harness option(s) in '{config_path}': {', '.join(unknown)}")

    try:
        config = HarnessConfig(**section)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid harness configuration in '{config_path}': {e}") from e

    config_log.info("Harness configuration loaded", log_dir=str(config.log_dir))
    return config

# 🔼⚙️
