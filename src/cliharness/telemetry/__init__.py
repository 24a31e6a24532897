#
# src/cliharness/telemetry/__init__.py
#
"""
Logging setup for cliharness.
"""
from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]

# 🔼⚙️
