"""Report sink adapters."""

from .memory import MemoryReporter
from .rich_console import RichConsoleReporter

__all__ = ["MemoryReporter", "RichConsoleReporter"]
