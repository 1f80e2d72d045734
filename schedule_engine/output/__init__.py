"""Schedule output formatting."""

from .formatters import (
    JSONFormatter,
    CSVFormatter,
    ConsoleFormatter,
    format_json,
    format_csv,
    format_console,
)

__all__ = [
    "JSONFormatter",
    "CSVFormatter",
    "ConsoleFormatter",
    "format_json",
    "format_csv",
    "format_console",
]
