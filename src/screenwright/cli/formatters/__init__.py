"""Output formatters for CLI commands."""

from screenwright.cli.formatters.base import OutputFormat, OutputFormatter
from screenwright.cli.formatters.json_formatter import JsonFormatter

__all__ = ["JsonFormatter", "OutputFormat", "OutputFormatter"]
