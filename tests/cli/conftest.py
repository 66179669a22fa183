"""CLI test fixtures with ANSI stripping."""

from __future__ import annotations

import re
from collections.abc import Callable

import pytest
from typer.testing import CliRunner, Result

from screenwright.cli.main import app

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def strip_ansi_codes(text: str) -> str:
    """Strip ANSI escape sequences from CLI output."""
    return _ANSI_ESCAPE.sub("", text)


class CleanResult:
    """A CliRunner result whose output has ANSI codes removed."""

    def __init__(self, result: Result) -> None:
        self._result = result

    @property
    def exit_code(self) -> int:
        return self._result.exit_code

    @property
    def exception(self) -> BaseException | None:
        return self._result.exception

    @property
    def output(self) -> str:
        """Cleaned combined output."""
        return strip_ansi_codes(self._result.output)

    @property
    def stdout(self) -> str:
        """Cleaned standard output."""
        return strip_ansi_codes(self._result.stdout)


@pytest.fixture
def run_cli() -> Callable[..., CleanResult]:
    """Invoke the screenwright app and return a cleaned result."""
    runner = CliRunner()

    def invoke(args: list[str], input: str | None = None) -> CleanResult:
        return CleanResult(runner.invoke(app, args, input=input))

    return invoke
