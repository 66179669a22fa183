"""Pytest configuration and fixtures."""

from __future__ import annotations

import asyncio
import os
from collections.abc import AsyncIterator, Callable

import pytest

from screenwright.agents.client import GenerationClient
from screenwright.agents.models import GenerationRequest
from screenwright.config import reset_logging, set_settings
from screenwright.config.settings import ScreenwrightSettings
from screenwright.exceptions import GenerationError


class FakeGenerationClient(GenerationClient):
    """Generation client that replays canned chunks."""

    def __init__(
        self,
        chunks: list[str] | None = None,
        error: GenerationError | None = None,
        hang: bool = False,
    ) -> None:
        self.chunks = chunks or []
        self.error = error
        self.hang = hang
        self.requests: list[GenerationRequest] = []
        self.started = asyncio.Event()

    async def stream(self, request: GenerationRequest) -> AsyncIterator[str]:
        self.requests.append(request)
        self.started.set()
        for chunk in self.chunks:
            await asyncio.sleep(0)
            yield chunk
        if self.error is not None:
            raise self.error
        if self.hang:
            await asyncio.Event().wait()


class RecordingNotifier:
    """Notifier that remembers every message."""

    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []
        self.infos: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def info(self, message: str) -> None:
        self.infos.append(message)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test with default settings and no user config files."""
    for var in [k for k in os.environ if k.startswith("SCREENWRIGHT_")]:
        monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    reset_logging()
    set_settings(ScreenwrightSettings())
    yield
    reset_logging()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """A notifier that records messages."""
    return RecordingNotifier()


@pytest.fixture
def make_client() -> Callable[..., FakeGenerationClient]:
    """Factory for fake streaming clients."""
    return FakeGenerationClient


@pytest.fixture
def screenplay() -> str:
    """A short two-scene screenplay."""
    return (
        "INT. COFFEE SHOP - DAY\n"
        "\n"
        "Rain streaks the windows. SARAH sits alone.\n"
        "\n"
        "SARAH\n"
        "(to herself)\n"
        "He's late again.\n"
        "\n"
        "JOHN\n"
        "Sorry. Traffic.\n"
        "\n"
        "EXT. PARKING LOT - NIGHT\n"
        "\n"
        "John walks to his car.\n"
    )
