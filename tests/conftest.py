# tests/conftest.py
import os
import logging
from typing import AsyncIterator, List

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env: no live key, no mock mode, no timer on boot
os.environ["GOOGLE_API_KEY"] = ""
os.environ["USE_MOCK_RESPONSES"] = "false"
os.environ["APP_ENV"] = "development"
os.environ["DIAGNOSTICS_AUTOSTART"] = "false"

# IMPORTANT: import the app after envs are set
from meeting_digest.core import config
from meeting_digest.main import create_app
from meeting_digest.providers import mock as mock_module
from meeting_digest.providers.base import Provider

GEMINI_BASE = "https://generativelanguage.googleapis.com"


class FakeProvider(Provider):
    """Scripted provider: `open_failures` are raised (in order) before a stream opens."""

    name = "fake"

    def __init__(self, chunks=None, *, open_failures=None, mid_stream_error=None, text="fake summary"):
        self.chunks: List[str] = list(chunks or [])
        self.open_failures = list(open_failures or [])
        self.mid_stream_error = mid_stream_error
        self.text = text
        self.open_calls = 0
        self.generate_calls = 0

    async def generate(self, prompt: str) -> str:
        self.generate_calls += 1
        if self.open_failures:
            raise self.open_failures.pop(0)
        return self.text

    async def open_stream(self, prompt: str) -> AsyncIterator[str]:
        self.open_calls += 1
        if self.open_failures:
            raise self.open_failures.pop(0)
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[str]:
        for c in self.chunks:
            yield c
        if self.mid_stream_error is not None:
            raise self.mid_stream_error


@pytest_asyncio.fixture
async def app():
    # fresh app per test, so each gets its own store and scheduler
    application = create_app()
    yield application
    application.state.diagnostics_scheduler.stop()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_delays(monkeypatch):
    # replaces the artificial mock latency; records each requested delay in ms
    delays: List[float] = []

    async def fake_delay(ms: float) -> None:
        delays.append(ms)

    monkeypatch.setattr(mock_module, "delay", fake_delay)
    return delays


@pytest.fixture
def mock_mode(monkeypatch, mock_delays):
    monkeypatch.setattr(config, "USE_MOCK_RESPONSES", True)
    monkeypatch.setattr(config, "APP_ENV", "development")
    return mock_delays


@pytest.fixture
def no_sleep():
    waits: List[float] = []

    async def fake_sleep(seconds: float) -> None:
        waits.append(seconds)

    fake_sleep.waits = waits
    return fake_sleep


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog
