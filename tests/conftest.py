"""Shared test fixtures for oauth_async.

Provides a scripted in-memory transport, isolated config directories, and
output-state management.  These fixtures are automatically discovered by
pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import pytest

from oauth_async.output import OutputFormat, OutputManager, reset_output, set_output
from oauth_async.transport import OnComplete, RequestOptions, TransportResponse


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test, the cached references go stale once the test finishes.
    """
    yield
    reset_output()


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True, no_color=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Scripted transport
# ---------------------------------------------------------------------------


@dataclass
class SentRequest:
    method: str
    url: str
    options: RequestOptions


class ScriptedTransport:
    """In-memory transport that answers every request with a fixed response.

    ``on_complete`` is scheduled with ``loop.call_soon`` so it never fires
    inside ``send``.  ``deliveries`` > 1 makes the transport misbehave and
    complete the same request again with a 500.
    """

    def __init__(
        self,
        status: Optional[int] = 200,
        body: str = "{}",
        error: Optional[str] = None,
        deliveries: int = 1,
    ) -> None:
        self.status = status
        self.body = body
        self.error = error
        self.deliveries = deliveries
        self.calls: list[SentRequest] = []

    def send(
        self,
        method: str,
        url: str,
        options: RequestOptions,
        on_complete: OnComplete,
    ) -> None:
        self.calls.append(SentRequest(method, url, options))
        loop = asyncio.get_running_loop()
        loop.call_soon(
            on_complete,
            TransportResponse(status=self.status, body=self.body, error=self.error),
        )
        for _ in range(self.deliveries - 1):
            loop.call_soon(on_complete, TransportResponse(status=500, body="{}"))


@pytest.fixture
def make_transport() -> Callable[..., ScriptedTransport]:
    """Factory for :class:`ScriptedTransport` instances."""
    return ScriptedTransport


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Forces XDG path resolution, points ``XDG_CONFIG_HOME`` and
    ``XDG_DATA_HOME`` at subdirectories of *tmp_path*, and clears
    ``OAUTH_ASYNC_PROFILE`` so tests never touch real user config.
    """
    monkeypatch.setattr("oauth_async.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("OAUTH_ASYNC_PROFILE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
