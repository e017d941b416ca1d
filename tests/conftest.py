from __future__ import annotations

import asyncio
import contextlib

import pytest

from notes_app import config


def pytest_sessionstart(session: pytest.Session) -> None:
    # Keep a developer's local .env out of unit test runs.
    config.load_dotenv = lambda **_: None  # type: ignore[assignment]


@pytest.fixture(autouse=True)
def _fresh_settings() -> None:
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


@pytest.fixture(autouse=True)
def _close_default_event_loop() -> None:
    yield
    policy = asyncio.get_event_loop_policy()
    local = getattr(policy, "_local", None)
    loop = getattr(local, "_loop", None) if local is not None else None
    if loop is not None and not loop.is_running() and not loop.is_closed():
        with contextlib.suppress(Exception):
            loop.close()
    if loop is not None:
        with contextlib.suppress(Exception):
            policy.set_event_loop(None)

