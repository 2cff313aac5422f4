"""
Shared pytest fixtures for hashbang tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import os as _os
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import hashbang.config as config
import hashbang.live as live
import hashbang.runtime as runtime
import hashbang.sync as sync

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "HASHBANG_SEPARATOR",
    "HASHBANG_COALESCE_DELAY_MS",
    "HASHBANG_HISTORY_MODE",
    "HASHBANG_LOG_LEVEL",
    "HASHBANG_CONFIG_FILE",
    "HASHBANG_ENV_FILE",
]

BASE_URL = "https://example.com/app"


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """Return environment dict with hashbang keys removed."""
    return {k: v for k, v in _os.environ.items() if k not in ENV_KEYS_TO_CLEAR}


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    Context manager that isolates tests from environment variables.

    Usage:
        def test_something(isolated_env):
            with isolated_env:
                settings = config.Settings.construct_without_files()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def settings(isolated_env) -> config.Settings:
    """Default settings, isolated from environment and config files."""
    with isolated_env:
        return config.Settings.construct_without_files()


@_pytest.fixture
def scheduler() -> sync.ManualScheduler:
    """Virtual-clock scheduler; nothing fires until advanced."""
    return sync.ManualScheduler()


@_pytest.fixture
def channel() -> sync.MemoryChannel:
    """In-memory navigation channel with an empty fragment."""
    return sync.MemoryChannel(BASE_URL)


@_pytest.fixture
def store() -> live.Store:
    return live.Store()


@_pytest.fixture
def event_log() -> list[sync.LifecycleEvent]:
    """List collecting lifecycle events (use ``event_log.append`` as sink)."""
    return []


@_pytest.fixture
def make_runtime(
    settings: config.Settings,
    scheduler: sync.ManualScheduler,
) -> _typing.Iterator[_typing.Callable[..., runtime.HashbangRuntime]]:
    """
    Factory for started runtimes on fresh MemoryChannels.

    Usage:
        def test_x(make_runtime):
            hb = make_runtime("#!page=1")
            hb.root["page"] = "2"

    Every runtime created is stopped at teardown.
    """
    created: list[runtime.HashbangRuntime] = []

    def _make(
        fragment: str = "",
        *,
        sink: sync.LifecycleSink | None = None,
        **overrides: _typing.Any,
    ) -> runtime.HashbangRuntime:
        effective = settings.model_copy(update=overrides) if overrides else settings
        hb = runtime.install(
            sync.MemoryChannel(BASE_URL + fragment),
            settings=effective,
            scheduler=scheduler,
            sink=sink,
        )
        created.append(hb)
        return hb

    yield _make

    for hb in created:
        hb.stop()
