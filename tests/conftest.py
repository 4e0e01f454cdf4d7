"""
BlockUsers Test Suite - Shared Fixtures and Configuration

Provides a controllable clock, mutable settings, and a loaded registry
backed by an in-memory snapshot.
"""

from __future__ import annotations

import pytest

from blockusers.core.config import BlockUsersSettings, reset_settings
from blockusers.core.logging import reset_logging
from blockusers.services.blocklist import (
    BlockRegistry,
    MemorySnapshotStore,
    UserDirectory,
)

# Fixed starting instant: 2025-10-09T08:53:20Z
EPOCH_START = 1_760_000_000.0


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = EPOCH_START):
        self.current = start

    def now(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


class SettingsHolder:
    """Settings provider whose values can be changed mid-test (hot reload)."""

    def __init__(self, **overrides):
        self.current = BlockUsersSettings(_env_file=None, **overrides)

    def update(self, **overrides) -> None:
        self.current = self.current.model_copy(update=overrides)

    def __call__(self) -> BlockUsersSettings:
        return self.current


# =============================================================================
# Singleton Reset
# =============================================================================


@pytest.fixture(autouse=True)
def reset_all_singletons():
    """
    Reset module-level state between tests.

    - Settings cache (MUST be first - other modules read from settings)
    - Logging handlers and propagation (so caplog can capture)
    """

    def do_reset():
        reset_settings()
        reset_logging()

    do_reset()
    yield
    do_reset()


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def settings() -> SettingsHolder:
    """Defaults match a fresh install: 30 slots, no grace window, no cooldown."""
    return SettingsHolder(max_blocked_users=30, cache_time=0, block_delay=0)


@pytest.fixture
def snapshot() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
def directory() -> UserDirectory:
    return UserDirectory(
        {
            "1001": "Alice",
            "1002": "Bob",
            "1003": "Carol",
            "1004": "Dave",
            "1005": "Alicia",
        }
    )


@pytest.fixture
def registry(snapshot, settings, clock, directory) -> BlockRegistry:
    """Loaded registry over an empty in-memory snapshot."""
    reg = BlockRegistry(
        snapshot,
        settings_provider=settings,
        clock=clock,
        resolver=directory,
    )
    reg.load()
    return reg


@pytest.fixture
def bare_registry(snapshot, settings, clock) -> BlockRegistry:
    """Loaded registry without an identity resolver."""
    reg = BlockRegistry(snapshot, settings_provider=settings, clock=clock)
    reg.load()
    return reg
