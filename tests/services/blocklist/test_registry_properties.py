"""
Randomized consistency checks for the block registry.

Each run replays a seeded sequence of adds and removes and checks after
every step that the reverse index mirrors the block lists and capacity
holds.
"""

from __future__ import annotations

import random

import pytest

USERS = [f"u{n}" for n in range(8)]


def _assert_consistent(registry, max_blocked: int) -> None:
    assert registry.verify_index()
    for owner in USERS:
        blocked = registry.list_blocked(owner)
        assert len(blocked) <= max_blocked
        for target in blocked:
            assert owner in registry.list_blockers(target)
    for target in USERS:
        for owner in registry.list_blockers(target):
            assert registry.has_blocked(owner, target)


@pytest.mark.parametrize("seed", range(10))
def test_random_sequences_stay_consistent(registry, settings, clock, seed):
    settings.update(max_blocked_users=3, cache_time=4)
    rng = random.Random(seed)

    for _ in range(200):
        owner, target = rng.choice(USERS), rng.choice(USERS)
        before = registry.has_blocked(owner, target)
        if rng.random() < 0.6:
            added = registry.add(owner, target)
            assert not (added and before)
        else:
            removed = registry.remove(owner, target)
            assert removed == before
            if removed:
                assert registry.had_blocked(owner, target)
        clock.advance(rng.choice([0, 1, 2]))
        _assert_consistent(registry, 3)


@pytest.mark.parametrize("seed", range(5))
def test_live_blocks_and_grace_entries_disjoint(registry, settings, clock, seed):
    settings.update(max_blocked_users=0, cache_time=100)
    rng = random.Random(seed)

    for _ in range(150):
        owner, target = rng.choice(USERS), rng.choice(USERS)
        if rng.random() < 0.5:
            registry.add(owner, target)
        else:
            registry.remove(owner, target)

    for owner, record in registry.export().items():
        assert not set(record["BlockedUsers"]) & set(record["Cached"])
