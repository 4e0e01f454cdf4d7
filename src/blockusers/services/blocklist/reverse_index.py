"""
Reverse block index.

Maps a user id to the set of users who currently block them. This is
derived data: it must always equal {A : B in blocked(A)} for every B.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .records import UserRecord


class ReverseIndex:
    """blocked id -> ids of users blocking it."""

    def __init__(self) -> None:
        self._blockers: dict[str, set[str]] = {}

    def add_edge(self, owner_id: str, blocked_id: str) -> None:
        """Record that owner_id blocks blocked_id."""
        blockers = self._blockers.get(blocked_id)
        if blockers is None:
            blockers = self._blockers[blocked_id] = set()
        blockers.add(owner_id)

    def remove_edge(self, owner_id: str, blocked_id: str) -> None:
        """Forget that owner_id blocks blocked_id. Missing edges are ignored."""
        blockers = self._blockers.get(blocked_id)
        if blockers is not None:
            blockers.discard(owner_id)

    def who_blocks(self, user_id: str) -> frozenset[str]:
        """Ids currently blocking user_id (empty if none)."""
        return frozenset(self._blockers.get(user_id, ()))

    def to_dict(self) -> dict[str, frozenset[str]]:
        """Non-empty entries only, for comparison in tests and diagnostics."""
        return {uid: frozenset(owners) for uid, owners in self._blockers.items() if owners}

    def __len__(self) -> int:
        return sum(1 for owners in self._blockers.values() if owners)


def rebuild_index(records: Iterable[UserRecord]) -> ReverseIndex:
    """
    Build a reverse index from scratch.

    Uses the same add_edge path as incremental updates.

    Args:
        records: Every known user record

    Returns:
        Fresh ReverseIndex
    """
    index = ReverseIndex()
    for record in records:
        for blocked_id in record.blocked:
            index.add_edge(record.user_id, blocked_id)
    return index
