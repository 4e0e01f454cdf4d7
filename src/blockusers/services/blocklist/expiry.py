"""
Recently-unblocked cache.

When a block is removed, the removed identifier is remembered for a grace
window so "had blocked" queries still match. Entries are evicted lazily:
an expired entry is dropped the next time it is looked up, never by a
background sweep.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class CacheEntry:
    """A remembered block that stops counting after expires_at."""

    expires_at: int  # whole epoch seconds

    def is_live(self, now: int) -> bool:
        """
        Check whether the entry still counts at the given instant.

        Args:
            now: Current time in whole epoch seconds

        Returns:
            True while now has not passed expires_at
        """
        return self.expires_at >= now


class ExpiryCache:
    """
    Per-record map of previously blocked id -> CacheEntry.

    Not thread-safe on its own; BlockRegistry serializes access.
    """

    def __init__(self, entries: Mapping[str, int] | None = None):
        self._entries: dict[str, CacheEntry] = {}
        if entries:
            for blocked_id, expires_at in entries.items():
                self._entries[blocked_id] = CacheEntry(int(expires_at))

    def seed(self, blocked_id: str, now: int, ttl: int) -> CacheEntry | None:
        """
        Remember a just-removed block for ttl seconds.

        Overwrites any existing entry for blocked_id. A ttl of 0 or less
        disables caching and leaves the cache untouched.

        Returns:
            The stored entry, or None when caching is disabled
        """
        if ttl <= 0:
            return None
        entry = CacheEntry(now + ttl)
        self._entries[blocked_id] = entry
        return entry

    def is_cached(self, blocked_id: str, now: int) -> bool:
        """
        Check for a live entry, evicting it if it has expired.

        Args:
            blocked_id: Previously blocked user id
            now: Current time in whole epoch seconds
        """
        entry = self._entries.get(blocked_id)
        if entry is None:
            return False

        if entry.is_live(now):
            return True

        del self._entries[blocked_id]
        return False

    def discard(self, blocked_id: str) -> None:
        """Drop an entry if present."""
        self._entries.pop(blocked_id, None)

    def get(self, blocked_id: str) -> CacheEntry | None:
        """Return the raw entry without checking expiry."""
        return self._entries.get(blocked_id)

    def to_dict(self) -> dict[str, int]:
        """Serialize as blocked id -> expiry instant."""
        return {blocked_id: entry.expires_at for blocked_id, entry in self._entries.items()}

    def __contains__(self, blocked_id: object) -> bool:
        return blocked_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
