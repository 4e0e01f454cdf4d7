"""
Block Registry.

Owns the record store, reverse index and per-record expiry caches, and is
the only code path that mutates them.

Mutation protocol:
    add(owner, target)     capacity check -> insert -> reverse edge -> persist -> BLOCK_ADDED
    remove(owner, target)  delete -> drop reverse edge -> seed expiry -> persist -> BLOCK_REMOVED

Queries:
    has_blocked(a, b)            b in blocked(a)
    had_blocked(a, b)            has_blocked(a, b) or b recently unblocked by a
    is_blocked_by(a, b)          has_blocked(b, a)
    was_blocked_by(a, b)         had_blocked(b, a)
    are_mutually_blocked(a, b)   has_blocked both ways
    were_mutually_blocked(a, b)  had_blocked both ways

Every two-argument query and mutation returns False for an empty id.
Configuration is read through the settings provider on every call so a
reload takes effect immediately.

Concurrency:
    A single re-entrant lock serializes mutations and queries. Queries take
    it too because expiry lookups evict stale entries. Listeners run after
    the lock is released.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from ...core.clock import Clock, SystemClock, epoch_seconds
from ...core.config import SettingsProvider, get_settings
from ...core.logging import get_logger
from .events import BlockEvent, BlockEventBus, BlockEventType
from .outcomes import MutationOutcome, RegistryNotLoadedError
from .records import RecordStore
from .reverse_index import ReverseIndex, rebuild_index
from .snapshot import JsonSnapshotStore, SnapshotBackend

if TYPE_CHECKING:
    from .identity import IdentityResolver

logger = get_logger(__name__)


class BlockRegistry:
    """Per-user block lists with a reverse index and a recently-unblocked cache."""

    def __init__(
        self,
        snapshot: SnapshotBackend | None = None,
        *,
        settings_provider: SettingsProvider | None = None,
        clock: Clock | None = None,
        resolver: IdentityResolver | None = None,
        events: BlockEventBus | None = None,
    ):
        """
        Initialize the registry. Call load() before use.

        Args:
            snapshot: Durable storage. Defaults to JsonSnapshotStore at settings.snapshot_path
            settings_provider: Returns current settings. Defaults to get_settings
            clock: Time source. Defaults to SystemClock
            resolver: Identity resolver used to refresh display names
            events: Event bus for BLOCK_ADDED / BLOCK_REMOVED
        """
        self._settings = settings_provider or get_settings
        self._snapshot = snapshot if snapshot is not None else JsonSnapshotStore(
            self._settings().snapshot_path
        )
        self._clock = clock or SystemClock()
        self._resolver = resolver
        self.events = events or BlockEventBus()
        self._lock = threading.RLock()
        self._records: RecordStore | None = None
        self._index: ReverseIndex | None = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def load(self) -> int:
        """
        Load records from the snapshot and rebuild the reverse index.

        Returns:
            Number of records loaded
        """
        records = self._snapshot.load()
        with self._lock:
            self._records = RecordStore(records, resolver=self._resolver)
            self._index = rebuild_index(records.values())
            count = len(self._records)

        logger.info("Block registry loaded with %d users", count)
        return count

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    def save(self) -> bool:
        """Persist the full record set now."""
        with self._lock:
            records, _ = self._state()
            return self._persist(records)

    def _state(self) -> tuple[RecordStore, ReverseIndex]:
        if self._records is None or self._index is None:
            raise RegistryNotLoadedError("BlockRegistry.load() must be called first")
        return self._records, self._index

    def _persist(self, records: RecordStore) -> bool:
        return self._snapshot.save(record for _, record in records.items())

    # =========================================================================
    # Mutations
    # =========================================================================

    def try_add(self, owner_id: str, target_id: str) -> MutationOutcome:
        """
        Add target_id to owner_id's block list.

        Self-blocks are not special-cased here; the command layer screens them.

        Returns:
            ADDED, INVALID_ARGUMENT, CAPACITY_EXCEEDED or ALREADY_BLOCKED
        """
        with self._lock:
            records, index = self._state()
            if not owner_id or not target_id:
                return MutationOutcome.INVALID_ARGUMENT

            record = records.get_or_create(owner_id)
            max_blocked = self._settings().max_blocked_users
            if max_blocked and len(record.blocked) >= max_blocked:
                return MutationOutcome.CAPACITY_EXCEEDED
            if target_id in record.blocked:
                return MutationOutcome.ALREADY_BLOCKED

            record.blocked.add(target_id)
            record.expiry.discard(target_id)
            index.add_edge(owner_id, target_id)
            self._persist(records)
            occurred_at = self._clock.now()

        logger.debug("%s blocked %s", owner_id, target_id)
        self.events.publish(
            BlockEvent(BlockEventType.BLOCK_ADDED, owner_id, target_id, occurred_at)
        )
        return MutationOutcome.ADDED

    def try_remove(self, owner_id: str, target_id: str) -> MutationOutcome:
        """
        Remove target_id from owner_id's block list.

        On success the pair is remembered in the expiry cache for
        settings.cache_time seconds.

        Returns:
            REMOVED, INVALID_ARGUMENT or NOT_BLOCKED
        """
        with self._lock:
            records, index = self._state()
            if not owner_id or not target_id:
                return MutationOutcome.INVALID_ARGUMENT

            record = records.get_or_create(owner_id)
            if target_id not in record.blocked:
                return MutationOutcome.NOT_BLOCKED

            record.blocked.remove(target_id)
            index.remove_edge(owner_id, target_id)
            record.expiry.seed(target_id, epoch_seconds(self._clock), self._settings().cache_time)
            self._persist(records)
            occurred_at = self._clock.now()

        logger.debug("%s unblocked %s", owner_id, target_id)
        self.events.publish(
            BlockEvent(BlockEventType.BLOCK_REMOVED, owner_id, target_id, occurred_at)
        )
        return MutationOutcome.REMOVED

    def add(self, owner_id: str, target_id: str) -> bool:
        """Add a block; True only if it was newly committed."""
        return self.try_add(owner_id, target_id).succeeded

    def remove(self, owner_id: str, target_id: str) -> bool:
        """Remove a block; True only if one existed."""
        return self.try_remove(owner_id, target_id).succeeded

    # =========================================================================
    # Relationship Queries
    # =========================================================================

    def _has(self, records: RecordStore, owner_id: str, target_id: str) -> bool:
        return target_id in records.get_or_create(owner_id).blocked

    def _had(self, records: RecordStore, owner_id: str, target_id: str, now: int) -> bool:
        record = records.get_or_create(owner_id)
        return target_id in record.blocked or record.expiry.is_cached(target_id, now)

    def has_blocked(self, owner_id: str, target_id: str) -> bool:
        with self._lock:
            records, _ = self._state()
            if not owner_id or not target_id:
                return False
            return self._has(records, owner_id, target_id)

    def had_blocked(self, owner_id: str, target_id: str) -> bool:
        with self._lock:
            records, _ = self._state()
            if not owner_id or not target_id:
                return False
            return self._had(records, owner_id, target_id, epoch_seconds(self._clock))

    def is_blocked_by(self, user_id: str, other_id: str) -> bool:
        """True if other_id currently blocks user_id."""
        return self.has_blocked(other_id, user_id)

    def was_blocked_by(self, user_id: str, other_id: str) -> bool:
        """True if other_id blocks, or recently blocked, user_id."""
        return self.had_blocked(other_id, user_id)

    def are_mutually_blocked(self, user_id: str, other_id: str) -> bool:
        with self._lock:
            records, _ = self._state()
            if not user_id or not other_id:
                return False
            return self._has(records, user_id, other_id) and self._has(records, other_id, user_id)

    def were_mutually_blocked(self, user_id: str, other_id: str) -> bool:
        with self._lock:
            records, _ = self._state()
            if not user_id or not other_id:
                return False
            now = epoch_seconds(self._clock)
            return self._had(records, user_id, other_id, now) and self._had(
                records, other_id, user_id, now
            )

    # =========================================================================
    # Lists
    # =========================================================================

    def list_blocked(self, user_id: str) -> frozenset[str]:
        """Ids user_id currently blocks."""
        with self._lock:
            records, _ = self._state()
            if not user_id:
                return frozenset()
            return frozenset(records.get_or_create(user_id).blocked)

    def list_blocked_names(self, user_id: str) -> list[str]:
        """
        Display names of the users user_id blocks, ordered by id.

        Unknown names are returned as empty strings.
        """
        return [name for _, name in self.list_blocked_with_names(user_id)]

    def list_blocked_with_names(self, user_id: str) -> list[tuple[str, str]]:
        """(id, display name) pairs for user_id's block list, read in one lock hold."""
        with self._lock:
            records, _ = self._state()
            if not user_id:
                return []
            blocked = sorted(records.get_or_create(user_id).blocked)
            return [(blocked_id, records.display_name(blocked_id)) for blocked_id in blocked]

    def list_blockers(self, user_id: str) -> frozenset[str]:
        """Ids currently blocking user_id."""
        with self._lock:
            _, index = self._state()
            if not user_id:
                return frozenset()
            return index.who_blocks(user_id)

    def max_blocked_users(self) -> int:
        """Configured capacity; 0 means unbounded."""
        return self._settings().max_blocked_users

    def remaining_capacity(self, user_id: str) -> int | None:
        """
        Free slots in user_id's block list.

        Returns:
            Remaining slots (never negative), or None when capacity is unbounded
        """
        max_blocked = self._settings().max_blocked_users
        if max_blocked == 0:
            return None
        return max(0, max_blocked - len(self.list_blocked(user_id)))

    def find_blocked(self, owner_id: str, query: str) -> str | None:
        """
        Find an entry in owner_id's block list by id or partial display name.

        Exact id matches win; otherwise the first id (in sorted order) whose
        display name contains query, case-insensitively.
        """
        with self._lock:
            records, _ = self._state()
            if not owner_id or not query:
                return None
            blocked = records.get_or_create(owner_id).blocked
            if query in blocked:
                return query

            needle = query.casefold()
            for blocked_id in sorted(blocked):
                if needle in records.display_name(blocked_id).casefold():
                    return blocked_id
            return None

    def known_users(self) -> dict[str, str]:
        """Every known user id with its last observed display name."""
        with self._lock:
            records, _ = self._state()
            return {user_id: record.display_name for user_id, record in records.items()}

    # =========================================================================
    # Command Timestamps
    # =========================================================================

    def last_command_at(self, actor_id: str) -> float | None:
        """Epoch seconds of actor_id's last accepted block command."""
        with self._lock:
            records, _ = self._state()
            return records.get_or_create(actor_id).last_command_at.get(actor_id)

    def claim_command(self, actor_id: str, now: float, delay: float) -> float | None:
        """
        Accept a block command from actor_id unless one was accepted within delay.

        The comparison and the timestamp update happen under one lock hold,
        so concurrent commands from the same actor cannot both pass. An
        accepted claim is persisted immediately.

        Args:
            actor_id: Acting user id
            now: Current time in epoch seconds
            delay: Minimum seconds between accepted commands

        Returns:
            None if accepted, otherwise the seconds left to wait
        """
        with self._lock:
            records, _ = self._state()
            record = records.get_or_create(actor_id)
            last = record.last_command_at.get(actor_id)
            if last is not None and now - last < delay:
                return delay - (now - last)

            record.last_command_at[actor_id] = now
            self._persist(records)
            return None

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def export(self) -> dict[str, dict[str, Any]]:
        """Serialized copy of every record, in snapshot format."""
        with self._lock:
            records, _ = self._state()
            return {
                user_id: record.to_snapshot().model_dump(by_alias=True)
                for user_id, record in records.items()
            }

    def verify_index(self) -> bool:
        """
        Compare the incrementally maintained reverse index with a fresh rebuild.

        Returns:
            True if they agree
        """
        with self._lock:
            records, index = self._state()
            rebuilt = rebuild_index(record for _, record in records.items())
            consistent = rebuilt.to_dict() == index.to_dict()

        if not consistent:
            logger.error("Reverse index has drifted from block lists")
        return consistent

