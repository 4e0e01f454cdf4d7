"""
Block list service.

Per-user block lists with a reverse index, a recently-unblocked cache,
snapshot persistence and change notifications.

Usage:
    from blockusers.services.blocklist import BlockRegistry, JsonSnapshotStore

    registry = BlockRegistry(JsonSnapshotStore("data/BlockUsers.json"))
    registry.load()
    registry.add("alice", "bob")
    registry.is_blocked_by("bob", "alice")  # True
"""

from .cooldown import CommandCooldown, CooldownDecision
from .events import BlockEvent, BlockEventBus, BlockEventType, BlockListener
from .expiry import CacheEntry, ExpiryCache
from .identity import IdentityResolver, UserDirectory
from .outcomes import MutationOutcome, RegistryNotLoadedError
from .records import RecordStore, UserRecord
from .registry import BlockRegistry
from .reverse_index import ReverseIndex, rebuild_index
from .snapshot import JsonSnapshotStore, MemorySnapshotStore, SnapshotBackend

__all__ = [
    "BlockEvent",
    "BlockEventBus",
    "BlockEventType",
    "BlockListener",
    "BlockRegistry",
    "CacheEntry",
    "CommandCooldown",
    "CooldownDecision",
    "ExpiryCache",
    "IdentityResolver",
    "JsonSnapshotStore",
    "MemorySnapshotStore",
    "MutationOutcome",
    "RecordStore",
    "RegistryNotLoadedError",
    "ReverseIndex",
    "SnapshotBackend",
    "UserDirectory",
    "UserRecord",
    "rebuild_index",
]
