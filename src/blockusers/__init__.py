"""
BlockUsers - per-user block lists with symmetric relationship queries.

Usage as library:
    from blockusers import BlockRegistry, JsonSnapshotStore

    registry = BlockRegistry(JsonSnapshotStore("data/BlockUsers.json"))
    registry.load()
    registry.add("alice", "bob")
    registry.had_blocked("alice", "bob")

Usage as CLI:
    python -m blockusers block alice add Bob
    python -m blockusers check is-blocked-by bob alice
    python -m blockusers blockers bob

Package structure:
    blockusers/
    ├── core/       # Config, logging, clock, formatters
    ├── models/     # Pydantic schemas for files on disk
    ├── services/
    │   └── blocklist/  # Registry, reverse index, expiry cache, snapshots
    └── commands/   # /block command surface and CLI commands
"""

__version__ = "1.0.0"

from .services.blocklist import (
    BlockEvent,
    BlockEventType,
    BlockRegistry,
    JsonSnapshotStore,
    MutationOutcome,
    UserDirectory,
)

__all__ = [
    "__version__",
    "BlockEvent",
    "BlockEventType",
    "BlockRegistry",
    "JsonSnapshotStore",
    "MutationOutcome",
    "UserDirectory",
]
