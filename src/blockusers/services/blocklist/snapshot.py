"""
Durable snapshot storage for block list records.

The whole record set is written after every committed mutation and read
once at startup. A missing or corrupt snapshot yields an empty store.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from ...core.config import get_settings
from ...core.logging import get_logger
from ...models.snapshot import snapshot_adapter
from .records import UserRecord

logger = get_logger(__name__)


class SnapshotBackend(Protocol):
    """Loads and saves the complete record set."""

    def load(self) -> dict[str, UserRecord]:
        """Return all stored records, or an empty dict if none can be read."""
        ...

    def save(self, records: Iterable[UserRecord]) -> bool:
        """Persist all records. Returns False (after logging) on failure."""
        ...


class JsonSnapshotStore:
    """SnapshotBackend writing a single JSON file."""

    def __init__(self, path: Path | str | None = None):
        """
        Initialize snapshot store.

        Args:
            path: Snapshot file. Defaults to settings.snapshot_path
        """
        if path is None:
            path = get_settings().snapshot_path
        self.path = Path(path)

    def load(self) -> dict[str, UserRecord]:
        if not self.path.exists():
            logger.info("No snapshot at %s; starting empty", self.path)
            return {}

        try:
            with open(self.path) as f:
                raw = json.load(f)
            document = snapshot_adapter.validate_python(raw)
        except (json.JSONDecodeError, ValidationError, OSError, UnicodeDecodeError) as e:
            logger.warning("Snapshot %s is unreadable; starting empty: %s", self.path, e)
            return {}

        records = {
            user_id: UserRecord.from_snapshot(user_id, snapshot)
            for user_id, snapshot in document.items()
            if user_id
        }
        logger.info("Loaded %d user records from %s", len(records), self.path)
        return records

    def save(self, records: Iterable[UserRecord]) -> bool:
        document = {
            record.user_id: record.to_snapshot().model_dump(by_alias=True)
            for record in records
        }

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(document, f, indent=2)
        except OSError as e:
            logger.error("Failed to save snapshot to %s: %s", self.path, e)
            return False

        logger.debug("Saved %d user records to %s", len(document), self.path)
        return True


class MemorySnapshotStore:
    """SnapshotBackend that keeps serialized snapshots in memory."""

    def __init__(self, initial: dict | None = None):
        self.document: dict = dict(initial or {})
        self.save_count = 0

    def load(self) -> dict[str, UserRecord]:
        try:
            document = snapshot_adapter.validate_python(self.document)
        except ValidationError as e:
            logger.warning("In-memory snapshot is invalid; starting empty: %s", e)
            return {}
        return {
            user_id: UserRecord.from_snapshot(user_id, snapshot)
            for user_id, snapshot in document.items()
            if user_id
        }

    def save(self, records: Iterable[UserRecord]) -> bool:
        self.document = {
            record.user_id: record.to_snapshot().model_dump(by_alias=True)
            for record in records
        }
        self.save_count += 1
        return True
