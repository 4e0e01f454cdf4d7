"""
User records and the record store.

One UserRecord exists per user that has ever been referenced. Records are
created lazily and never deleted.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ...models.snapshot import RecordSnapshot
from .expiry import ExpiryCache

if TYPE_CHECKING:
    from .identity import IdentityResolver


@dataclass
class UserRecord:
    """Block-list state for a single user."""

    user_id: str
    display_name: str = ""
    blocked: set[str] = field(default_factory=set)
    expiry: ExpiryCache = field(default_factory=ExpiryCache)
    last_command_at: dict[str, float] = field(default_factory=dict)

    def to_snapshot(self) -> RecordSnapshot:
        return RecordSnapshot(
            name=self.display_name,
            blocked_users=sorted(self.blocked),
            cached=self.expiry.to_dict(),
            last_called=dict(self.last_command_at),
        )

    @classmethod
    def from_snapshot(cls, user_id: str, snapshot: RecordSnapshot) -> UserRecord:
        # A self-block in stored data is dropped rather than loaded
        blocked = {uid for uid in snapshot.blocked_users if uid and uid != user_id}
        return cls(
            user_id=user_id,
            display_name=snapshot.name,
            blocked=blocked,
            expiry=ExpiryCache(snapshot.cached),
            last_command_at=dict(snapshot.last_called),
        )


class RecordStore:
    """
    Owns every UserRecord, keyed by canonical user id.

    Not thread-safe on its own; BlockRegistry serializes access.
    """

    def __init__(
        self,
        records: dict[str, UserRecord] | None = None,
        resolver: IdentityResolver | None = None,
    ):
        self._records: dict[str, UserRecord] = dict(records or {})
        self._resolver = resolver

    def get_or_create(self, user_id: str) -> UserRecord:
        """
        Return the record for user_id, creating an empty one if needed.

        Refreshes display_name from the identity resolver when it knows
        the user.

        Args:
            user_id: Canonical user id (must be non-empty)
        """
        assert user_id, "user_id must be non-empty"

        record = self._records.get(user_id)
        if record is None:
            record = UserRecord(user_id=user_id)
            self._records[user_id] = record

        if self._resolver is not None:
            name = self._resolver.resolve_name(user_id)
            if name is not None:
                record.display_name = name

        return record

    def get(self, user_id: str) -> UserRecord | None:
        """Return an existing record without creating one."""
        return self._records.get(user_id)

    def display_name(self, user_id: str) -> str:
        """Display name for user_id; empty string when unknown."""
        return self.get_or_create(user_id).display_name

    def items(self) -> Iterator[tuple[str, UserRecord]]:
        return iter(self._records.items())

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
