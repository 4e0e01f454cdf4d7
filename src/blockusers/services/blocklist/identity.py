"""
User identity resolution.

The block list is keyed by canonical user id. Display names come from an
IdentityResolver, which the hosting application provides. UserDirectory is
an in-memory implementation used by the CLI and in tests.
"""

from __future__ import annotations

import threading
from typing import Protocol


class IdentityResolver(Protocol):
    """Maps between canonical user ids and display names."""

    def resolve_name(self, user_id: str) -> str | None:
        """Current display name for user_id, or None if unknown."""
        ...

    def find_by_name_or_id(self, query: str) -> list[str]:
        """Ids matching an exact id or a (partial) display name."""
        ...


class UserDirectory:
    """
    In-memory IdentityResolver.

    Matching order for find_by_name_or_id:
    1. Exact id
    2. Exact display name (case-insensitive)
    3. Display name substring (case-insensitive)
    """

    def __init__(self, users: dict[str, str] | None = None):
        self._names: dict[str, str] = {}
        self._lock = threading.Lock()
        if users:
            for user_id, name in users.items():
                self.register(user_id, name)

    def register(self, user_id: str, name: str) -> None:
        """Add or rename a user."""
        if not user_id:
            raise ValueError("user_id must be non-empty")
        with self._lock:
            self._names[user_id] = name

    def forget(self, user_id: str) -> None:
        with self._lock:
            self._names.pop(user_id, None)

    def resolve_name(self, user_id: str) -> str | None:
        with self._lock:
            return self._names.get(user_id)

    def find_by_name_or_id(self, query: str) -> list[str]:
        if not query:
            return []

        with self._lock:
            if query in self._names:
                return [query]

            needle = query.casefold()
            exact = [uid for uid, name in self._names.items() if name.casefold() == needle]
            if exact:
                return exact

            return [uid for uid, name in self._names.items() if needle in name.casefold()]

    def __len__(self) -> int:
        return len(self._names)
