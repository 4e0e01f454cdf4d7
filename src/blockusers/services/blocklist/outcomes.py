"""
Mutation outcomes.

try_add / try_remove report why a mutation did or did not happen;
add / remove collapse the outcome to a bool.
"""

from __future__ import annotations

from enum import Enum


class MutationOutcome(Enum):
    """Result of a block list mutation attempt."""

    ADDED = "added"
    REMOVED = "removed"
    INVALID_ARGUMENT = "invalid_argument"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    ALREADY_BLOCKED = "already_blocked"
    NOT_BLOCKED = "not_blocked"

    @property
    def succeeded(self) -> bool:
        return self in (MutationOutcome.ADDED, MutationOutcome.REMOVED)


class RegistryNotLoadedError(RuntimeError):
    """A BlockRegistry was used before load() was called."""
