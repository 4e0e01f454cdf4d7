"""
Block list notifications.

Listeners subscribe to BLOCK_ADDED / BLOCK_REMOVED and are called after a
mutation has been committed. Listener failures are logged; they never
undo or fail the mutation that triggered them.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ...core.logging import get_logger

logger = get_logger(__name__)


class BlockEventType(Enum):
    """Kinds of block list notification."""

    BLOCK_ADDED = "block_added"
    BLOCK_REMOVED = "block_removed"


@dataclass(frozen=True)
class BlockEvent:
    """A committed change to one user's block list."""

    event_type: BlockEventType
    owner_id: str
    target_id: str
    occurred_at: float


BlockListener = Callable[[BlockEvent], None]


class BlockEventBus:
    """Typed publish/subscribe for block list events."""

    def __init__(self) -> None:
        self._listeners: dict[BlockEventType, list[BlockListener]] = {
            event_type: [] for event_type in BlockEventType
        }
        self._lock = threading.Lock()

    def subscribe(self, event_type: BlockEventType, listener: BlockListener) -> None:
        """Register listener for event_type. Duplicate registrations are ignored."""
        with self._lock:
            listeners = self._listeners[event_type]
            if listener not in listeners:
                listeners.append(listener)

    def unsubscribe(self, event_type: BlockEventType, listener: BlockListener) -> bool:
        """
        Remove a listener.

        Returns:
            True if the listener was registered
        """
        with self._lock:
            listeners = self._listeners[event_type]
            if listener in listeners:
                listeners.remove(listener)
                return True
            return False

    def publish(self, event: BlockEvent) -> int:
        """
        Deliver event to every listener of its type, in subscription order.

        Returns:
            Number of listeners that completed without raising
        """
        with self._lock:
            listeners = list(self._listeners[event.event_type])

        delivered = 0
        for listener in listeners:
            try:
                listener(event)
                delivered += 1
            except Exception:
                logger.error(
                    "Listener %r failed for %s (%s -> %s)",
                    listener,
                    event.event_type.value,
                    event.owner_id,
                    event.target_id,
                    exc_info=True,
                )
        return delivered

    def listener_count(self, event_type: BlockEventType) -> int:
        with self._lock:
            return len(self._listeners[event_type])
