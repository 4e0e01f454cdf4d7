"""
Block command cooldown.

Throttles how often one user may run the block command. Elapsed time is
compared as a float so 1.9 seconds never reads as 1 second.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ...core.clock import Clock, SystemClock
from ...core.config import SettingsProvider, get_settings

if TYPE_CHECKING:
    from .registry import BlockRegistry


@dataclass(frozen=True)
class CooldownDecision:
    """Whether a command may proceed, and how long to wait if not."""

    allowed: bool
    remaining_seconds: float = 0.0


class CommandCooldown:
    """Per-actor throttle backed by the actor's stored command timestamps."""

    def __init__(
        self,
        registry: BlockRegistry,
        *,
        settings_provider: SettingsProvider | None = None,
        clock: Clock | None = None,
    ):
        self._registry = registry
        self._settings = settings_provider or get_settings
        self._clock = clock or SystemClock()

    def check(self, actor_id: str) -> CooldownDecision:
        """
        Decide whether actor_id may run the block command now.

        An allowed call records the current time and saves the registry; a
        denied call does not, so the wait is measured from the last accepted
        call.
        """
        delay = self._settings().block_delay
        if delay <= 0:
            return CooldownDecision(allowed=True)

        remaining = self._registry.claim_command(actor_id, self._clock.now(), delay)
        if remaining is not None:
            return CooldownDecision(allowed=False, remaining_seconds=remaining)
        return CooldownDecision(allowed=True)
