"""
Block command surface.

Parses chat-style invocations such as:

    /block add Alice
    /block + 76561198000000002
    /block remove ali
    /block list

and turns them into registry calls and localized replies. This is the
layer that screens out self-blocks, checks the use permission and applies
the command cooldown before anything reaches BlockRegistry.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from ..core.config import SettingsProvider, get_settings
from ..core.formatters import format_seconds, truncate
from ..core.logging import get_logger
from ..services.blocklist import (
    BlockRegistry,
    CommandCooldown,
    IdentityResolver,
    MutationOutcome,
)
from .messages import Localizer

logger = get_logger(__name__)

PERMISSION_USE = "blockusers.use"

# Ambiguous-match reply limits
MAX_LISTED_MATCHES = 10
MATCH_LIST_WIDTH = 60

ADD_ALIASES = frozenset({"add", "+"})
REMOVE_ALIASES = frozenset({"remove", "-"})
LIST_ALIASES = frozenset({"list"})


class PermissionChecker(Protocol):
    def has_permission(self, user_id: str, permission: str) -> bool: ...


@dataclass
class StaticPermissions:
    """PermissionChecker backed by an explicit grant table."""

    grants: dict[str, set[str]] = field(default_factory=dict)

    def grant(self, user_id: str, permission: str) -> None:
        self.grants.setdefault(user_id, set()).add(permission)

    def revoke(self, user_id: str, permission: str) -> None:
        self.grants.get(user_id, set()).discard(permission)

    def has_permission(self, user_id: str, permission: str) -> bool:
        return permission in self.grants.get(user_id, set())


@dataclass(frozen=True)
class CommandReply:
    """Message sent back to the invoking user."""

    key: str
    text: str
    outcome: MutationOutcome | None = None


class BlockCommand:
    """Handles /block invocations for one registry."""

    def __init__(
        self,
        registry: BlockRegistry,
        directory: IdentityResolver,
        *,
        settings_provider: SettingsProvider | None = None,
        cooldown: CommandCooldown | None = None,
        permissions: PermissionChecker | None = None,
        localizer: Localizer | None = None,
    ):
        """
        Args:
            registry: Loaded block registry
            directory: Resolves typed names and ids to canonical ids
            settings_provider: Returns current settings. Defaults to get_settings
            cooldown: Command throttle. Defaults to one sharing settings_provider
            permissions: Permission source; with use_permissions on and none
                given, every actor is refused
            localizer: Message catalogue. Defaults to English
        """
        self._registry = registry
        self._directory = directory
        self._settings = settings_provider or get_settings
        self._cooldown = cooldown or CommandCooldown(registry, settings_provider=self._settings)
        self._permissions = permissions
        self._localizer = localizer or Localizer()

    def _reply(
        self,
        key: str,
        *args: object,
        language: str | None = None,
        outcome: MutationOutcome | None = None,
    ) -> CommandReply:
        return CommandReply(key, self._localizer.get(key, *args, language=language), outcome)

    def _is_permitted(self, actor_id: str) -> bool:
        if not self._settings().use_permissions:
            return True
        if self._permissions is None:
            return False
        return self._permissions.has_permission(actor_id, PERMISSION_USE)

    def command_names(self) -> set[str]:
        """Every localized name this command answers to."""
        return self._localizer.command_names()

    def handles(self, command: str) -> bool:
        return command.lower() in {name.lower() for name in self.command_names()}

    def _name_of(self, user_id: str) -> str:
        return self._directory.resolve_name(user_id) or user_id

    def execute(
        self,
        actor_id: str | None,
        args: Sequence[str],
        command: str = "block",
        language: str | None = None,
    ) -> CommandReply:
        """
        Run one /block invocation.

        Args:
            actor_id: Invoking user's canonical id; None for the server console
            args: Words after the command name
            command: Command name as typed, used in usage/denial messages
            language: Reply language (falls back to English)

        Returns:
            Reply for the invoking user
        """
        if not actor_id:
            return self._reply("PlayersOnly", command, language=language)

        if not self._is_permitted(actor_id):
            return self._reply("NotAllowed", command, language=language)

        if not args or (len(args) == 1 and args[0].lower() not in LIST_ALIASES):
            return self._reply("UsageBlockedUsers", command, language=language)

        decision = self._cooldown.check(actor_id)
        if not decision.allowed:
            return self._reply(
                "Delay", format_seconds(decision.remaining_seconds), command, language=language
            )

        action = args[0].lower()
        query = " ".join(args[1:]).strip()

        if action in LIST_ALIASES:
            return self._list(actor_id, language)
        if action in ADD_ALIASES and query:
            return self._add(actor_id, query, language)
        if action in REMOVE_ALIASES and query:
            return self._remove(actor_id, query, language)

        return self._reply("UsageBlockedUsers", command, language=language)

    def _list(self, actor_id: str, language: str | None) -> CommandReply:
        entries = self._registry.list_blocked_with_names(actor_id)
        if not entries:
            return self._reply("NoBlockedUsers", language=language)

        labels = [name or uid for uid, name in entries]

        max_blocked = self._registry.max_blocked_users()
        count = f"{len(labels)}/{max_blocked}" if max_blocked else str(len(labels))
        return self._reply("BlockedList", count, ", ".join(labels), language=language)

    def _add(self, actor_id: str, query: str, language: str | None) -> CommandReply:
        matches = self._directory.find_by_name_or_id(query)
        if len(matches) > 1:
            names = ", ".join(self._name_of(uid) for uid in matches[:MAX_LISTED_MATCHES])
            return self._reply("PlayersFound", truncate(names, MATCH_LIST_WIDTH), language=language)
        if not matches:
            return self._reply("NoPlayersFound", query, language=language)

        target_id = matches[0]
        if target_id == actor_id:
            return self._reply("CannotBlockSelf", language=language)

        target_name = self._name_of(target_id)
        outcome = self._registry.try_add(actor_id, target_id)
        if outcome is MutationOutcome.ADDED:
            return self._reply("BlockedUserAdded", target_name, language=language, outcome=outcome)
        if outcome is MutationOutcome.CAPACITY_EXCEEDED:
            return self._reply("BlockedListFull", language=language, outcome=outcome)
        if outcome is MutationOutcome.ALREADY_BLOCKED:
            return self._reply(
                "AlreadyOnBlockedList", target_name, language=language, outcome=outcome
            )

        logger.warning("Unexpected add outcome %s for %s -> %s", outcome, actor_id, target_id)
        return self._reply("PlayerNotFound", query, language=language, outcome=outcome)

    def _remove(self, actor_id: str, query: str, language: str | None) -> CommandReply:
        target_id = self._registry.find_blocked(actor_id, query)
        if target_id is None:
            return self._reply("NotOnBlockedList", query, language=language)

        outcome = self._registry.try_remove(actor_id, target_id)
        key = "BlockedUserRemoved" if outcome.succeeded else "NotOnBlockedList"
        return self._reply(key, query, language=language, outcome=outcome)
