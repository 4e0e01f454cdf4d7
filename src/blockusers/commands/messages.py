"""
Localized messages for the block command.

Messages are str.format templates keyed by name. Languages fall back to
English, and an unknown key renders as the key itself.
"""

from __future__ import annotations

import threading

DEFAULT_LANGUAGE = "en"

ENGLISH_MESSAGES: dict[str, str] = {
    "AlreadyOnBlockedList": "{0} is already blocked.",
    "CannotBlockSelf": "You cannot block yourself.",
    "CommandBlock": "block",
    "BlockedUserAdded": "{0} is now blocked.",
    "BlockedUserRemoved": "{0} was removed from your blocked list.",
    "BlockedList": "Blocked Players {0}:\n{1}.",
    "BlockedListFull": "Your blocked users list is full.",
    "NoBlockedUsers": "You do not have any blocked users.",
    "NotAllowed": "You are not allowed to use the '{0}' command.",
    "NoPlayersFound": "No players found with name or ID '{0}'.",
    "NotOnBlockedList": "{0} not found on your blocked list.",
    "Delay": "Wait {0} more seconds before using the '/{1}' command.",
    "PlayerNotFound": "Player '{0}' was not found",
    "PlayersFound": "Multiple players were found, please specify: {0}.",
    "PlayersOnly": "Command '{0}' can only be used by players.",
    "UsageBlockedUsers": "Usage /{0} <add|remove|list> <player name or id> or /{0} list.",
}


class Localizer:
    """Message catalogue with per-language overrides."""

    def __init__(self) -> None:
        self._catalogues: dict[str, dict[str, str]] = {DEFAULT_LANGUAGE: dict(ENGLISH_MESSAGES)}
        self._lock = threading.Lock()

    def register(self, language: str, messages: dict[str, str]) -> None:
        """Add or override messages for a language."""
        with self._lock:
            self._catalogues.setdefault(language, {}).update(messages)

    def languages(self) -> list[str]:
        with self._lock:
            return sorted(self._catalogues)

    def template(self, key: str, language: str | None = None) -> str:
        """Raw template for key, falling back to English then to key."""
        with self._lock:
            if language and key in self._catalogues.get(language, {}):
                return self._catalogues[language][key]
            return self._catalogues[DEFAULT_LANGUAGE].get(key, key)

    def get(self, key: str, *args: object, language: str | None = None) -> str:
        """Render key with positional args."""
        return self.template(key, language).format(*args)

    def command_names(self, key: str = "CommandBlock") -> set[str]:
        """Every localized alias for a command, for registration."""
        with self._lock:
            return {msgs[key] for msgs in self._catalogues.values() if msgs.get(key)}
