"""
Tests for the message catalogue.
"""

from __future__ import annotations

from blockusers.commands import Localizer
from blockusers.commands.messages import ENGLISH_MESSAGES


class TestLocalizer:
    def test_english_default(self):
        assert Localizer().get("BlockedUserAdded", "Bob") == "Bob is now blocked."

    def test_override_language(self):
        localizer = Localizer()
        localizer.register("fr", {"BlockedUserAdded": "{0} est bloqué."})

        assert localizer.get("BlockedUserAdded", "Bob", language="fr") == "Bob est bloqué."
        assert localizer.languages() == ["en", "fr"]

    def test_missing_key_falls_back_to_english(self):
        localizer = Localizer()
        localizer.register("fr", {})

        assert localizer.template("CannotBlockSelf", "fr") == ENGLISH_MESSAGES["CannotBlockSelf"]

    def test_unknown_language_uses_english(self):
        assert Localizer().template("NoBlockedUsers", "xx") == ENGLISH_MESSAGES["NoBlockedUsers"]

    def test_unknown_key_renders_as_key(self):
        assert Localizer().get("NoSuchMessage") == "NoSuchMessage"

    def test_command_names(self):
        localizer = Localizer()
        localizer.register("de", {"CommandBlock": "blockieren"})

        assert localizer.command_names() == {"block", "blockieren"}
