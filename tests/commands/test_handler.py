"""
Tests for the /block command handler.
"""

from __future__ import annotations

import pytest

from blockusers.commands import BlockCommand, Localizer, StaticPermissions
from blockusers.commands.handler import PERMISSION_USE
from blockusers.services.blocklist import CommandCooldown, MutationOutcome


@pytest.fixture
def permissions() -> StaticPermissions:
    return StaticPermissions()


@pytest.fixture
def command(registry, directory, settings, clock, permissions) -> BlockCommand:
    return BlockCommand(
        registry,
        directory,
        settings_provider=settings,
        cooldown=CommandCooldown(registry, settings_provider=settings, clock=clock),
        permissions=permissions,
    )


class TestGuards:
    def test_console_rejected(self, command):
        reply = command.execute(None, ["list"])

        assert reply.key == "PlayersOnly"
        assert reply.text == "Command 'block' can only be used by players."

    def test_permission_required_when_enabled(self, command, settings, permissions):
        settings.update(use_permissions=True)
        assert command.execute("1001", ["list"]).key == "NotAllowed"

        permissions.grant("1001", PERMISSION_USE)
        assert command.execute("1001", ["list"]).key == "NoBlockedUsers"

        permissions.revoke("1001", PERMISSION_USE)
        assert command.execute("1001", ["list"]).key == "NotAllowed"

    def test_no_permission_source_refuses_everyone(self, registry, directory, settings):
        settings.update(use_permissions=True)
        command = BlockCommand(registry, directory, settings_provider=settings)

        assert command.execute("1001", ["list"]).key == "NotAllowed"

    def test_permissions_ignored_when_disabled(self, command):
        assert command.execute("1001", ["list"]).key == "NoBlockedUsers"

    @pytest.mark.parametrize("args", [[], ["add"], ["-"], ["bogus"]])
    def test_usage(self, command, args):
        reply = command.execute("1001", args)

        assert reply.key == "UsageBlockedUsers"
        assert reply.text.startswith("Usage /block ")

    def test_unknown_action_with_argument(self, command):
        assert command.execute("1001", ["ban", "Bob"]).key == "UsageBlockedUsers"

    def test_usage_uses_typed_command_name(self, command):
        assert "/blk" in command.execute("1001", [], command="blk").text


class TestCooldown:
    def test_delay_reply(self, command, settings, clock):
        settings.update(block_delay=10)
        command.execute("1001", ["list"])
        clock.advance(2.5)

        reply = command.execute("1001", ["add", "Bob"])

        assert reply.key == "Delay"
        assert reply.text == "Wait 7.5 more seconds before using the '/block' command."

    def test_usage_errors_do_not_start_cooldown(self, command, settings):
        settings.update(block_delay=10)
        command.execute("1001", ["add"])

        assert command.execute("1001", ["list"]).key == "NoBlockedUsers"


class TestAdd:
    def test_add_by_name(self, command, registry):
        reply = command.execute("1001", ["add", "Bob"])

        assert reply.key == "BlockedUserAdded"
        assert reply.text == "Bob is now blocked."
        assert reply.outcome is MutationOutcome.ADDED
        assert registry.has_blocked("1001", "1002")

    def test_add_by_id_with_alias(self, command, registry):
        assert command.execute("1001", ["+", "1003"]).key == "BlockedUserAdded"
        assert registry.has_blocked("1001", "1003")

    def test_multi_word_query(self, command, registry, directory):
        directory.register("1010", "Big Bob")

        assert command.execute("1001", ["add", "big", "bob"]).key == "BlockedUserAdded"
        assert registry.has_blocked("1001", "1010")

    def test_ambiguous_name(self, command, registry):
        reply = command.execute("1001", ["add", "ali"])

        assert reply.key == "PlayersFound"
        assert "Alice" in reply.text and "Alicia" in reply.text
        assert registry.list_blocked("1001") == frozenset()

    def test_ambiguous_list_truncated(self, command, directory):
        for n in range(20):
            directory.register(f"20{n:02d}", f"Zed Number {n}")

        reply = command.execute("1001", ["add", "zed"])

        assert reply.key == "PlayersFound"
        assert "..." in reply.text

    def test_no_match(self, command):
        reply = command.execute("1001", ["add", "Mallory"])

        assert reply.key == "NoPlayersFound"
        assert "'Mallory'" in reply.text

    def test_self_block_refused(self, command, registry):
        reply = command.execute("1001", ["add", "Alice"])

        assert reply.key == "CannotBlockSelf"
        assert registry.list_blocked("1001") == frozenset()

    def test_self_block_never_reaches_registry(self, command, registry, monkeypatch):
        calls = []
        original = registry.try_add

        def spy(owner_id, target_id):
            calls.append((owner_id, target_id))
            return original(owner_id, target_id)

        monkeypatch.setattr(registry, "try_add", spy)

        command.execute("1001", ["add", "1001"])
        command.execute("1001", ["add", "Alice"])
        command.execute("1001", ["add", "Bob"])

        assert calls == [("1001", "1002")]
        assert all(owner != target for owner, target in calls)

    def test_already_blocked(self, command):
        command.execute("1001", ["add", "Bob"])
        reply = command.execute("1001", ["add", "Bob"])

        assert reply.key == "AlreadyOnBlockedList"
        assert reply.outcome is MutationOutcome.ALREADY_BLOCKED

    def test_list_full(self, command, settings):
        settings.update(max_blocked_users=1)
        command.execute("1001", ["add", "Bob"])

        reply = command.execute("1001", ["add", "Carol"])

        assert reply.key == "BlockedListFull"
        assert reply.outcome is MutationOutcome.CAPACITY_EXCEEDED


class TestRemove:
    def test_remove_by_partial_name(self, command, registry):
        command.execute("1001", ["add", "Carol"])

        reply = command.execute("1001", ["remove", "car"])

        assert reply.key == "BlockedUserRemoved"
        assert reply.text == "car was removed from your blocked list."
        assert reply.outcome is MutationOutcome.REMOVED
        assert registry.has_blocked("1001", "1003") is False

    def test_remove_alias(self, command, registry):
        command.execute("1001", ["add", "Bob"])
        assert command.execute("1001", ["-", "1002"]).key == "BlockedUserRemoved"

    def test_remove_only_searches_own_list(self, command):
        command.execute("1002", ["add", "Carol"])

        reply = command.execute("1001", ["remove", "Carol"])

        assert reply.key == "NotOnBlockedList"
        assert reply.text == "Carol not found on your blocked list."


class TestList:
    def test_empty(self, command):
        reply = command.execute("1001", ["list"])
        assert reply.text == "You do not have any blocked users."

    def test_list_with_capacity(self, command):
        command.execute("1001", ["add", "Carol"])
        command.execute("1001", ["add", "Bob"])

        reply = command.execute("1001", ["LIST"])

        assert reply.key == "BlockedList"
        assert reply.text == "Blocked Players 2/30:\nBob, Carol."

    def test_list_unbounded_and_unknown_name(self, command, registry, settings):
        settings.update(max_blocked_users=0)
        registry.add("1001", "9999")

        reply = command.execute("1001", ["list"])

        assert reply.text == "Blocked Players 1:\n9999."

    def test_ids_and_names_read_together(self, command, registry, monkeypatch):
        command.execute("1001", ["add", "Carol"])
        command.execute("1001", ["add", "Bob"])

        def separate_read(user_id):
            raise AssertionError("ids and names must come from one registry call")

        monkeypatch.setattr(registry, "list_blocked", separate_read)
        monkeypatch.setattr(registry, "list_blocked_names", separate_read)

        assert command.execute("1001", ["list"]).text == "Blocked Players 2/30:\nBob, Carol."


class TestLocalization:
    def test_reply_in_registered_language(self, registry, directory, settings):
        localizer = Localizer()
        localizer.register("de", {"NoBlockedUsers": "Du hast niemanden blockiert."})
        command = BlockCommand(
            registry, directory, settings_provider=settings, localizer=localizer
        )

        assert command.execute("1001", ["list"], language="de").text == (
            "Du hast niemanden blockiert."
        )
        assert command.execute("1001", [], language="de").key == "UsageBlockedUsers"


class TestCommandNames:
    def test_handles_localized_names(self, registry, directory, settings):
        localizer = Localizer()
        localizer.register("de", {"CommandBlock": "blockieren"})
        command = BlockCommand(registry, directory, settings_provider=settings, localizer=localizer)

        assert command.command_names() == {"block", "blockieren"}
        assert command.handles("Blockieren") is True
        assert command.handles("ban") is False
