"""
BlockUsers CLI Commands

Command-line access to the block registry: run /block invocations and
query relationships against a snapshot file.
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Callable

from ..core import get_settings, get_utc_timestamp
from ..services.blocklist import BlockRegistry, JsonSnapshotStore, UserDirectory
from .handler import BlockCommand
from .messages import Localizer

PREDICATES: dict[str, Callable[[BlockRegistry, str, str], bool]] = {
    "has-blocked": BlockRegistry.has_blocked,
    "had-blocked": BlockRegistry.had_blocked,
    "is-blocked-by": BlockRegistry.is_blocked_by,
    "was-blocked-by": BlockRegistry.was_blocked_by,
    "mutually-blocked": BlockRegistry.are_mutually_blocked,
    "were-mutually-blocked": BlockRegistry.were_mutually_blocked,
}


# =============================================================================
# Helpers
# =============================================================================


def load_user_directory(path: Path | None) -> UserDirectory:
    """
    Build a directory from a JSON file of {user_id: display_name}.

    Raises:
        ValueError: If the file is not a JSON object of strings
    """
    if path is None:
        return UserDirectory()

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise ValueError(f"User directory {path} must map ids to names")
    return UserDirectory(data)


def load_localizer(path: Path | None) -> Localizer:
    """
    Build a localizer, adding catalogues from a JSON file of
    {language: {message_key: template}}.

    Raises:
        ValueError: If the file does not have that shape
    """
    localizer = Localizer()
    if path is None:
        return localizer

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict) or not all(
        isinstance(messages, dict)
        and all(isinstance(k, str) and isinstance(v, str) for k, v in messages.items())
        for messages in data.values()
    ):
        raise ValueError(f"Message file {path} must map languages to message tables")
    for language, messages in data.items():
        localizer.register(language, messages)
    return localizer


def open_registry(args: argparse.Namespace) -> tuple[BlockRegistry, UserDirectory]:
    """Load the registry and directory named by the global CLI options."""
    directory = load_user_directory(getattr(args, "users", None))
    data_path = getattr(args, "data", None) or get_settings().snapshot_path

    registry = BlockRegistry(JsonSnapshotStore(data_path), resolver=directory)
    registry.load()

    # Users only known from the snapshot are still resolvable by stored name
    for user_id, name in registry.known_users().items():
        if name and directory.resolve_name(user_id) is None:
            directory.register(user_id, name)

    return registry, directory


# =============================================================================
# Commands
# =============================================================================


def cmd_block(args: argparse.Namespace) -> dict[str, Any]:
    """
    Run a /block invocation as the given actor.

    Args:
        args: Parsed arguments with actor and words

    Returns:
        Result dict with the reply message
    """
    query_ts = get_utc_timestamp()
    localizer = load_localizer(args.messages)
    registry, directory = open_registry(args)

    command = BlockCommand(registry, directory, localizer=localizer)
    if not command.handles(args.command_name):
        return {
            "error": "unknown_command",
            "message": f"'{args.command_name}' is not a block command name",
            "query_timestamp": query_ts,
            "known_names": sorted(command.command_names()),
        }

    reply = command.execute(
        args.actor, args.words, command=args.command_name, language=args.language
    )
    # Persists refreshed names and cooldown timestamps as well
    registry.save()

    return {
        "query_timestamp": query_ts,
        "actor": args.actor,
        "reply_key": reply.key,
        "reply": reply.text,
        "outcome": reply.outcome.value if reply.outcome else None,
    }


def cmd_check(args: argparse.Namespace) -> dict[str, Any]:
    """Evaluate one relationship predicate."""
    query_ts = get_utc_timestamp()
    registry, _ = open_registry(args)

    result = PREDICATES[args.predicate](registry, args.user, args.other)
    return {
        "query_timestamp": query_ts,
        "predicate": args.predicate,
        "user": args.user,
        "other": args.other,
        "result": result,
    }


def cmd_list(args: argparse.Namespace) -> dict[str, Any]:
    """List who a user blocks."""
    query_ts = get_utc_timestamp()
    registry, _ = open_registry(args)

    blocked = sorted(registry.list_blocked(args.user))
    result: dict[str, Any] = {
        "query_timestamp": query_ts,
        "user": args.user,
        "blocked": blocked,
        "count": len(blocked),
    }
    if args.names:
        result["names"] = registry.list_blocked_names(args.user)
    return result


def cmd_blockers(args: argparse.Namespace) -> dict[str, Any]:
    """List who blocks a user."""
    query_ts = get_utc_timestamp()
    registry, _ = open_registry(args)

    blockers = sorted(registry.list_blockers(args.user))
    return {
        "query_timestamp": query_ts,
        "user": args.user,
        "blockers": blockers,
        "count": len(blockers),
    }


def cmd_capacity(args: argparse.Namespace) -> dict[str, Any]:
    """Show remaining block list capacity."""
    query_ts = get_utc_timestamp()
    registry, _ = open_registry(args)

    remaining = registry.remaining_capacity(args.user)
    return {
        "query_timestamp": query_ts,
        "user": args.user,
        "max_blocked_users": registry.max_blocked_users(),
        "remaining": remaining,
        "unbounded": remaining is None,
    }


# =============================================================================
# Parser Registration
# =============================================================================


def register_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register block list command parsers."""

    # block <actor> <words...>
    block_parser = subparsers.add_parser(
        "block",
        help="Run a /block command as a user",
        description="Run '/block add|remove|list ...' on behalf of ACTOR.",
    )
    block_parser.add_argument("actor", help="Acting user id")
    block_parser.add_argument("words", nargs="*", help="Command words, e.g. add Alice")
    block_parser.add_argument(
        "--command",
        dest="command_name",
        default="block",
        help="Command name as typed; any localized name is accepted",
    )
    block_parser.add_argument("--language", default=None, help="Reply language")
    block_parser.add_argument(
        "--messages", type=Path, default=None, help="JSON file of extra message catalogues"
    )
    block_parser.set_defaults(func=cmd_block)

    # check <predicate> <user> <other>
    check_parser = subparsers.add_parser(
        "check",
        help="Evaluate a relationship between two users",
    )
    check_parser.add_argument("predicate", choices=sorted(PREDICATES))
    check_parser.add_argument("user", help="First user id")
    check_parser.add_argument("other", help="Second user id")
    check_parser.set_defaults(func=cmd_check)

    # list <user> [--names]
    list_parser = subparsers.add_parser("list", help="List users blocked by a user")
    list_parser.add_argument("user", help="User id")
    list_parser.add_argument("--names", action="store_true", help="Include display names")
    list_parser.set_defaults(func=cmd_list)

    # blockers <user>
    blockers_parser = subparsers.add_parser("blockers", help="List users blocking a user")
    blockers_parser.add_argument("user", help="User id")
    blockers_parser.set_defaults(func=cmd_blockers)

    # capacity <user>
    capacity_parser = subparsers.add_parser("capacity", help="Show remaining block slots")
    capacity_parser.add_argument("user", help="User id")
    capacity_parser.set_defaults(func=cmd_capacity)
