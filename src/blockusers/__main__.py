#!/usr/bin/env python3
"""
BlockUsers CLI Entry Point

Run with: python -m blockusers <command> [args]
"""

import argparse
import json
import sys
from pathlib import Path

from .core import get_utc_timestamp


def output_json(data: dict, indent: int = 2) -> None:
    """Print JSON output to stdout."""
    print(json.dumps(data, indent=indent))


def output_error(message: str, exit_code: int = 1, **kwargs) -> None:
    """Print error JSON and exit."""
    error_data = {
        "error": kwargs.pop("error_type", "error"),
        "message": message,
        "query_timestamp": get_utc_timestamp(),
    }
    error_data.update(kwargs)
    output_json(error_data)
    sys.exit(exit_code)


def cmd_help(args: argparse.Namespace) -> dict:
    """Show help message."""
    print(
        """
BlockUsers - per-user block lists

Block Commands:
  block <actor> add <name|id>     Block a user (alias: +)
  block <actor> remove <name|id>  Unblock a user (alias: -)
  block <actor> list              Show the actor's block list
  block ... --command NAME        Invoke under a localized command name
  block ... --language LANG       Reply language
  block ... --messages PATH       JSON file of {language: {key: template}}

Queries:
  check <predicate> <a> <b>       has-blocked, had-blocked, is-blocked-by,
                                  was-blocked-by, mutually-blocked,
                                  were-mutually-blocked
  list <user> [--names]           Users blocked by <user>
  blockers <user>                 Users blocking <user>
  capacity <user>                 Remaining block list slots

Global Options:
  --data PATH                     Snapshot file (default: data/BlockUsers.json)
  --users PATH                    JSON file mapping user ids to names
"""
    )
    return {}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all commands."""
    from .commands import blocks

    parser = argparse.ArgumentParser(
        prog="blockusers",
        description="Manage and query per-user block lists",
    )
    parser.add_argument("--data", type=Path, default=None, help="Snapshot file path")
    parser.add_argument("--users", type=Path, default=None, help="User directory JSON file")

    subparsers = parser.add_subparsers(dest="command")

    help_parser = subparsers.add_parser("help", help="Show help")
    help_parser.set_defaults(func=cmd_help)

    blocks.register_parsers(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        cmd_help(args)
        return 0

    try:
        result = args.func(args)

        if isinstance(result, dict) and result:
            output_json(result)
            if "error" in result:
                return 1

        return 0

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception as e:
        output_error(str(e), error_type="command_error", command=args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
