"""
BlockUsers Commands

The /block command surface and the CLI commands built on it.
"""

from . import blocks
from .handler import BlockCommand, CommandReply, PermissionChecker, StaticPermissions
from .messages import Localizer

__all__ = [
    "blocks",
    "BlockCommand",
    "CommandReply",
    "Localizer",
    "PermissionChecker",
    "StaticPermissions",
]
