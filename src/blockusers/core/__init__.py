"""
BlockUsers Core Module

Shared infrastructure: configuration, logging, time and formatting helpers.
"""

from .clock import Clock, SystemClock, epoch_seconds
from .config import (
    BlockUsersSettings,
    SettingsProvider,
    get_settings,
    load_config_file,
    reset_settings,
)
from .formatters import format_datetime, get_utc_now, get_utc_timestamp, truncate
from .logging import get_logger

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    "epoch_seconds",
    # Config
    "BlockUsersSettings",
    "SettingsProvider",
    "get_settings",
    "load_config_file",
    "reset_settings",
    # Formatters
    "format_datetime",
    "get_utc_now",
    "get_utc_timestamp",
    "truncate",
    # Logging
    "get_logger",
]
