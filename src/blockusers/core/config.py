"""
BlockUsers Centralized Configuration

Provides validated, type-safe access to all environment variables using Pydantic Settings.
Values may additionally be supplied through a JSON config file whose values
override the environment.

Usage:
    from blockusers.core.config import get_settings

    settings = get_settings()
    if settings.max_blocked_users == 0:
        ...

Hot reload:
    Components that need live values take a settings provider (defaulting to
    get_settings) and call it on every operation. reset_settings() drops the
    cached instance so the next call re-reads the environment and config file.

Environment Variables:
    BLOCKUSERS_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    BLOCKUSERS_DEBUG: Legacy debug flag (enables DEBUG level if set)
    BLOCKUSERS_LOG_JSON: Output logs as JSON
    BLOCKUSERS_MAX_BLOCKED_USERS: Maximum blocked users per user (0 = unbounded)
    BLOCKUSERS_CACHE_TIME: Seconds a removed block still counts (0 = disabled)
    BLOCKUSERS_BLOCK_DELAY: Cooldown between block commands in seconds (0 = disabled)
    BLOCKUSERS_USE_PERMISSIONS: Require the blockusers.use permission
    BLOCKUSERS_INSTANCE_ROOT: Base directory for data files
    BLOCKUSERS_DATA_FILE: Snapshot file path override
    BLOCKUSERS_CONFIG_FILE: JSON config file path
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Callable, Literal, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..models.config_file import ConfigFileModel

logger = logging.getLogger(__name__)


def _find_project_root() -> Path | None:
    """
    Find the project root by searching upward for pyproject.toml.

    Returns:
        Directory containing pyproject.toml, or None
    """
    current = Path(__file__).resolve().parent

    for _ in range(10):  # Limit search depth
        if (current / "pyproject.toml").exists():
            return current
        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def _find_env_file() -> Path | None:
    root = _find_project_root()
    if root is None:
        return None
    env_file = root / ".env"
    return env_file if env_file.exists() else None


_ENV_FILE = _find_env_file()
_INSTANCE_ROOT = _find_project_root() or Path.cwd()


class BlockUsersSettings(BaseSettings):
    """
    BlockUsers configuration settings with validation.

    Environment variables are automatically loaded with the BLOCKUSERS_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="BLOCKUSERS_",
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # =========================================================================
    # Logging Configuration
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Log level for BlockUsers components",
    )

    debug: bool = Field(
        default=False,
        description="Legacy debug flag (enables DEBUG level if set)",
    )

    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format for machine parsing",
    )

    # =========================================================================
    # Block List Behaviour
    # =========================================================================

    max_blocked_users: int = Field(
        default=30,
        ge=0,
        description="Maximum number of blocked users per user (0 = unbounded)",
    )

    cache_time: int = Field(
        default=0,
        ge=0,
        description="Seconds a removed block still counts as recent (0 = disabled)",
    )

    block_delay: int = Field(
        default=0,
        ge=0,
        description="Cooldown between block commands in seconds (0 = disabled)",
    )

    use_permissions: bool = Field(
        default=False,
        description="Require the blockusers.use permission for the block command",
    )

    # =========================================================================
    # Data Paths
    # =========================================================================

    instance_root: Path = Field(
        default=_INSTANCE_ROOT,
        description="Instance root directory (project root containing pyproject.toml)",
    )

    data_file: Optional[Path] = Field(
        default=None,
        description="Snapshot file path (default: {instance_root}/data/BlockUsers.json)",
    )

    config_file: Optional[Path] = Field(
        default=None,
        description="JSON config file path; its values override the environment",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def effective_log_level(self) -> str:
        """
        Get effective log level, respecting legacy BLOCKUSERS_DEBUG.

        Priority:
        1. Explicit BLOCKUSERS_LOG_LEVEL
        2. BLOCKUSERS_DEBUG=1 -> DEBUG
        3. Default: WARNING
        """
        if self.debug and self.log_level == "WARNING":
            return "DEBUG"
        return self.log_level

    @property
    def log_level_int(self) -> int:
        """Get effective log level as logging constant."""
        return getattr(logging, self.effective_log_level)

    @property
    def snapshot_path(self) -> Path:
        """Path to the blocked users snapshot file."""
        if self.data_file is not None:
            return self.data_file
        return self.instance_root / "data" / "BlockUsers.json"

    @property
    def is_capacity_bounded(self) -> bool:
        return self.max_blocked_users > 0


SettingsProvider = Callable[[], BlockUsersSettings]
"""Zero-argument callable returning the current settings."""


# =============================================================================
# JSON Config File
# =============================================================================

_CONFIG_FILE_FIELDS = {"cache_time", "max_blocked_users", "block_delay", "use_permissions"}


def _write_config_file(path: Path, config: ConfigFileModel) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(config.to_file_dict(), f, indent=2)
    logger.warning("Configuration changes saved to %s", path.name)


def load_config_file(path: Path, base: BlockUsersSettings) -> BlockUsersSettings:
    """
    Overlay values from a JSON config file onto base settings.

    A missing file is created with the current values. An unreadable or
    invalid file is left untouched and the base settings are returned.
    A file whose key set differs from the current schema is rewritten with
    the full key set.

    Args:
        path: Config file location
        base: Settings loaded from the environment

    Returns:
        Settings with file values applied
    """
    if not path.exists():
        current = ConfigFileModel.model_validate(base.model_dump(include=_CONFIG_FILE_FIELDS))
        try:
            _write_config_file(path, current)
        except OSError as e:
            logger.error("Could not create config file %s: %s", path, e)
        return base

    try:
        with open(path) as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError("config root must be an object")
        # Unknown keys are dropped here and removed from disk by the rewrite below
        known = {k: v for k, v in raw.items() if k in ConfigFileModel.file_keys()}
        config = ConfigFileModel.model_validate(known)
    except (OSError, ValueError, ValidationError) as e:
        logger.warning("Configuration file %s is invalid; using defaults (%s)", path.name, e)
        return base

    if list(raw.keys()) != ConfigFileModel.file_keys():
        logger.warning("Configuration appears to be outdated; updating and saving")
        try:
            _write_config_file(path, config)
        except OSError as e:
            logger.error("Could not update config file %s: %s", path, e)

    return base.model_copy(update=config.to_settings_dict())


# =============================================================================
# Singleton Accessor
# =============================================================================


@lru_cache(maxsize=1)
def get_settings() -> BlockUsersSettings:
    """
    Get the singleton settings instance.

    Uses lru_cache to ensure settings are only loaded once until
    reset_settings() is called.

    Returns:
        BlockUsersSettings instance with validated configuration
    """
    settings = BlockUsersSettings()
    if settings.config_file is not None:
        return load_config_file(settings.config_file, settings)
    return settings


def reset_settings() -> None:
    """
    Reset the settings cache.

    After calling this, the next get_settings() call will reload settings
    from environment variables and the config file.
    """
    get_settings.cache_clear()


# =============================================================================
# Convenience Functions
# =============================================================================


def is_debug_enabled() -> bool:
    """Check if debug logging is enabled."""
    return get_settings().effective_log_level == "DEBUG"


def is_json_logging() -> bool:
    """Check if JSON logging is enabled."""
    return get_settings().log_json
