"""
Pydantic model for the on-disk JSON configuration file.

The file uses human-readable keys so server operators can edit it by hand:

    {
      "Blocked Users list cache time (0 to disable)": 0,
      "Maximum number of blocked users (0 to disable)": 30,
      "Cooldown for block command in seconds (0 to disable)": 0,
      "Use permission system": false
    }
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ConfigFileModel(BaseModel):
    """Configuration values stored in the JSON config file."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    cache_time: int = Field(
        default=0,
        ge=0,
        alias="Blocked Users list cache time (0 to disable)",
    )
    max_blocked_users: int = Field(
        default=30,
        ge=0,
        alias="Maximum number of blocked users (0 to disable)",
    )
    block_delay: int = Field(
        default=0,
        ge=0,
        alias="Cooldown for block command in seconds (0 to disable)",
    )
    use_permissions: bool = Field(
        default=False,
        alias="Use permission system",
    )

    @classmethod
    def file_keys(cls) -> list[str]:
        """Keys written to disk, in declaration order."""
        return [field.alias or name for name, field in cls.model_fields.items()]

    def to_file_dict(self) -> dict[str, int | bool]:
        """Serialize using the on-disk key names."""
        return self.model_dump(by_alias=True)

    def to_settings_dict(self) -> dict[str, int | bool]:
        """Serialize using the settings field names."""
        return self.model_dump(by_alias=False)
