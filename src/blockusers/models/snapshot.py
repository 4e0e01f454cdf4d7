"""
Pydantic models for the durable snapshot file.

The snapshot is a JSON object keyed by canonical user identifier:

    {
      "76561198000000001": {
        "Name": "Alice",
        "BlockedUsers": ["76561198000000002"],
        "Cached": {"76561198000000003": 1760000000},
        "LastCalled": {"76561198000000001": 1759999000.25}
      }
    }

Cached values are absolute expiry instants in whole epoch seconds.
LastCalled values are epoch seconds of the last accepted block command.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class RecordSnapshot(BaseModel):
    """Serialized form of a single user record."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", alias="Name")
    blocked_users: list[str] = Field(default_factory=list, alias="BlockedUsers")
    cached: dict[str, int] = Field(default_factory=dict, alias="Cached")
    last_called: dict[str, float] = Field(default_factory=dict, alias="LastCalled")


SnapshotDocument = dict[str, RecordSnapshot]
"""Whole snapshot: user id -> record."""

snapshot_adapter: TypeAdapter[SnapshotDocument] = TypeAdapter(SnapshotDocument)
