"""
BlockUsers Models

Pydantic schemas for data that crosses the disk boundary.
"""

from blockusers.models.config_file import ConfigFileModel
from blockusers.models.snapshot import RecordSnapshot, SnapshotDocument, snapshot_adapter

__all__ = [
    "ConfigFileModel",
    "RecordSnapshot",
    "SnapshotDocument",
    "snapshot_adapter",
]
