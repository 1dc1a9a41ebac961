"""Persisted snapshot of the whole role catalog."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from rolegraph.domain.entities.role import Role

FORMAT_VERSION = "1.0.0"


@dataclass
class SnapshotMetadata:
    """Snapshot metadata - format version, last write, retained backups."""

    version: str = FORMAT_VERSION
    last_modified: datetime = field(default_factory=lambda: datetime.now(UTC))
    backup_count: int = 0


@dataclass
class StorageSnapshot:
    """All roles keyed by namespace plus other top-level collections of the file.

    ``revision`` is the catalog revision the snapshot was taken at; it is not
    written to disk.
    """

    roles_by_namespace: dict[str, list[Role]] = field(default_factory=dict)
    collections: dict[str, Any] = field(default_factory=dict)
    metadata: SnapshotMetadata = field(default_factory=SnapshotMetadata)
    revision: int | None = None

    @property
    def role_count(self) -> int:
        return sum(len(roles) for roles in self.roles_by_namespace.values())
