"""Domain entities."""

from rolegraph.domain.entities.role import Role, RolePermission
from rolegraph.domain.entities.snapshot import SnapshotMetadata, StorageSnapshot

__all__ = [
    "Role",
    "RolePermission",
    "SnapshotMetadata",
    "StorageSnapshot",
]
