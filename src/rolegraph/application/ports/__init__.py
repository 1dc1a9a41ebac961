"""Application ports - interfaces for external adapters."""

from rolegraph.application.ports.authorization_sync import AuthorizationSync
from rolegraph.application.ports.role_catalog import RoleCatalog
from rolegraph.application.ports.snapshot_store import SnapshotSource, SnapshotStore

__all__ = [
    "AuthorizationSync",
    "RoleCatalog",
    "SnapshotSource",
    "SnapshotStore",
]
