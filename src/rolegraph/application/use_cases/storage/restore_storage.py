"""Restore from backup use case."""

import logging

from rolegraph.application.ports import RoleCatalog, SnapshotStore
from rolegraph.domain.entities import StorageSnapshot

logger = logging.getLogger(__name__)


class RestoreStorageUseCase:
    """Replace the in-memory catalog with the newest usable backup."""

    def __init__(self, catalog: RoleCatalog, snapshot_store: SnapshotStore) -> None:
        self._catalog = catalog
        self._store = snapshot_store

    async def execute(self) -> StorageSnapshot:
        snapshot = await self._store.restore_from_backup()
        self._catalog.load(snapshot)
        logger.warning(
            "Role catalog replaced from backup (%d roles); authorization tuples were not resynchronized",
            snapshot.role_count,
        )
        return snapshot
