"""Explicit persist use case."""

from rolegraph.application.dto.storage_dto import SaveResult
from rolegraph.application.ports import RoleCatalog, SnapshotStore


class PersistStorageUseCase:
    """Save the current catalog now. PersistenceError propagates to the caller."""

    def __init__(self, catalog: RoleCatalog, snapshot_store: SnapshotStore) -> None:
        self._catalog = catalog
        self._store = snapshot_store

    async def execute(self) -> SaveResult:
        return await self._store.save(self._catalog.snapshot())
