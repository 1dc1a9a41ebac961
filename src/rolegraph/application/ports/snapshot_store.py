"""Snapshot store port - durable copy of the catalog."""

from typing import Protocol

from rolegraph.application.dto.storage_dto import SaveResult
from rolegraph.domain.entities import StorageSnapshot


class SnapshotSource(Protocol):
    """Anything that can produce a snapshot and tell whether it changed."""

    @property
    def revision(self) -> int: ...

    def snapshot(self) -> StorageSnapshot: ...


class SnapshotStore(Protocol):
    """Port for snapshot persistence. An inert store behaves like memory-only mode."""

    @property
    def enabled(self) -> bool: ...

    async def save(self, snapshot: StorageSnapshot) -> SaveResult: ...

    async def restore(self) -> StorageSnapshot: ...

    async def restore_from_backup(self) -> StorageSnapshot: ...

    def start_autosave(self, source: SnapshotSource) -> None: ...

    async def close(self) -> None: ...
