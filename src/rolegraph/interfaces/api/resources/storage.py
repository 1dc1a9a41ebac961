"""Storage management endpoints."""

import falcon.asgi

from rolegraph.application.use_cases.storage.persist_storage import PersistStorageUseCase
from rolegraph.application.use_cases.storage.restore_storage import RestoreStorageUseCase
from rolegraph.infrastructure.persistence.file.persistence_manager import (
    FilePersistenceManager,
    list_backups,
)
from rolegraph.infrastructure.persistence.memory.role_catalog import InMemoryRoleCatalog


class StorageResource:
    """Stats, explicit persist and restore of the role catalog file."""

    def __init__(
        self,
        catalog: InMemoryRoleCatalog,
        persistence: FilePersistenceManager,
        persist_storage: PersistStorageUseCase,
        restore_storage: RestoreStorageUseCase,
    ) -> None:
        self._catalog = catalog
        self._persistence = persistence
        self._persist = persist_storage
        self._restore = restore_storage

    async def on_get_stats(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/storage/stats - role counts and persistence settings."""
        by_namespace = self._catalog.stats()
        media = {
            "persistenceEnabled": self._persistence.enabled,
            "totalRoles": sum(by_namespace.values()),
            "rolesByNamespace": by_namespace,
            "revision": self._catalog.revision,
        }
        config = self._persistence.config
        if config is not None:
            media.update(
                {
                    "dataFilePath": str(config.data_file_path),
                    "backupDir": str(config.backup_dir),
                    "backupCount": len(list_backups(config.backup_dir)),
                    "maxBackups": config.max_backups,
                    "autosaveInterval": config.autosave_interval,
                    "compression": config.compression,
                }
            )
        resp.media = media
        resp.status = falcon.HTTP_200

    async def on_post_persist(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """POST /v1/storage/persist - save now."""
        result = await self._persist.execute()
        resp.media = {
            "saved": result.saved,
            "path": str(result.path) if result.path else None,
            "backupCreated": str(result.backup_created) if result.backup_created else None,
            "backupCount": result.backup_count,
            "timestamp": result.timestamp.isoformat(),
        }
        resp.status = falcon.HTTP_200

    async def on_post_restore(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """POST /v1/storage/restore - replace the catalog with the newest backup."""
        snapshot = await self._restore.execute()
        resp.media = {
            "restored": True,
            "totalRoles": snapshot.role_count,
            "rolesByNamespace": self._catalog.stats(),
            "warnings": [
                "Authorization tuples were not resynchronized with the restored catalog"
            ],
        }
        resp.status = falcon.HTTP_200
