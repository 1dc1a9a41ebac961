"""Catalog lifespan middleware - restores the catalog on startup, flushes on shutdown."""

import logging
from typing import Any

from rolegraph.infrastructure.keto.sync_client import KetoSyncClient
from rolegraph.infrastructure.persistence.file.persistence_manager import FilePersistenceManager
from rolegraph.infrastructure.persistence.memory.role_catalog import InMemoryRoleCatalog
from rolegraph.infrastructure.persistence.memory.seed import seed_demo_roles

logger = logging.getLogger(__name__)


class CatalogLifespanMiddleware:
    """Owns the catalog lifecycle for the ASGI app."""

    def __init__(
        self,
        catalog: InMemoryRoleCatalog,
        persistence: FilePersistenceManager,
        keto: KetoSyncClient,
        seed_demo_roles: bool = False,
    ) -> None:
        self._catalog = catalog
        self._persistence = persistence
        self._keto = keto
        self._seed = seed_demo_roles

    async def process_startup(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Load the newest valid snapshot and start autosave when ASGI server starts."""
        snapshot = await self._persistence.restore()
        self._catalog.load(snapshot)
        # Seeding after autosave starts marks the seed as unsaved.
        self._persistence.start_autosave(self._catalog)
        if self._seed and snapshot.role_count == 0:
            seed_demo_roles(self._catalog)
        mode = "file" if self._persistence.enabled else "memory-only"
        logger.info("Role catalog ready (%s mode): %s", mode, self._catalog.stats())

    async def process_shutdown(
        self, scope: dict[str, Any], event: dict[str, Any]
    ) -> None:
        """Flush pending changes and close the Keto client when ASGI server shuts down."""
        await self._persistence.close()
        await self._keto.aclose()
