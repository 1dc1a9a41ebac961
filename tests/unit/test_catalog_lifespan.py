"""Unit tests for catalog startup and shutdown."""

from pathlib import Path

import pytest
from falcon.asgi import App

from rolegraph.config import Settings
from rolegraph.domain.entities import Role
from rolegraph.infrastructure.persistence.file.persistence_manager import (
    FilePersistenceManager,
    PersistenceConfig,
    read_snapshot,
)
from rolegraph.infrastructure.persistence.memory.role_catalog import InMemoryRoleCatalog
from rolegraph.infrastructure.persistence.memory.seed import demo_roles
from rolegraph.interfaces.api.middleware.catalog_lifespan import CatalogLifespanMiddleware
from rolegraph.main import create_rolegraph_app


def _config(tmp_path: Path) -> PersistenceConfig:
    return PersistenceConfig(
        data_file_path=tmp_path / "storage.json",
        backup_dir=tmp_path / "backups",
        autosave_interval=0,
    )


@pytest.mark.asyncio
async def test_startup_seeds_empty_catalog_and_shutdown_saves(tmp_path: Path, sync_client) -> None:
    config = _config(tmp_path)
    catalog = InMemoryRoleCatalog()
    lifespan = CatalogLifespanMiddleware(
        catalog, FilePersistenceManager(config), sync_client, seed_demo_roles=True
    )

    await lifespan.process_startup({}, {})
    assert sum(catalog.stats().values()) == len(demo_roles())

    await lifespan.process_shutdown({}, {})
    assert read_snapshot(config.data_file_path).role_count == len(demo_roles())


@pytest.mark.asyncio
async def test_startup_restores_existing_file(tmp_path: Path, sync_client) -> None:
    config = _config(tmp_path)
    store = FilePersistenceManager(config)
    source = InMemoryRoleCatalog()
    source.create(Role(name="auditor", namespace="simple-rbac"))
    await store.save(source.snapshot())
    saved = config.data_file_path.read_bytes()

    catalog = InMemoryRoleCatalog()
    lifespan = CatalogLifespanMiddleware(
        catalog, FilePersistenceManager(config), sync_client, seed_demo_roles=True
    )
    await lifespan.process_startup({}, {})
    await lifespan.process_shutdown({}, {})

    assert [r.name for r in catalog.list_by_namespace("simple-rbac")] == ["auditor"]
    assert config.data_file_path.read_bytes() == saved


@pytest.mark.asyncio
async def test_memory_only_startup(sync_client) -> None:
    catalog = InMemoryRoleCatalog()
    lifespan = CatalogLifespanMiddleware(catalog, FilePersistenceManager(), sync_client)
    await lifespan.process_startup({}, {})
    await lifespan.process_shutdown({}, {})
    assert catalog.stats() == {}


def test_create_rolegraph_app(tmp_path: Path) -> None:
    settings = Settings(_env_file=None, storage_file_path=tmp_path / "storage.json")
    app = create_rolegraph_app(settings)
    assert isinstance(app, App)
    assert settings.persistence_config().backup_dir == tmp_path / "backups"
