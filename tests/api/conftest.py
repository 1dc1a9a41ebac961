"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from rolegraph.application.use_cases.role.role_service import RoleService
from rolegraph.application.use_cases.storage.persist_storage import PersistStorageUseCase
from rolegraph.application.use_cases.storage.restore_storage import RestoreStorageUseCase
from rolegraph.infrastructure.persistence.file.persistence_manager import (
    FilePersistenceManager,
    PersistenceConfig,
)
from rolegraph.interfaces.api.app import create_app
from rolegraph.interfaces.api.middleware.context import ContextMiddleware
from rolegraph.interfaces.api.middleware.cors import CORSMiddleware
from rolegraph.interfaces.api.resources.health import HealthResource
from rolegraph.interfaces.api.resources.roles import RoleResource, RolesResource
from rolegraph.interfaces.api.resources.storage import StorageResource


def build_app(catalog, sync_client, store):
    """Falcon ASGI app over the given catalog, Keto client and store (no lifespan)."""
    role_service = RoleService.build(catalog, sync_client, store)
    return create_app(
        roles_resource=RolesResource(role_service),
        role_resource=RoleResource(role_service, sync_client),
        storage_resource=StorageResource(
            catalog,
            store,
            PersistStorageUseCase(catalog, store),
            RestoreStorageUseCase(catalog, store),
        ),
        health_resource=HealthResource(store),
        middleware=[
            CORSMiddleware(["http://localhost:3000"]),
            ContextMiddleware("simple-rbac"),
        ],
    )


@pytest.fixture
def app(catalog, sync_client, memory_store):
    return build_app(catalog, sync_client, memory_store)


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    return TestClient(app)


@pytest.fixture
def file_store(tmp_path):
    return FilePersistenceManager(
        PersistenceConfig(
            data_file_path=tmp_path / "storage.json",
            backup_dir=tmp_path / "backups",
            max_backups=3,
            autosave_interval=0,
        )
    )


@pytest.fixture
def file_client(catalog, sync_client, file_store):
    """Test client whose catalog is saved to a temporary storage file."""
    return TestClient(build_app(catalog, sync_client, file_store))
