"""Application entry point and composition root."""

import logging

from falcon.asgi import App

from rolegraph import __version__
from rolegraph.application.use_cases.role.role_service import RoleService
from rolegraph.application.use_cases.storage.persist_storage import PersistStorageUseCase
from rolegraph.application.use_cases.storage.restore_storage import RestoreStorageUseCase
from rolegraph.config import Settings, get_settings
from rolegraph.infrastructure.keto.sync_client import KetoSyncClient
from rolegraph.infrastructure.persistence.file.persistence_manager import FilePersistenceManager
from rolegraph.infrastructure.persistence.memory.role_catalog import InMemoryRoleCatalog
from rolegraph.interfaces.api.app import create_app
from rolegraph.interfaces.api.middleware.catalog_lifespan import CatalogLifespanMiddleware
from rolegraph.interfaces.api.middleware.context import ContextMiddleware
from rolegraph.interfaces.api.middleware.cors import CORSMiddleware
from rolegraph.interfaces.api.resources.health import HealthResource
from rolegraph.interfaces.api.resources.roles import RoleResource, RolesResource
from rolegraph.interfaces.api.resources.storage import StorageResource

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_rolegraph_app(settings: Settings | None = None) -> App:
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()

    keto = KetoSyncClient(
        read_url=settings.keto_read_url,
        write_url=settings.keto_write_url,
        timeout=settings.keto_timeout,
        default_collection=settings.default_resource_collection,
    )
    catalog = InMemoryRoleCatalog()
    persistence = FilePersistenceManager(settings.persistence_config())

    role_service = RoleService.build(
        catalog,
        keto,
        persistence,
        max_inheritance_depth=settings.max_inheritance_depth,
        save_on_write=settings.storage_save_on_write,
    )
    persist_storage = PersistStorageUseCase(catalog, persistence)
    restore_storage = RestoreStorageUseCase(catalog, persistence)

    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    return create_app(
        roles_resource=RolesResource(role_service),
        role_resource=RoleResource(role_service, keto),
        storage_resource=StorageResource(catalog, persistence, persist_storage, restore_storage),
        health_resource=HealthResource(persistence),
        middleware=[
            CORSMiddleware(cors_origins),
            CatalogLifespanMiddleware(
                catalog, persistence, keto, seed_demo_roles=settings.seed_demo_roles
            ),
            ContextMiddleware(settings.keto_default_namespace),
        ],
    )


def main() -> None:
    """CLI entry point - run uvicorn server."""
    import uvicorn

    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)
    logger.info(
        "RoleGraph v%s starting (%s, keto read=%s write=%s)",
        __version__,
        settings.environment,
        settings.keto_read_url,
        settings.keto_write_url,
    )
    app = create_rolegraph_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
