"""Create role use case."""

import logging
from datetime import UTC, datetime

from rolegraph.application.dto.role_dto import RoleCreateInput, RoleMutationOutput
from rolegraph.application.ports import AuthorizationSync, RoleCatalog, SnapshotStore
from rolegraph.application.use_cases.role.common import (
    clean_name,
    clean_parents,
    clean_permissions,
    persist_catalog,
)
from rolegraph.domain.entities import Role
from rolegraph.domain.exceptions import Conflict, ValidationError
from rolegraph.domain.services.inheritance_graph import DEFAULT_MAX_DEPTH, validate_inheritance

logger = logging.getLogger(__name__)


class CreateRoleUseCase:
    """Validate, commit to the catalog, then sync and persist best-effort."""

    def __init__(
        self,
        catalog: RoleCatalog,
        authorization_sync: AuthorizationSync,
        snapshot_store: SnapshotStore,
        max_inheritance_depth: int = DEFAULT_MAX_DEPTH,
        save_on_write: bool = True,
    ) -> None:
        self._catalog = catalog
        self._sync = authorization_sync
        self._store = snapshot_store
        self._max_depth = max_inheritance_depth
        self._save_on_write = save_on_write

    async def execute(self, data: RoleCreateInput) -> RoleMutationOutput:
        """Create role in namespace. Nothing is written if validation fails."""
        name = clean_name(data.name)
        parents = clean_parents(data.inherits_from) or []
        permissions = clean_permissions(data.permissions) or []

        if self._catalog.find(data.namespace, name):
            raise Conflict("Role", f"{name} in namespace {data.namespace}")

        check = validate_inheritance(
            name, parents, self._catalog.inheritance_edges(data.namespace), self._max_depth
        )
        if not check.valid:
            raise ValidationError("Invalid role inheritance", errors=check.errors)

        role = self._catalog.create(
            Role(
                name=name,
                namespace=data.namespace,
                description=data.description or "",
                tenant_id=data.tenant_id,
                inherits_from=parents,
                permissions=permissions,
                created_at=datetime.now(UTC),
            )
        )
        logger.info("Created role %s in namespace %s", name, data.namespace)

        sync = await self._sync.sync_create(role)
        persist_warnings = await persist_catalog(self._catalog, self._store, self._save_on_write)
        return RoleMutationOutput(
            role=role,
            sync_status=sync.status,
            warnings=[*check.warnings, *sync.warnings, *persist_warnings],
        )
