"""Update role use case."""

import logging

from rolegraph.application.dto.role_dto import RoleMutationOutput, RoleUpdateInput
from rolegraph.application.ports import AuthorizationSync, RoleCatalog, SnapshotStore
from rolegraph.application.use_cases.role.common import (
    clean_name,
    clean_parents,
    clean_permissions,
    ensure_tenant_access,
    persist_catalog,
)
from rolegraph.domain.exceptions import ValidationError
from rolegraph.domain.services.inheritance_graph import DEFAULT_MAX_DEPTH, validate_inheritance

logger = logging.getLogger(__name__)


class UpdateRoleUseCase:
    """Apply the provided fields of a role and reconcile its tuples."""

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

    async def execute(
        self, data: RoleUpdateInput, tenant_id: str | None = None
    ) -> RoleMutationOutput:
        """Update role. ``tenant_id`` is the caller's tenant, not the new one."""
        name = clean_name(data.name)
        before = self._catalog.get(data.namespace, name)
        ensure_tenant_access(before, tenant_id)

        parents = clean_parents(data.inherits_from)
        permissions = clean_permissions(data.permissions)

        warnings: list[str] = []
        if parents is not None:
            check = validate_inheritance(
                name, parents, self._catalog.inheritance_edges(data.namespace), self._max_depth
            )
            if not check.valid:
                raise ValidationError("Invalid role inheritance", errors=check.errors)
            warnings.extend(check.warnings)

        after = self._catalog.update(
            data.namespace,
            name,
            description=data.description,
            tenant_id=data.tenant_id,
            inherits_from=parents,
            permissions=permissions,
        )
        logger.info("Updated role %s in namespace %s", name, data.namespace)

        sync = await self._sync.sync_update(
            before, after, replace_permissions=permissions is not None
        )
        warnings.extend(sync.warnings)
        warnings.extend(await persist_catalog(self._catalog, self._store, self._save_on_write))
        return RoleMutationOutput(role=after, sync_status=sync.status, warnings=warnings)
