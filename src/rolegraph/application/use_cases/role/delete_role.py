"""Delete role use case."""

import logging

from rolegraph.application.dto.role_dto import RoleMutationOutput
from rolegraph.application.ports import AuthorizationSync, RoleCatalog, SnapshotStore
from rolegraph.application.use_cases.role.common import (
    clean_name,
    ensure_tenant_access,
    persist_catalog,
)

logger = logging.getLogger(__name__)


class DeleteRoleUseCase:
    """Strip the role's outgoing tuples, then remove it from the catalog."""

    def __init__(
        self,
        catalog: RoleCatalog,
        authorization_sync: AuthorizationSync,
        snapshot_store: SnapshotStore,
        save_on_write: bool = True,
    ) -> None:
        self._catalog = catalog
        self._sync = authorization_sync
        self._store = snapshot_store
        self._save_on_write = save_on_write

    async def execute(
        self, namespace: str, name: str, tenant_id: str | None = None
    ) -> RoleMutationOutput:
        """Delete role. Tuple removal failures never block the catalog delete."""
        name = clean_name(name)
        role = self._catalog.get(namespace, name)
        ensure_tenant_access(role, tenant_id)

        warnings: list[str] = []
        dependents = self._catalog.dependents(namespace, name)
        if dependents:
            warnings.append(
                f"Roles still inheriting from '{name}': {', '.join(dependents)}"
            )

        sync = await self._sync.sync_delete(role)
        removed = self._catalog.delete(namespace, name)
        logger.info("Deleted role %s from namespace %s", name, namespace)

        warnings.extend(sync.warnings)
        warnings.extend(await persist_catalog(self._catalog, self._store, self._save_on_write))
        return RoleMutationOutput(role=removed, sync_status=sync.status, warnings=warnings)
