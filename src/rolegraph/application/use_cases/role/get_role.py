"""Get role use case."""

from rolegraph.application.dto.role_dto import RoleDetailsOutput
from rolegraph.application.ports import AuthorizationSync, RoleCatalog
from rolegraph.application.use_cases.role.common import clean_name, ensure_tenant_access


class GetRoleUseCase:
    """Get role from catalog with its grants read back from the backend."""

    def __init__(self, catalog: RoleCatalog, authorization_sync: AuthorizationSync) -> None:
        self._catalog = catalog
        self._sync = authorization_sync

    async def execute(
        self, namespace: str, name: str, tenant_id: str | None = None
    ) -> RoleDetailsOutput:
        role = self._catalog.get(namespace, clean_name(name))
        ensure_tenant_access(role, tenant_id)
        grants = await self._sync.get_permissions_for_role(namespace, role.name)
        return RoleDetailsOutput(
            role=role,
            permissions=grants.permissions,
            inherited_roles=grants.inherited_roles,
            warnings=grants.warnings,
        )
