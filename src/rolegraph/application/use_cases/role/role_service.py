"""Role service - single entry point over the role use cases."""

import asyncio

from rolegraph.application.dto.role_dto import (
    RoleCreateInput,
    RoleDetailsOutput,
    RoleMutationOutput,
    RoleUpdateInput,
)
from rolegraph.application.ports import AuthorizationSync, RoleCatalog, SnapshotStore
from rolegraph.application.use_cases.role.create_role import CreateRoleUseCase
from rolegraph.application.use_cases.role.delete_role import DeleteRoleUseCase
from rolegraph.application.use_cases.role.get_role import GetRoleUseCase
from rolegraph.application.use_cases.role.list_roles import ListRolesUseCase
from rolegraph.application.use_cases.role.update_role import UpdateRoleUseCase
from rolegraph.application.use_cases.role.validate_inheritance import ValidateInheritanceUseCase
from rolegraph.domain.entities import Role
from rolegraph.domain.services.inheritance_graph import DEFAULT_MAX_DEPTH, InheritanceValidation


class RoleService:
    """Runs every mutation as validate -> commit -> sync -> persist.

    Validation and catalog errors raise; sync and persistence problems come
    back as warnings on an otherwise successful result. Mutations of one
    namespace run one at a time so Keto sees tuple writes in commit order.
    """

    def __init__(
        self,
        create_role: CreateRoleUseCase,
        update_role: UpdateRoleUseCase,
        delete_role: DeleteRoleUseCase,
        get_role: GetRoleUseCase,
        list_roles: ListRolesUseCase,
        validate_inheritance: ValidateInheritanceUseCase,
    ) -> None:
        self._create = create_role
        self._update = update_role
        self._delete = delete_role
        self._get = get_role
        self._list = list_roles
        self._validate = validate_inheritance
        self._locks: dict[str, asyncio.Lock] = {}

    @classmethod
    def build(
        cls,
        catalog: RoleCatalog,
        authorization_sync: AuthorizationSync,
        snapshot_store: SnapshotStore,
        *,
        max_inheritance_depth: int = DEFAULT_MAX_DEPTH,
        save_on_write: bool = True,
    ) -> "RoleService":
        """Wire all use cases around one catalog, sync client and store."""
        return cls(
            create_role=CreateRoleUseCase(
                catalog,
                authorization_sync,
                snapshot_store,
                max_inheritance_depth=max_inheritance_depth,
                save_on_write=save_on_write,
            ),
            update_role=UpdateRoleUseCase(
                catalog,
                authorization_sync,
                snapshot_store,
                max_inheritance_depth=max_inheritance_depth,
                save_on_write=save_on_write,
            ),
            delete_role=DeleteRoleUseCase(
                catalog, authorization_sync, snapshot_store, save_on_write=save_on_write
            ),
            get_role=GetRoleUseCase(catalog, authorization_sync),
            list_roles=ListRolesUseCase(catalog),
            validate_inheritance=ValidateInheritanceUseCase(
                catalog, max_inheritance_depth=max_inheritance_depth
            ),
        )

    def _lock_for(self, namespace: str) -> asyncio.Lock:
        lock = self._locks.get(namespace)
        if lock is None:
            lock = self._locks[namespace] = asyncio.Lock()
        return lock

    async def create(self, data: RoleCreateInput) -> RoleMutationOutput:
        async with self._lock_for(data.namespace):
            return await self._create.execute(data)

    async def update(
        self, data: RoleUpdateInput, tenant_id: str | None = None
    ) -> RoleMutationOutput:
        async with self._lock_for(data.namespace):
            return await self._update.execute(data, tenant_id=tenant_id)

    async def delete(
        self, namespace: str, name: str, tenant_id: str | None = None
    ) -> RoleMutationOutput:
        async with self._lock_for(namespace):
            return await self._delete.execute(namespace, name, tenant_id=tenant_id)

    async def get(
        self, namespace: str, name: str, tenant_id: str | None = None
    ) -> RoleDetailsOutput:
        return await self._get.execute(namespace, name, tenant_id=tenant_id)

    async def list_roles(self, namespace: str, tenant_id: str | None = None) -> list[Role]:
        return await self._list.execute(namespace, tenant_id=tenant_id)

    async def validate_inheritance(
        self, namespace: str, name: str, inherits_from: list[str]
    ) -> InheritanceValidation:
        return await self._validate.execute(namespace, name, inherits_from)
