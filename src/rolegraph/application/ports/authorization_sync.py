"""Authorization sync port - projects the catalog onto relation tuples."""

from typing import Any, Protocol

from rolegraph.application.dto.sync_result import RoleGrants, SyncResult
from rolegraph.domain.entities import Role
from rolegraph.domain.value_objects import SubjectSet


class AuthorizationSync(Protocol):
    """Port for the external tuple store. Implementations never raise."""

    async def sync_create(self, role: Role) -> SyncResult: ...

    async def sync_update(
        self, before: Role, after: Role, *, replace_permissions: bool = True
    ) -> SyncResult: ...

    async def sync_delete(self, role: Role) -> SyncResult: ...

    async def get_permissions_for_role(self, namespace: str, name: str) -> RoleGrants: ...

    async def check(
        self,
        namespace: str,
        object: str,
        relation: str,
        *,
        subject_id: str | None = None,
        subject_set: SubjectSet | None = None,
    ) -> bool: ...

    async def expand(
        self, namespace: str, object: str, relation: str, max_depth: int = 3
    ) -> dict[str, Any] | None: ...

    def role_member_set(self, namespace: str, name: str) -> SubjectSet: ...

    def resource_object(self, resource: str) -> str: ...
