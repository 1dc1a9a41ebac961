"""Role catalog port."""

from typing import Protocol

from rolegraph.domain.entities import Role, RolePermission, StorageSnapshot


class RoleCatalog(Protocol):
    """Port for the authoritative, namespace-partitioned role store."""

    @property
    def revision(self) -> int: ...

    def create(self, role: Role) -> Role: ...

    def find(self, namespace: str, name: str) -> Role | None: ...

    def get(self, namespace: str, name: str) -> Role: ...

    def list_by_namespace(self, namespace: str, tenant_id: str | None = None) -> list[Role]: ...

    def update(
        self,
        namespace: str,
        name: str,
        *,
        description: str | None = None,
        tenant_id: str | None = None,
        inherits_from: list[str] | None = None,
        permissions: list[RolePermission] | None = None,
    ) -> Role: ...

    def delete(self, namespace: str, name: str) -> Role: ...

    def inheritance_edges(self, namespace: str) -> dict[str, list[str]]: ...

    def dependents(self, namespace: str, name: str) -> list[str]: ...

    def stats(self) -> dict[str, int]: ...

    def snapshot(self) -> StorageSnapshot: ...

    def load(self, snapshot: StorageSnapshot) -> None: ...
