"""In-memory role catalog - the authoritative role state."""

from copy import deepcopy
from dataclasses import replace
from datetime import UTC, datetime

from rolegraph.domain.entities import Role, RolePermission, SnapshotMetadata, StorageSnapshot
from rolegraph.domain.exceptions import Conflict, NotFound


def _copy(role: Role) -> Role:
    return replace(
        role,
        inherits_from=list(role.inherits_from),
        permissions=list(role.permissions),
    )


class InMemoryRoleCatalog:
    """Roles indexed by namespace, then name, in creation order.

    All methods are synchronous and return copies, so a mutation is atomic
    with respect to other requests handled on the same event loop.
    """

    def __init__(self, snapshot: StorageSnapshot | None = None) -> None:
        self._roles: dict[str, dict[str, Role]] = {}
        self._collections: dict[str, object] = {}
        self._revision = 0
        if snapshot is not None:
            self.load(snapshot)

    @property
    def revision(self) -> int:
        """Bumped on every mutation."""
        return self._revision

    def create(self, role: Role) -> Role:
        """Insert role. Raises Conflict if the name is taken in its namespace."""
        roles = self._roles.setdefault(role.namespace, {})
        if role.name in roles:
            raise Conflict("Role", f"{role.name} in namespace {role.namespace}")
        roles[role.name] = _copy(role)
        self._revision += 1
        return _copy(role)

    def find(self, namespace: str, name: str) -> Role | None:
        role = self._roles.get(namespace, {}).get(name)
        return _copy(role) if role else None

    def get(self, namespace: str, name: str) -> Role:
        role = self.find(namespace, name)
        if role is None:
            raise NotFound("Role", name)
        return role

    def list_by_namespace(self, namespace: str, tenant_id: str | None = None) -> list[Role]:
        """Roles of namespace; with tenant_id, only global roles and that tenant's."""
        return [
            _copy(r)
            for r in self._roles.get(namespace, {}).values()
            if r.visible_to(tenant_id)
        ]

    def update(
        self,
        namespace: str,
        name: str,
        *,
        description: str | None = None,
        tenant_id: str | None = None,
        inherits_from: list[str] | None = None,
        permissions: list[RolePermission] | None = None,
    ) -> Role:
        """Apply only the fields that are not None."""
        existing = self._roles.get(namespace, {}).get(name)
        if existing is None:
            raise NotFound("Role", name)
        updated = replace(
            existing,
            description=description if description is not None else existing.description,
            tenant_id=tenant_id if tenant_id is not None else existing.tenant_id,
            inherits_from=list(inherits_from)
            if inherits_from is not None
            else list(existing.inherits_from),
            permissions=list(permissions)
            if permissions is not None
            else list(existing.permissions),
            updated_at=datetime.now(UTC),
        )
        self._roles[namespace][name] = updated
        self._revision += 1
        return _copy(updated)

    def delete(self, namespace: str, name: str) -> Role:
        roles = self._roles.get(namespace, {})
        if name not in roles:
            raise NotFound("Role", name)
        removed = roles.pop(name)
        self._revision += 1
        return removed

    def inheritance_edges(self, namespace: str) -> dict[str, list[str]]:
        """Role name -> parent names for every role of namespace."""
        return {
            name: list(role.inherits_from)
            for name, role in self._roles.get(namespace, {}).items()
        }

    def dependents(self, namespace: str, name: str) -> list[str]:
        """Roles that list ``name`` as a direct parent."""
        return [
            role.name
            for role in self._roles.get(namespace, {}).values()
            if name in role.inherits_from
        ]

    def namespaces(self) -> list[str]:
        return list(self._roles)

    def stats(self) -> dict[str, int]:
        """Role count per namespace."""
        return {namespace: len(roles) for namespace, roles in self._roles.items()}

    def snapshot(self) -> StorageSnapshot:
        """Deep copy of the whole catalog, tagged with the current revision."""
        return StorageSnapshot(
            roles_by_namespace={
                namespace: [_copy(r) for r in roles.values()]
                for namespace, roles in self._roles.items()
            },
            collections=deepcopy(self._collections),
            metadata=SnapshotMetadata(),
            revision=self._revision,
        )

    def load(self, snapshot: StorageSnapshot) -> None:
        """Replace the whole catalog with the contents of snapshot."""
        roles: dict[str, dict[str, Role]] = {}
        for namespace, items in snapshot.roles_by_namespace.items():
            by_name = roles.setdefault(namespace, {})
            for role in items:
                by_name[role.name] = replace(_copy(role), namespace=namespace)
        self._roles = roles
        self._collections = deepcopy(snapshot.collections)
        self._revision += 1
