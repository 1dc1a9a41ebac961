"""Role entity with inheritance and resource permissions."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True)
class RolePermission:
    """Permission - role may perform action on resource."""

    resource: str
    action: str


@dataclass
class Role:
    """Role - unique by (namespace, name), inherits from parent roles."""

    name: str
    namespace: str
    description: str = ""
    tenant_id: str | None = None
    inherits_from: list[str] = field(default_factory=list)
    permissions: list[RolePermission] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    def visible_to(self, tenant_id: str | None) -> bool:
        """Global roles are visible to every tenant, scoped roles to their own."""
        return tenant_id is None or self.tenant_id is None or self.tenant_id == tenant_id


def unique_role_names(names: Iterable[str]) -> list[str]:
    """Strip names and drop blanks and duplicates, keeping first occurrence order."""
    result: list[str] = []
    for name in names:
        cleaned = name.strip()
        if cleaned and cleaned not in result:
            result.append(cleaned)
    return result


def unique_permissions(permissions: Iterable[RolePermission]) -> list[RolePermission]:
    """Strip and de-duplicate (resource, action) pairs, keeping first occurrence order."""
    result: list[RolePermission] = []
    for permission in permissions:
        cleaned = RolePermission(
            resource=permission.resource.strip(),
            action=permission.action.strip(),
        )
        if cleaned not in result:
            result.append(cleaned)
    return result
