"""Role DTOs."""

from dataclasses import dataclass, field

from rolegraph.domain.entities import Role, RolePermission
from rolegraph.domain.value_objects import SyncStatus


@dataclass
class RoleCreateInput:
    """Input for creating a role."""

    namespace: str
    name: str
    description: str | None = None
    tenant_id: str | None = None
    inherits_from: list[str] | None = None
    permissions: list[RolePermission] | None = None


@dataclass
class RoleUpdateInput:
    """Input for updating a role. ``None`` leaves a field unchanged, ``[]`` clears a list."""

    namespace: str
    name: str
    description: str | None = None
    tenant_id: str | None = None
    inherits_from: list[str] | None = None
    permissions: list[RolePermission] | None = None


@dataclass
class RoleMutationOutput:
    """Committed role plus informational sync status and soft warnings."""

    role: Role
    sync_status: SyncStatus = SyncStatus.SUCCESS
    warnings: list[str] = field(default_factory=list)


@dataclass
class RoleDetailsOutput:
    """Catalog role with the grants read back from the authorization backend."""

    role: Role
    permissions: list[RolePermission] = field(default_factory=list)
    inherited_roles: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
