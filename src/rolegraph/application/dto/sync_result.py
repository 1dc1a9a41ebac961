"""Sync DTOs - results of talking to the authorization backend."""

from dataclasses import dataclass, field

from rolegraph.domain.entities import RolePermission
from rolegraph.domain.value_objects import SyncStatus


@dataclass
class SyncResult:
    """Aggregate outcome of one sync call; warnings list every failed tuple."""

    status: SyncStatus = SyncStatus.SUCCESS
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def from_warnings(cls, warnings: list[str]) -> "SyncResult":
        status = SyncStatus.PARTIAL if warnings else SyncStatus.SUCCESS
        return cls(status=status, warnings=list(warnings))

    @property
    def ok(self) -> bool:
        return self.status is SyncStatus.SUCCESS


@dataclass
class RoleGrants:
    """Permissions and parent roles of a role, as the backend sees them."""

    permissions: list[RolePermission] = field(default_factory=list)
    inherited_roles: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
