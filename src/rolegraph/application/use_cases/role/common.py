"""Steps shared by the role use cases."""

import logging

from rolegraph.application.ports import RoleCatalog, SnapshotStore
from rolegraph.domain.entities import Role, RolePermission
from rolegraph.domain.entities.role import unique_permissions, unique_role_names
from rolegraph.domain.exceptions import PermissionDenied, PersistenceError, ValidationError

logger = logging.getLogger(__name__)

# Keto objects under this prefix are role member sets, not resources.
RESERVED_RESOURCE_PREFIX = "role:"


def ensure_tenant_access(role: Role, tenant_id: str | None) -> None:
    """Tenant-scoped callers may only touch global roles and roles of their tenant."""
    if tenant_id and role.tenant_id and role.tenant_id != tenant_id:
        raise PermissionDenied("Role does not belong to this tenant")


def clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Role name is required")
    return cleaned


def clean_parents(inherits_from: list[str] | None) -> list[str] | None:
    if inherits_from is None:
        return None
    return unique_role_names(inherits_from)


def clean_permissions(permissions: list[RolePermission] | None) -> list[RolePermission] | None:
    if permissions is None:
        return None
    cleaned = unique_permissions(permissions)
    invalid = [p for p in cleaned if not p.resource or not p.action]
    if invalid:
        raise ValidationError(
            "Invalid permissions",
            errors=["Permission resource and action are required"],
        )
    reserved = dict.fromkeys(
        p.resource for p in cleaned if p.resource.startswith(RESERVED_RESOURCE_PREFIX)
    )
    if reserved:
        raise ValidationError(
            "Invalid permissions",
            errors=[
                f"Resource '{r}' uses the reserved prefix '{RESERVED_RESOURCE_PREFIX}'"
                for r in reserved
            ],
        )
    return cleaned


async def persist_catalog(
    catalog: RoleCatalog, store: SnapshotStore, save_on_write: bool
) -> list[str]:
    """Best-effort save after a committed mutation; failures become warnings."""
    if not save_on_write or not store.enabled:
        return []
    try:
        await store.save(catalog.snapshot())
    except PersistenceError as exc:
        logger.exception("Role catalog committed in memory but not persisted")
        return [f"Failed to persist role catalog ({exc.kind}): {exc}"]
    return []
