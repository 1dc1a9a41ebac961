"""Demo roles for an empty catalog."""

import logging
from datetime import UTC, datetime

from rolegraph.application.ports import RoleCatalog
from rolegraph.domain.entities import Role

logger = logging.getLogger(__name__)

SEED_TIMESTAMP = datetime(2025, 1, 1, tzinfo=UTC)


def demo_roles() -> list[Role]:
    """Roles matching the demo's Keto fixtures (admin -> moderator -> customer)."""
    return [
        Role(
            name="admin",
            namespace="simple-rbac",
            description="Administrator with full access",
            inherits_from=["moderator"],
            created_at=SEED_TIMESTAMP,
        ),
        Role(
            name="moderator",
            namespace="simple-rbac",
            description="Moderator with limited access",
            inherits_from=["customer"],
            created_at=SEED_TIMESTAMP,
        ),
        Role(
            name="customer",
            namespace="simple-rbac",
            description="Customer with view-only access",
            created_at=SEED_TIMESTAMP,
        ),
        Role(
            name="tenant-admin",
            namespace="tenant-rbac",
            description="Tenant administrator",
            tenant_id="tenant-a",
            created_at=SEED_TIMESTAMP,
        ),
        Role(
            name="tenant-member",
            namespace="tenant-rbac",
            description="Tenant member",
            tenant_id="tenant-a",
            created_at=SEED_TIMESTAMP,
        ),
        Role(
            name="resource-owner",
            namespace="resource-rbac",
            description="Resource owner",
            tenant_id="tenant-a",
            created_at=SEED_TIMESTAMP,
        ),
        Role(
            name="resource-viewer",
            namespace="resource-rbac",
            description="Resource viewer",
            tenant_id="tenant-a",
            created_at=SEED_TIMESTAMP,
        ),
    ]


def seed_demo_roles(catalog: RoleCatalog) -> int:
    """Insert demo roles into catalog locally; tuples are expected to exist already."""
    roles = demo_roles()
    for role in roles:
        catalog.create(role)
    logger.info("Seeded role catalog with %d demo roles", len(roles))
    return len(roles)
