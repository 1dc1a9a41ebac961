"""On-disk JSON schema of the storage file.

``{"rolesByNamespace": {...}, <other collections>, "metadata": {...}}`` with
camelCase keys. Unknown top-level keys are kept and written back unchanged.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rolegraph.domain.entities import Role, RolePermission, SnapshotMetadata, StorageSnapshot
from rolegraph.domain.entities.snapshot import FORMAT_VERSION


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PermissionDocument(_CamelModel):
    resource: str
    action: str


class RoleDocument(_CamelModel):
    name: str
    description: str = ""
    namespace: str
    tenant_id: str | None = None
    inherits_from: list[str] = Field(default_factory=list)
    permissions: list[PermissionDocument] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime | None = None


class MetadataDocument(_CamelModel):
    version: str = FORMAT_VERSION
    last_modified: datetime
    backup_count: int = 0


class StorageDocument(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    roles_by_namespace: dict[str, list[RoleDocument]]
    metadata: MetadataDocument


def snapshot_to_json(snapshot: StorageSnapshot) -> bytes:
    """Serialize snapshot to indented UTF-8 JSON."""
    document = StorageDocument(
        roles_by_namespace={
            namespace: [
                RoleDocument(
                    name=r.name,
                    description=r.description,
                    namespace=r.namespace,
                    tenant_id=r.tenant_id,
                    inherits_from=list(r.inherits_from),
                    permissions=[
                        PermissionDocument(resource=p.resource, action=p.action)
                        for p in r.permissions
                    ],
                    created_at=r.created_at,
                    updated_at=r.updated_at,
                )
                for r in roles
            ]
            for namespace, roles in snapshot.roles_by_namespace.items()
        },
        metadata=MetadataDocument(
            version=snapshot.metadata.version,
            last_modified=snapshot.metadata.last_modified,
            backup_count=snapshot.metadata.backup_count,
        ),
        **snapshot.collections,
    )
    return document.model_dump_json(by_alias=True, exclude_none=True, indent=2).encode("utf-8")


def snapshot_from_json(raw: bytes | str) -> StorageSnapshot:
    """Parse and validate a storage file. Raises pydantic.ValidationError."""
    document = StorageDocument.model_validate_json(raw)
    return StorageSnapshot(
        roles_by_namespace={
            namespace: [
                Role(
                    name=r.name,
                    namespace=namespace,
                    description=r.description,
                    tenant_id=r.tenant_id,
                    inherits_from=list(r.inherits_from),
                    permissions=[
                        RolePermission(resource=p.resource, action=p.action)
                        for p in r.permissions
                    ],
                    created_at=r.created_at,
                    updated_at=r.updated_at,
                )
                for r in roles
            ]
            for namespace, roles in document.roles_by_namespace.items()
        },
        collections=dict(document.model_extra or {}),
        metadata=SnapshotMetadata(
            version=document.metadata.version,
            last_modified=document.metadata.last_modified,
            backup_count=document.metadata.backup_count,
        ),
    )

