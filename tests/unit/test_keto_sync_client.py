"""Unit tests for the Keto sync client against a fake Keto."""

import pytest

from rolegraph.domain.entities import Role, RolePermission
from rolegraph.domain.value_objects import RelationTuple, SyncStatus
from rolegraph.infrastructure.keto.tuples import hierarchy_tuple, member_set

NS = "simple-rbac"


def _manager(**overrides) -> Role:
    fields = {
        "name": "manager",
        "namespace": NS,
        "inherits_from": ["customer"],
        "permissions": [RolePermission("product", "view")],
    }
    fields.update(overrides)
    return Role(**fields)


# --- sync_create ---


@pytest.mark.asyncio
async def test_sync_create_writes_hierarchy_and_permission_tuples(sync_client, keto_backend) -> None:
    """One tuple per parent and per permission, written through the write API."""
    result = await sync_client.sync_create(_manager())

    assert result.status is SyncStatus.SUCCESS
    assert result.warnings == []
    assert set(keto_backend.tuples_of(NS, "manager")) == {
        hierarchy_tuple(NS, "manager", "customer"),
        RelationTuple(NS, "product:items", "view", subject_set=member_set(NS, "manager")),
    }
    writes = [r for r in keto_backend.requests if r.method == "PUT"]
    assert {r.url.host for r in writes} == {"keto-write"}


@pytest.mark.asyncio
async def test_sync_create_partial_failure(sync_client, keto_backend) -> None:
    """A failing tuple becomes a warning; the others are still written."""
    keto_backend.fail_objects = {"product:items"}
    role = _manager(
        permissions=[RolePermission("product", "view"), RolePermission("order", "view")]
    )

    result = await sync_client.sync_create(role)

    assert result.status is SyncStatus.PARTIAL
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Failed to create tuple simple-rbac:product:items#view@")
    assert "HTTP 500" in result.warnings[0]
    objects = {t.object for t in keto_backend.tuples_of(NS, "manager")}
    assert objects == {"role:customer", "order:items"}


@pytest.mark.asyncio
async def test_sync_create_backend_offline_never_raises(sync_client, keto_backend) -> None:
    keto_backend.offline = True
    result = await sync_client.sync_create(_manager())
    assert result.status is SyncStatus.PARTIAL
    assert len(result.warnings) == 2
    assert not result.ok


# --- sync_update ---


@pytest.mark.asyncio
async def test_sync_update_touches_only_changed_edges(sync_client, keto_backend) -> None:
    """Removed parents are deleted, added parents created, kept parents untouched."""
    before = _manager(inherits_from=["a", "b"], permissions=[])
    await sync_client.sync_create(before)
    keto_backend.requests.clear()

    after = _manager(inherits_from=["b", "c"], permissions=[])
    result = await sync_client.sync_update(before, after, replace_permissions=False)

    assert result.ok
    assert {t.object for t in keto_backend.tuples_of(NS, "manager")} == {"role:b", "role:c"}
    assert [r.method for r in keto_backend.requests] == ["DELETE", "PUT"]


@pytest.mark.asyncio
async def test_sync_update_replaces_permissions(sync_client, keto_backend) -> None:
    before = _manager()
    await sync_client.sync_create(before)

    after = _manager(permissions=[RolePermission("order", "edit")])
    result = await sync_client.sync_update(before, after, replace_permissions=True)

    assert result.ok
    assert {(t.object, t.relation) for t in keto_backend.tuples_of(NS, "manager")} == {
        ("role:customer", "member"),
        ("order:items", "edit"),
    }


@pytest.mark.asyncio
async def test_sync_update_keeps_permissions_when_not_replaced(sync_client, keto_backend) -> None:
    before = _manager()
    await sync_client.sync_create(before)

    after = _manager(inherits_from=[])
    await sync_client.sync_update(before, after, replace_permissions=False)

    assert {t.object for t in keto_backend.tuples_of(NS, "manager")} == {"product:items"}


@pytest.mark.asyncio
async def test_sync_update_leaves_children_edges(sync_client, keto_backend) -> None:
    """Edges where the updated role is the parent belong to the children."""
    customer = Role(name="customer", namespace=NS)
    await sync_client.sync_create(customer)
    await sync_client.sync_create(_manager())

    await sync_client.sync_update(
        customer, Role(name="customer", namespace=NS, description="x"), replace_permissions=True
    )

    assert hierarchy_tuple(NS, "manager", "customer") in keto_backend.tuples


# --- sync_delete ---


@pytest.mark.asyncio
async def test_sync_delete_removes_derived_and_listed_tuples(sync_client, keto_backend) -> None:
    """Tuples left behind by older versions of the role are removed too."""
    role = _manager()
    await sync_client.sync_create(role)
    stray = RelationTuple(NS, "legacy:items", "view", subject_set=member_set(NS, "manager"))
    keto_backend.tuples.append(stray)

    result = await sync_client.sync_delete(role)

    assert result.ok
    assert keto_backend.tuples_of(NS, "manager") == []


@pytest.mark.asyncio
async def test_sync_delete_missing_tuple_is_not_a_failure(sync_client, keto_backend) -> None:
    """A tuple that is already gone (404) counts as deleted."""
    result = await sync_client.sync_delete(_manager())
    assert result.status is SyncStatus.SUCCESS


@pytest.mark.asyncio
async def test_sync_delete_partial_failure(sync_client, keto_backend) -> None:
    role = _manager()
    await sync_client.sync_create(role)
    keto_backend.fail_objects = {"product:items"}

    result = await sync_client.sync_delete(role)

    assert result.status is SyncStatus.PARTIAL
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("Failed to delete tuple")
    assert {t.object for t in keto_backend.tuples_of(NS, "manager")} == {"product:items"}


@pytest.mark.asyncio
async def test_sync_delete_list_failure_still_deletes_derived(sync_client, keto_backend) -> None:
    role = _manager()
    await sync_client.sync_create(role)
    keto_backend.fail_reads = True

    result = await sync_client.sync_delete(role)

    assert result.status is SyncStatus.PARTIAL
    assert result.warnings == ["Failed to list tuples of role manager: HTTP 503"]
    assert keto_backend.tuples_of(NS, "manager") == []


# --- reads ---


@pytest.mark.asyncio
async def test_get_permissions_for_role_reads_back(sync_client, keto_backend) -> None:
    await sync_client.sync_create(_manager())

    grants = await sync_client.get_permissions_for_role(NS, "manager")

    assert grants.permissions == [RolePermission("product", "view")]
    assert grants.inherited_roles == ["customer"]
    assert grants.warnings == []
    reads = [r for r in keto_backend.requests if r.method == "GET"]
    assert {r.url.host for r in reads} == {"keto-read"}


@pytest.mark.asyncio
async def test_get_permissions_for_role_follows_pages(sync_client, keto_backend) -> None:
    keto_backend.page_size = 1
    role = _manager(
        inherits_from=["customer", "support"],
        permissions=[RolePermission("product", "view"), RolePermission("order", "view")],
    )
    await sync_client.sync_create(role)

    grants = await sync_client.get_permissions_for_role(NS, "manager")

    assert grants.inherited_roles == ["customer", "support"]
    assert len(grants.permissions) == 2


@pytest.mark.asyncio
async def test_get_permissions_for_role_offline(sync_client, keto_backend) -> None:
    keto_backend.offline = True
    grants = await sync_client.get_permissions_for_role(NS, "manager")
    assert grants.permissions == []
    assert grants.inherited_roles == []
    assert len(grants.warnings) == 1


@pytest.mark.asyncio
async def test_check_follows_inheritance(sync_client, keto_backend) -> None:
    """manager inherits customer's view permission."""
    await sync_client.sync_create(
        Role(name="customer", namespace=NS, permissions=[RolePermission("product", "view")])
    )
    await sync_client.sync_create(_manager(permissions=[]))
    manager = sync_client.role_member_set(NS, "manager")
    product = sync_client.resource_object("product")

    assert await sync_client.check(NS, product, "view", subject_set=manager) is True
    assert await sync_client.check(NS, product, "delete", subject_set=manager) is False


@pytest.mark.asyncio
async def test_check_fails_closed(sync_client, keto_backend) -> None:
    keto_backend.offline = True
    allowed = await sync_client.check(
        NS, "product:items", "view", subject_set=member_set(NS, "admin")
    )
    assert allowed is False


@pytest.mark.asyncio
async def test_expand(sync_client, keto_backend) -> None:
    tree = await sync_client.expand(NS, "role:customer", "member")
    assert tree == {"type": "union", "children": []}
    keto_backend.offline = True
    assert await sync_client.expand(NS, "role:customer", "member") is None
