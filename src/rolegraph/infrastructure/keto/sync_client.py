"""Ory Keto client that mirrors role catalog mutations as relation tuples.

The catalog is the source of truth; Keto is a best-effort projection of it.
No method raises on backend trouble: each failed tuple operation becomes a
warning string on the returned result. Tuple operations inside one call run
sequentially in input order.
"""

import logging
from typing import Any

import httpx

from rolegraph.application.dto.sync_result import RoleGrants, SyncResult
from rolegraph.domain.entities import Role, RolePermission
from rolegraph.domain.value_objects import RelationTuple, SubjectSet
from rolegraph.domain.value_objects.relation_tuple import subject_set_query
from rolegraph.infrastructure.keto.tuples import (
    DEFAULT_COLLECTION,
    ROLE_PREFIX,
    display_resource,
    hierarchy_tuple,
    hierarchy_tuples,
    is_hierarchy_tuple,
    member_set,
    normalize_resource,
    permission_tuples,
)

logger = logging.getLogger(__name__)

_CREATED = {200, 201}
_DELETED = {200, 204, 404}


class KetoSyncClient:
    """Writes and deletes tuples through the Keto write API, reads through the read API."""

    def __init__(
        self,
        read_url: str,
        write_url: str,
        *,
        timeout: float = 5.0,
        default_collection: str = DEFAULT_COLLECTION,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._read_url = read_url.rstrip("/")
        self._write_url = write_url.rstrip("/")
        self._timeout = timeout
        self._collection = default_collection
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def role_member_set(self, namespace: str, name: str) -> SubjectSet:
        return member_set(namespace, name)

    def resource_object(self, resource: str) -> str:
        return normalize_resource(resource, self._collection)

    # --- catalog mutations ---

    async def sync_create(self, role: Role) -> SyncResult:
        """One hierarchy tuple per parent, one permission tuple per grant."""
        warnings: list[str] = []
        for relation_tuple in hierarchy_tuples(role):
            await self._create_tuple(relation_tuple, warnings)
        for relation_tuple in permission_tuples(role, self._collection):
            await self._create_tuple(relation_tuple, warnings)
        return self._finish("create", role, warnings)

    async def sync_update(
        self, before: Role, after: Role, *, replace_permissions: bool = True
    ) -> SyncResult:
        """Reconcile hierarchy edges by difference and replace permission tuples.

        Only this role's outgoing edges are touched; tuples where it is the
        parent of another role stay in place.
        """
        warnings: list[str] = []
        removed = [p for p in before.inherits_from if p not in after.inherits_from]
        added = [p for p in after.inherits_from if p not in before.inherits_from]
        for parent in removed:
            await self._delete_tuple(
                hierarchy_tuple(before.namespace, before.name, parent), warnings
            )
        for parent in added:
            await self._create_tuple(
                hierarchy_tuple(after.namespace, after.name, parent), warnings
            )

        if replace_permissions:
            for relation_tuple in permission_tuples(before, self._collection):
                await self._delete_tuple(relation_tuple, warnings)
            for relation_tuple in permission_tuples(after, self._collection):
                await self._create_tuple(relation_tuple, warnings)
        return self._finish("update", after, warnings)

    async def sync_delete(self, role: Role) -> SyncResult:
        """Remove every tuple that has this role's member set as subject."""
        warnings: list[str] = []
        tuples = hierarchy_tuples(role) + permission_tuples(role, self._collection)
        try:
            listed = await self._list_tuples(
                role.namespace, subject_set=member_set(role.namespace, role.name)
            )
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            warnings.append(
                f"Failed to list tuples of role {role.name}: {_describe(exc)}"
            )
            listed = []
        for relation_tuple in listed:
            if relation_tuple not in tuples:
                tuples.append(relation_tuple)

        for relation_tuple in tuples:
            await self._delete_tuple(relation_tuple, warnings)
        return self._finish("delete", role, warnings)

    # --- reads ---

    async def get_permissions_for_role(self, namespace: str, name: str) -> RoleGrants:
        """Grants and parents of a role as stored in Keto; empty plus warning if unreachable."""
        try:
            tuples = await self._list_tuples(namespace, subject_set=member_set(namespace, name))
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            message = f"Failed to read permissions of role {name}: {_describe(exc)}"
            logger.warning(message)
            return RoleGrants(warnings=[message])

        grants = RoleGrants()
        for relation_tuple in tuples:
            if is_hierarchy_tuple(relation_tuple):
                parent = relation_tuple.object[len(ROLE_PREFIX) :]
                if parent not in grants.inherited_roles:
                    grants.inherited_roles.append(parent)
            else:
                permission = RolePermission(
                    resource=display_resource(relation_tuple.object, self._collection),
                    action=relation_tuple.relation,
                )
                if permission not in grants.permissions:
                    grants.permissions.append(permission)
        return grants

    async def check(
        self,
        namespace: str,
        object: str,
        relation: str,
        *,
        subject_id: str | None = None,
        subject_set: SubjectSet | None = None,
    ) -> bool:
        """Ask Keto whether subject has relation on object. Fails closed."""
        params = {"namespace": namespace, "object": object, "relation": relation}
        if subject_set is not None:
            params.update(subject_set_query(subject_set))
        else:
            params["subject_id"] = subject_id or ""
        try:
            resp = await self._client.get(
                f"{self._read_url}/relation-tuples/check",
                params=params,
                timeout=self._timeout,
            )
            # Keto answers a denied check with 403 and the same body.
            if resp.status_code not in (200, 403):
                resp.raise_for_status()
            body = resp.json()
            return isinstance(body, dict) and body.get("allowed") is True
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Permission check %s#%s failed: %s", object, relation, _describe(exc))
            return False

    async def expand(
        self, namespace: str, object: str, relation: str, max_depth: int = 3
    ) -> dict[str, Any] | None:
        """Raw subject tree of object#relation, or None when Keto is unreachable."""
        try:
            resp = await self._client.get(
                f"{self._read_url}/relation-tuples/expand",
                params={
                    "namespace": namespace,
                    "object": object,
                    "relation": relation,
                    "max_depth": max_depth,
                },
                timeout=self._timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Expand %s#%s failed: %s", object, relation, _describe(exc))
            return None

    # --- tuple primitives ---

    async def _create_tuple(self, relation_tuple: RelationTuple, warnings: list[str]) -> bool:
        try:
            resp = await self._client.put(
                f"{self._write_url}/admin/relation-tuples",
                json=relation_tuple.to_payload(),
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            warnings.append(f"Failed to create tuple {relation_tuple}: {_describe(exc)}")
            return False
        if resp.status_code not in _CREATED:
            warnings.append(f"Failed to create tuple {relation_tuple}: HTTP {resp.status_code}")
            return False
        logger.debug("Created tuple %s", relation_tuple)
        return True

    async def _delete_tuple(self, relation_tuple: RelationTuple, warnings: list[str]) -> bool:
        try:
            resp = await self._client.delete(
                f"{self._write_url}/admin/relation-tuples",
                params=relation_tuple.to_query(),
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            warnings.append(f"Failed to delete tuple {relation_tuple}: {_describe(exc)}")
            return False
        if resp.status_code not in _DELETED:
            warnings.append(f"Failed to delete tuple {relation_tuple}: HTTP {resp.status_code}")
            return False
        logger.debug("Deleted tuple %s", relation_tuple)
        return True

    async def _list_tuples(
        self, namespace: str, *, subject_set: SubjectSet
    ) -> list[RelationTuple]:
        """All tuples of namespace with the given subject set, across pages."""
        params = {"namespace": namespace, **subject_set_query(subject_set)}
        tuples: list[RelationTuple] = []
        page_token: str | None = None
        while True:
            query = dict(params)
            if page_token:
                query["page_token"] = page_token
            resp = await self._client.get(
                f"{self._read_url}/relation-tuples",
                params=query,
                timeout=self._timeout,
            )
            resp.raise_for_status()
            body = resp.json()
            if not isinstance(body, dict):
                raise ValueError("unexpected relation-tuples response")
            tuples.extend(
                RelationTuple.from_payload(item) for item in body.get("relation_tuples") or []
            )
            next_token = body.get("next_page_token")
            if not next_token or next_token == page_token:
                return tuples
            page_token = next_token

    def _finish(self, operation: str, role: Role, warnings: list[str]) -> SyncResult:
        result = SyncResult.from_warnings(warnings)
        if warnings:
            logger.warning(
                "Keto %s of role %s/%s partially failed (%d warnings): %s",
                operation,
                role.namespace,
                role.name,
                len(warnings),
                "; ".join(warnings),
            )
        else:
            logger.debug("Keto %s of role %s/%s synchronized", operation, role.namespace, role.name)
        return result


def _describe(exc: Exception) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "timed out"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code}"
    return str(exc) or type(exc).__name__
