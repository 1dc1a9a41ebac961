"""Role API resources."""

from typing import Any

import falcon.asgi

from rolegraph.application.dto.role_dto import (
    RoleCreateInput,
    RoleMutationOutput,
    RoleUpdateInput,
)
from rolegraph.application.ports import AuthorizationSync
from rolegraph.application.use_cases.role.role_service import RoleService
from rolegraph.domain.entities import Role, RolePermission
from rolegraph.domain.exceptions import ValidationError


def role_to_media(role: Role) -> dict[str, Any]:
    """JSON shape of a role (camelCase, same as the storage file)."""
    media: dict[str, Any] = {
        "name": role.name,
        "description": role.description,
        "namespace": role.namespace,
        "inheritsFrom": list(role.inherits_from),
        "permissions": permissions_to_media(role.permissions),
        "createdAt": role.created_at.isoformat(),
    }
    if role.tenant_id is not None:
        media["tenantId"] = role.tenant_id
    if role.updated_at is not None:
        media["updatedAt"] = role.updated_at.isoformat()
    return media


def permissions_to_media(permissions: list[RolePermission]) -> list[dict[str, str]]:
    return [{"resource": p.resource, "action": p.action} for p in permissions]


def _mutation_media(result: RoleMutationOutput, namespace: str) -> dict[str, Any]:
    return {
        "role": role_to_media(result.role),
        "namespace": namespace,
        "syncStatus": str(result.sync_status),
        "warnings": result.warnings,
    }


def _string_list(body: dict[str, Any], key: str) -> list[str] | None:
    """None when key is absent or null; otherwise a list of strings."""
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{key} must be an array of role names")
    return value


def _permission_list(body: dict[str, Any]) -> list[RolePermission] | None:
    value = body.get("permissions")
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValidationError("permissions must be an array")
    permissions = []
    for item in value:
        if (
            not isinstance(item, dict)
            or not isinstance(item.get("resource"), str)
            or not isinstance(item.get("action"), str)
        ):
            raise ValidationError("Each permission needs string resource and action")
        permissions.append(RolePermission(resource=item["resource"], action=item["action"]))
    return permissions


def _optional_str(body: dict[str, Any], key: str) -> str | None:
    value = body.get(key)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


async def _json_object(req: falcon.asgi.Request) -> dict[str, Any]:
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


class RolesResource:
    """GET/POST /v1/roles - list and create roles in the request namespace."""

    def __init__(self, role_service: RoleService) -> None:
        self._roles = role_service

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List roles visible to the request tenant."""
        scope = req.context.scope
        roles = await self._roles.list_roles(scope.namespace, scope.tenant_id)
        resp.media = {
            "roles": [role_to_media(r) for r in roles],
            "count": len(roles),
            "namespace": scope.namespace,
            "tenantId": scope.tenant_id,
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create role; 201 even when Keto sync is partial."""
        scope = req.context.scope
        body = await _json_object(req)
        data = RoleCreateInput(
            namespace=scope.namespace,
            name=_optional_str(body, "name") or "",
            description=_optional_str(body, "description"),
            tenant_id=_optional_str(body, "tenantId") or scope.tenant_id,
            inherits_from=_string_list(body, "inheritsFrom"),
            permissions=_permission_list(body),
        )
        result = await self._roles.create(data)
        resp.media = _mutation_media(result, scope.namespace)
        resp.status = falcon.HTTP_201

    async def on_post_validate(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        """POST /v1/roles/validate-inheritance - dry run for the inheritance selector."""
        scope = req.context.scope
        body = await _json_object(req)
        check = await self._roles.validate_inheritance(
            scope.namespace,
            _optional_str(body, "name") or "",
            _string_list(body, "inheritsFrom") or [],
        )
        resp.media = {
            "valid": check.valid,
            "errors": check.errors,
            "warnings": check.warnings,
        }
        resp.status = falcon.HTTP_200


class RoleResource:
    """GET/PUT/DELETE /v1/roles/{role_name} plus the check and expand reads."""

    def __init__(self, role_service: RoleService, authorization_sync: AuthorizationSync) -> None:
        self._roles = role_service
        self._sync = authorization_sync

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_name: str
    ) -> None:
        """Role with permissions and parents read back from Keto."""
        scope = req.context.scope
        details = await self._roles.get(scope.namespace, role_name, scope.tenant_id)
        resp.media = {
            "role": role_to_media(details.role),
            "permissions": permissions_to_media(details.permissions),
            "inheritedRoles": details.inherited_roles,
            "warnings": details.warnings,
            "namespace": scope.namespace,
        }
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_name: str
    ) -> None:
        """Partial update; omitted inheritsFrom/permissions stay unchanged."""
        scope = req.context.scope
        body = await _json_object(req)
        new_name = _optional_str(body, "name")
        if new_name is not None and new_name.strip() != role_name:
            raise ValidationError("Renaming a role is not supported")
        data = RoleUpdateInput(
            namespace=scope.namespace,
            name=role_name,
            description=_optional_str(body, "description"),
            tenant_id=_optional_str(body, "tenantId"),
            inherits_from=_string_list(body, "inheritsFrom"),
            permissions=_permission_list(body),
        )
        result = await self._roles.update(data, tenant_id=scope.tenant_id)
        resp.media = _mutation_media(result, scope.namespace)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_name: str
    ) -> None:
        scope = req.context.scope
        result = await self._roles.delete(scope.namespace, role_name, scope.tenant_id)
        resp.media = _mutation_media(result, scope.namespace)
        resp.status = falcon.HTTP_200

    async def on_get_check(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_name: str
    ) -> None:
        """GET /v1/roles/{role_name}/check?resource=&action= - ask Keto directly."""
        scope = req.context.scope
        resource = req.get_param("resource", required=True)
        action = req.get_param("action", required=True)
        await self._roles.get(scope.namespace, role_name, scope.tenant_id)
        allowed = await self._sync.check(
            scope.namespace,
            self._sync.resource_object(resource),
            action,
            subject_set=self._sync.role_member_set(scope.namespace, role_name),
        )
        resp.media = {
            "role": role_name,
            "resource": resource,
            "action": action,
            "allowed": allowed,
        }
        resp.status = falcon.HTTP_200

    async def on_get_expand(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, role_name: str
    ) -> None:
        """GET /v1/roles/{role_name}/expand?maxDepth= - Keto subject tree of the member set."""
        scope = req.context.scope
        max_depth = req.get_param_as_int("maxDepth", min_value=1, max_value=10, default=3)
        await self._roles.get(scope.namespace, role_name, scope.tenant_id)
        member_set = self._sync.role_member_set(scope.namespace, role_name)
        tree = await self._sync.expand(
            scope.namespace, member_set.object, member_set.relation, max_depth=max_depth
        )
        warnings = [] if tree is not None else ["Keto expand is unavailable"]
        resp.media = {
            "role": role_name,
            "maxDepth": max_depth,
            "tree": tree,
            "warnings": warnings,
        }
        resp.status = falcon.HTTP_200
