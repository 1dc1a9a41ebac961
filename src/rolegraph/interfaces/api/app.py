"""Falcon ASGI application."""

import logging
from typing import Any

import falcon
import falcon.asgi
from falcon.asgi import App

from rolegraph.domain.exceptions import (
    Conflict,
    NotFound,
    PermissionDenied,
    PersistenceError,
    ValidationError,
)
from rolegraph.interfaces.api.resources.health import HealthResource
from rolegraph.interfaces.api.resources.roles import RoleResource, RolesResource
from rolegraph.interfaces.api.resources.storage import StorageResource

logger = logging.getLogger(__name__)


async def handle_validation_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: ValidationError, params: dict
) -> None:
    resp.status = falcon.HTTP_400
    resp.media = {"error": str(ex), "details": ex.errors}


async def handle_permission_denied(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: PermissionDenied, params: dict
) -> None:
    resp.status = falcon.HTTP_403
    resp.media = {"error": str(ex)}


async def handle_not_found(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: NotFound, params: dict
) -> None:
    resp.status = falcon.HTTP_404
    resp.media = {"error": str(ex)}


async def handle_conflict(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Conflict, params: dict
) -> None:
    resp.status = falcon.HTTP_409
    resp.media = {"error": str(ex)}


async def handle_persistence_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: PersistenceError, params: dict
) -> None:
    logger.error("Storage operation %s %s failed: %s", req.method, req.path, ex)
    resp.status = falcon.HTTP_503
    resp.media = {"error": str(ex), "details": {"kind": str(ex.kind)}}


async def handle_unexpected(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params: dict
) -> None:
    logger.exception("Unhandled error on %s %s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def create_app(
    roles_resource: RolesResource,
    role_resource: RoleResource,
    storage_resource: StorageResource,
    health_resource: HealthResource,
    middleware: list[Any] | None = None,
) -> App:
    """Create Falcon ASGI app with routes and domain error mapping."""
    app = falcon.asgi.App(middleware=middleware or [])

    app.add_error_handler(Exception, handle_unexpected)
    app.add_error_handler(ValidationError, handle_validation_error)
    app.add_error_handler(PermissionDenied, handle_permission_denied)
    app.add_error_handler(NotFound, handle_not_found)
    app.add_error_handler(Conflict, handle_conflict)
    app.add_error_handler(PersistenceError, handle_persistence_error)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/roles", roles_resource)
    app.add_route("/v1/roles/validate-inheritance", roles_resource, suffix="validate")
    app.add_route("/v1/roles/{role_name}", role_resource)
    app.add_route("/v1/roles/{role_name}/check", role_resource, suffix="check")
    app.add_route("/v1/roles/{role_name}/expand", role_resource, suffix="expand")
    app.add_route("/v1/storage/stats", storage_resource, suffix="stats")
    app.add_route("/v1/storage/persist", storage_resource, suffix="persist")
    app.add_route("/v1/storage/restore", storage_resource, suffix="restore")
    return app
