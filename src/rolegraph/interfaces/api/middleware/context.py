"""Context middleware - namespace, tenant and user from request headers."""

import logging
from dataclasses import dataclass

import falcon.asgi

logger = logging.getLogger(__name__)


@dataclass
class RequestScope:
    """Multi-tenancy context of one request."""

    namespace: str
    tenant_id: str | None = None
    user_id: str = "anonymous"


class ContextMiddleware:
    """Middleware that sets req.context.scope from X-Keto-Namespace, X-Tenant-Id, X-User-Id."""

    def __init__(self, default_namespace: str) -> None:
        self._default_namespace = default_namespace

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        scope = RequestScope(
            namespace=req.get_header("X-Keto-Namespace") or self._default_namespace,
            tenant_id=req.get_header("X-Tenant-Id") or None,
            user_id=req.get_header("X-User-Id") or "anonymous",
        )
        req.context.scope = scope
        logger.debug(
            "Request %s %s: namespace=%s tenant=%s user=%s",
            req.method,
            req.path,
            scope.namespace,
            scope.tenant_id,
            scope.user_id,
        )
