"""CORS middleware for the role management UI."""

import falcon.asgi

ALLOWED_HEADERS = ", ".join(
    [
        "Authorization",
        "Content-Type",
        "X-Keto-Namespace",
        "X-Tenant-Id",
        "X-User-Id",
    ]
)


class CORSMiddleware:
    """Adds CORS headers and answers OPTIONS preflight.

    An origin list containing ``*`` allows any origin.
    """

    def __init__(self, origins: list[str]) -> None:
        self._origins = origins
        self._allow_any = "*" in origins

    def _allowed_origin(self, origin: str | None) -> str | None:
        if self._allow_any:
            return origin or "*"
        if origin and origin in self._origins:
            return origin
        return self._origins[0] if self._origins else None

    def _set_cors_headers(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        allowed = self._allowed_origin(req.get_header("Origin"))
        if allowed is None:
            return
        resp.set_header("Access-Control-Allow-Origin", allowed)
        resp.set_header("Vary", "Origin")
        resp.set_header("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS")
        resp.set_header("Access-Control-Allow-Headers", ALLOWED_HEADERS)
        resp.set_header("Access-Control-Max-Age", "86400")

    async def process_request(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        if req.method == "OPTIONS":
            self._set_cors_headers(req, resp)
            resp.status = falcon.HTTP_204
            resp.complete = True

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        self._set_cors_headers(req, resp)
