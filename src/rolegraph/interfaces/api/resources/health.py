"""Health check endpoints."""

import falcon.asgi

from rolegraph.application.ports import SnapshotStore


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(self, snapshot_store: SnapshotStore) -> None:
        self._store = snapshot_store

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness and persistence mode."""
        resp.media = {
            "status": "ready",
            "persistence": "file" if self._store.enabled else "memory-only",
        }
        resp.status = falcon.HTTP_200
