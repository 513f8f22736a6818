"""Health check endpoints."""

import falcon.asgi

from folio.application.repositories import DocumentRepository
from folio.domain.exceptions import StoreFailure


class HealthResource:
    """Health and readiness endpoints."""

    def __init__(self, documents: DocumentRepository | None = None) -> None:
        self._documents = documents

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness (document store reachable)."""
        if self._documents is not None:
            try:
                await self._documents.get_reference("_ready")
            except StoreFailure as e:
                resp.status = falcon.HTTP_503
                resp.media = {"status": "unavailable", "error": str(e)}
                return
        resp.media = {"status": "ready"}
        resp.status = falcon.HTTP_200
