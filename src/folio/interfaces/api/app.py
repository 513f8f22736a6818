"""Falcon ASGI application."""

import logging

import falcon
import falcon.asgi
from falcon.asgi import App

from folio.domain.exceptions import NotFound, StoreFailure
from folio.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from folio.interfaces.api.resources.health import HealthResource

logger = logging.getLogger(__name__)


async def _handle_store_failure(req, resp, ex, params) -> None:
    logger.error("Store failure on %s %s: %s", req.method, req.path, ex)
    resp.status = falcon.HTTP_502
    resp.media = {"error": "Document store failure", "detail": str(ex)}


async def _handle_not_found(req, resp, ex, params) -> None:
    resp.status = falcon.HTTP_404
    resp.media = {"error": f"{ex.args[0]} not found", "id": ex.args[1] if len(ex.args) > 1 else None}


def create_app(
    documents_resource: DocumentsResource,
    document_resource: DocumentResource,
    health_resource: HealthResource,
    middleware: list | None = None,
) -> App:
    """Create Falcon ASGI app with routes."""
    app = falcon.asgi.App(middleware=middleware or [])
    app.add_error_handler(StoreFailure, _handle_store_failure)
    app.add_error_handler(NotFound, _handle_not_found)
    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/documents", documents_resource)
    app.add_route("/v1/documents/new-id", documents_resource, suffix="new_id")
    app.add_route("/v1/documents/{document_id}", document_resource)
    app.add_route("/v1/documents/{document_id}/events", document_resource, suffix="events")
    return app
