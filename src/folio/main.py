"""Application entry point and composition root."""

import logging

from folio import __version__
from folio.application.ports import DocumentStore
from folio.application.repositories import DocumentRepository, DocumentTypeRepository
from folio.config import Settings, get_settings
from folio.infrastructure.persistence.memory.document_store import InMemoryDocumentStore
from folio.infrastructure.persistence.postgres.connection import create_pool
from folio.infrastructure.persistence.postgres.document_store import PostgresDocumentStore
from folio.infrastructure.site.site_context import StaticSiteContext
from folio.interfaces.api.app import create_app
from folio.interfaces.api.middleware.cors import CORSMiddleware
from folio.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from folio.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from folio.interfaces.api.resources.health import HealthResource

logger = logging.getLogger(__name__)


def main() -> None:
    """CLI entry point."""
    print(f"Folio v{__version__}")


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_folio_app():
    """Composition root - build Falcon app with all dependencies."""
    settings = get_settings()
    configure_logging(settings)

    middleware: list = []
    store: DocumentStore
    if settings.store_backend == "memory":
        store = InMemoryDocumentStore()
    else:
        pool = create_pool(settings.database_url)
        store = PostgresDocumentStore(pool, conninfo=settings.database_url)
        middleware.append(PoolLifespanMiddleware(pool))
    logger.info(
        "Folio v%s: site %s/%s on %s store",
        __version__,
        settings.root_collection,
        settings.site_id,
        settings.store_backend,
    )

    site_context = StaticSiteContext(settings.root_collection, settings.site_id)
    documents = DocumentRepository(store, site_context)
    document_types = DocumentTypeRepository(store, site_context)

    cors_origins = [
        o.strip() for o in settings.cors_origins.split(",") if o.strip()
    ]
    return create_app(
        documents_resource=DocumentsResource(documents, document_types),
        document_resource=DocumentResource(documents),
        health_resource=HealthResource(documents),
        middleware=[CORSMiddleware(cors_origins), *middleware],
    )


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_folio_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
