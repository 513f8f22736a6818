"""Pytest fixtures for Folio tests."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from folio.application.repositories import DocumentRepository, DocumentTypeRepository
from folio.domain.entities import DocumentType
from folio.domain.value_objects import SERVER_TIMESTAMP, DocumentStatus, Increment
from folio.infrastructure.persistence.memory.document_store import InMemoryDocumentStore
from folio.infrastructure.site.site_context import StaticSiteContext

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


class FixedClock:
    """Store clock that returns `now` and can be moved forward."""

    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


async def seed_document_type(store: InMemoryDocumentStore, document_type: DocumentType) -> None:
    """Store a document type record under the test site."""
    await store.write(
        f"tanam/site-1/document-types/{document_type.id}",
        {
            "id": document_type.id,
            "slug": document_type.slug,
            "standalone": document_type.standalone,
            "documentStatusDefault": str(document_type.document_status_default),
            "title": document_type.title,
            "description": document_type.description,
        },
    )


# --- Fixtures ---


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store(clock: FixedClock) -> InMemoryDocumentStore:
    """Fresh in-memory store for each test."""
    return InMemoryDocumentStore(clock=clock)


@pytest.fixture
def site_context() -> StaticSiteContext:
    return StaticSiteContext(root_collection="tanam", site_id="site-1")


@pytest.fixture
def documents(store: InMemoryDocumentStore, site_context: StaticSiteContext) -> DocumentRepository:
    return DocumentRepository(store, site_context)


@pytest.fixture
def document_types(
    store: InMemoryDocumentStore, site_context: StaticSiteContext
) -> DocumentTypeRepository:
    return DocumentTypeRepository(store, site_context)


@pytest.fixture
def blog_post_type() -> DocumentType:
    return DocumentType(
        id="blog-post",
        slug="blog",
        standalone=True,
        document_status_default=DocumentStatus.PUBLISHED,
        title="Blog post",
    )


@pytest.fixture
def event_type() -> DocumentType:
    return DocumentType(id="event", slug="/events/", standalone=False)


@pytest.fixture
def mock_store():
    """Store double that records calls; used to prove no store access happened."""
    mock = MagicMock()
    mock.generate_id.return_value = "generated-id"
    mock.server_timestamp.return_value = SERVER_TIMESTAMP
    mock.increment.side_effect = Increment
    mock.write = AsyncMock()
    mock.patch = AsyncMock()
    mock.remove = AsyncMock()
    mock.read_once = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def mock_documents(mock_store, site_context: StaticSiteContext) -> DocumentRepository:
    return DocumentRepository(mock_store, site_context)
