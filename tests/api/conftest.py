"""Fixtures for API tests."""

import asyncio

import pytest

from folio.interfaces.api.app import create_app
from folio.interfaces.api.middleware.cors import CORSMiddleware
from folio.interfaces.api.resources.documents import DocumentResource, DocumentsResource
from folio.interfaces.api.resources.health import HealthResource

from tests.conftest import seed_document_type


@pytest.fixture
def app(store, documents, document_types, blog_post_type, event_type):
    """Falcon ASGI app over the in-memory store, with two document types."""
    for document_type in (blog_post_type, event_type):
        asyncio.run(seed_document_type(store, document_type))

    return create_app(
        documents_resource=DocumentsResource(documents, document_types),
        document_resource=DocumentResource(documents),
        health_resource=HealthResource(documents),
        middleware=[CORSMiddleware(["http://admin.example"])],
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    from falcon.testing import TestClient
    return TestClient(app)
