"""Document API resources."""

import json
from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any

import falcon.asgi

from folio.application.dto import OrderBy, QueryOptions, SortOrder
from folio.application.repositories import DocumentRepository, DocumentTypeRepository
from folio.application.subscription import Stream
from folio.domain.entities import Document
from folio.domain.exceptions import InvalidArgument, NotFound
from folio.domain.value_objects import DocumentStatus

MAX_LIMIT = 100


def _sse_event(event: str, data: dict | None) -> bytes:
    """Format one Server-Sent Event (event + data)."""
    payload = json.dumps(data, ensure_ascii=False)
    return f"event: {event}\ndata: {payload}\n\n".encode("utf-8")


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError("published must be an ISO 8601 string or null")
    return datetime.fromisoformat(value)


def _document_to_dict(d: Document) -> dict:
    return {
        "id": d.id,
        "documentType": d.document_type,
        "title": d.title,
        "url": d.url,
        "revision": d.revision,
        "standalone": d.standalone,
        "status": str(d.status),
        "published": _isoformat(d.published),
        "data": {k: _isoformat(v) if isinstance(v, datetime) else v for k, v in d.data.items()},
        "tags": d.tags,
        "updated": _isoformat(d.updated),
        "created": _isoformat(d.created),
    }


def _document_from_body(document_id: str, body: dict) -> Document:
    """Caller-editable state of a document; status and revision are not read."""
    data = body.get("data") or {}
    tags = body.get("tags") or []
    if not isinstance(data, dict) or not isinstance(tags, list):
        raise ValueError("data must be an object and tags a list")
    return Document(
        id=document_id,
        document_type=body.get("documentType") or "",
        title=body.get("title") or "",
        url=body.get("url") or "",
        standalone=bool(body.get("standalone", False)),
        published=_parse_datetime(body.get("published")),
        data=data,
        tags=[str(t) for t in tags],
    )


class DocumentsResource:
    """GET/POST /v1/documents - query and create documents."""

    def __init__(
        self, documents: DocumentRepository, document_types: DocumentTypeRepository
    ) -> None:
        self._documents = documents
        self._document_types = document_types

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Current result set of a document query."""
        document_type_id = req.get_param("documentType")
        if not document_type_id:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "documentType query parameter required"}
            return

        try:
            status = req.get_param("status")
            sort_order = req.get_param("sortOrder") or SortOrder.ASC
            order_field = req.get_param("orderBy")
            options = QueryOptions(
                status=DocumentStatus(status) if status else None,
                order_by=OrderBy(order_field, SortOrder(sort_order)) if order_field else None,
                limit=req.get_param_as_int("limit", min_value=1, max_value=MAX_LIMIT),
            )
        except ValueError as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        start_after = req.get_param("startAfter")
        if start_after:
            options.start_after = await self._documents.get_reference(start_after)
            if options.start_after is None:
                resp.status = falcon.HTTP_400
                resp.media = {"error": f"Unknown startAfter document: {start_after}"}
                return

        items = await self._documents.query(document_type_id, options).first()
        resp.media = {"items": [_document_to_dict(d) for d in items]}
        resp.status = falcon.HTTP_200

    async def on_get_new_id(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/documents/new-id - reserve nothing, just hand out an id."""
        resp.media = {"id": self._documents.get_new_id()}
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create an empty document of a type."""
        try:
            body = await req.get_media()
            document_type_id = body["documentType"]
            document_id = body.get("id") or None
        except (KeyError, TypeError, AttributeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": f"documentType required ({e})"}
            return

        document_type = await self._document_types.get(document_type_id)
        if document_type is None:
            raise NotFound("Document type", document_type_id)

        document = await self._documents.create(document_type, document_id)
        resp.media = _document_to_dict(document)
        resp.status = falcon.HTTP_201


class DocumentResource:
    """GET/PUT/DELETE /v1/documents/{id}."""

    def __init__(self, documents: DocumentRepository) -> None:
        self._documents = documents

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        snapshot = await self._documents.get_reference(document_id)
        if snapshot is None:
            raise NotFound("Document", document_id)
        resp.media = _document_to_dict(snapshot.to_document())
        resp.status = falcon.HTTP_200

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        try:
            body = await req.get_media()
            document = _document_from_body(document_id, body)
        except (ValueError, TypeError, AttributeError) as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return

        try:
            await self._documents.update(document)
        except InvalidArgument as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.status = falcon.HTTP_204

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        try:
            await self._documents.delete(document_id)
        except InvalidArgument as e:
            resp.status = falcon.HTTP_400
            resp.media = {"error": str(e)}
            return
        resp.status = falcon.HTTP_204

    async def on_get_events(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, document_id: str
    ) -> None:
        """GET /v1/documents/{id}/events - live view as Server-Sent Events."""
        resp.status = falcon.HTTP_200
        resp.content_type = "text/event-stream"
        resp.cache_control = ["no-store"]
        resp.stream = self._stream_document_events(self._documents.get(document_id))

    async def _stream_document_events(
        self, stream: Stream[Document | None]
    ) -> AsyncIterator[bytes]:
        """Async generator yielding one `document` or `absent` event per change."""
        async with stream:
            async for document in stream:
                if document is None:
                    yield _sse_event("absent", None)
                else:
                    yield _sse_event("document", _document_to_dict(document))
