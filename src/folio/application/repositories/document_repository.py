"""Document repository - lifecycle rules for site content documents."""

import logging
from datetime import UTC, datetime

from folio.application.dto import DocumentSnapshot, FieldFilter, QueryOptions
from folio.application.ports import DocumentStore, SiteContext
from folio.application.subscription import Stream
from folio.domain.entities import Document, DocumentType
from folio.domain.exceptions import InvalidArgument
from folio.domain.value_objects import MISSING, DocumentStatus, normalize_url

logger = logging.getLogger(__name__)

# Set once by create; never part of an update.
_CREATE_ONLY_FIELDS = ("created", "documentType", "standalone")


class DocumentRepository:
    """CRUD and live queries for the documents of one site."""

    def __init__(self, store: DocumentStore, site_context: SiteContext) -> None:
        self._store = store
        self._collection = f"{site_context.root_path()}/documents"

    @property
    def collection(self) -> str:
        return self._collection

    def _path(self, document_id: str) -> str:
        return f"{self._collection}/{document_id}"

    def get_new_id(self) -> str:
        """Fresh store-generated id. Creates nothing."""
        return self._store.generate_id()

    async def create(self, document_type: DocumentType, id: str | None = None) -> Document:
        """Write a new, empty document of the given type."""
        document_id = id or self.get_new_id()
        document = Document(
            id=document_id,
            document_type=document_type.id,
            title="",
            url=normalize_url(f"/{document_type.slug}/{document_id}"),
            revision=0,
            standalone=document_type.standalone,
            status=document_type.document_status_default,
            data={},
            tags=[],
        )
        timestamp = self._store.server_timestamp()
        fields = document.to_fields()
        fields["updated"] = timestamp
        fields["created"] = timestamp
        await self._store.write(self._path(document_id), fields)
        logger.info("Created document %s of type %s", document_id, document_type.id)
        return document

    async def update(self, document: Document) -> None:
        """Persist the caller's document state as a partial update.

        Status, url, published and data are normalized on `document` in
        place. The stored revision is incremented by the store.
        """
        if not document.id:
            raise InvalidArgument("Document ID must be provided when updating a document")

        document.status = DocumentStatus.derive(document.published, datetime.now(UTC))
        document.url = normalize_url(document.url or "/")
        document.published = document.published or None
        document.data = document.data or {}
        for key, value in document.data.items():
            if value is MISSING:
                document.data[key] = None

        fields = document.to_fields()
        for key in _CREATE_ONLY_FIELDS:
            fields.pop(key)
        fields["updated"] = self._store.server_timestamp()
        fields["revision"] = self._store.increment(1)

        await self._store.patch(self._path(document.id), fields)
        logger.debug("Updated document %s (status=%s)", document.id, document.status)

    async def delete(self, document_id: str) -> None:
        if not document_id:
            raise InvalidArgument("Document ID must be provided when deleting a document")
        await self._store.remove(self._path(document_id))
        logger.info("Deleted document %s", document_id)

    def get(self, document_id: str) -> Stream[Document | None]:
        """Live view of one document; `None` while it does not exist."""
        return self._store.subscribe(self._path(document_id)).map(_to_document)

    def query(
        self, document_type_id: str, options: QueryOptions | None = None
    ) -> Stream[list[Document]]:
        """Live result sets of the documents of one type.

        A limit of 0 means no cap; a negative limit is rejected before
        subscribing.
        """
        options = options or QueryOptions()
        if options.limit is not None and options.limit < 0:
            raise InvalidArgument("Query limit must not be negative")
        filters = [FieldFilter("documentType", document_type_id)]
        if options.status:
            filters.append(FieldFilter("status", str(options.status)))
        subscription = self._store.subscribe_query(
            self._collection,
            filters=filters,
            order_by=options.order_by,
            start_after=options.start_after,
            limit=options.limit or None,
        )
        return subscription.map(lambda snapshots: [s.to_document() for s in snapshots])

    async def get_reference(self, document_id: str) -> DocumentSnapshot | None:
        """One-shot read. Returns None for an empty id without reading."""
        if not document_id:
            return None
        return await self._store.read_once(self._path(document_id))


def _to_document(snapshot: DocumentSnapshot | None) -> Document | None:
    return snapshot.to_document() if snapshot is not None else None
