"""Document type repository - read-only access to a site's content schemas."""

from folio.application.dto import DocumentSnapshot
from folio.application.ports import DocumentStore, SiteContext
from folio.application.subscription import Stream
from folio.domain.entities import DocumentType


class DocumentTypeRepository:
    """Reads document types stored under the site root."""

    def __init__(self, store: DocumentStore, site_context: SiteContext) -> None:
        self._store = store
        self._collection = f"{site_context.root_path()}/document-types"

    async def get(self, document_type_id: str) -> DocumentType | None:
        if not document_type_id:
            return None
        snapshot = await self._store.read_once(f"{self._collection}/{document_type_id}")
        return _to_document_type(snapshot) if snapshot is not None else None

    def query(self) -> Stream[list[DocumentType]]:
        """Live list of all document types, ordered by id."""
        return self._store.subscribe_query(self._collection).map(
            lambda snapshots: [_to_document_type(s) for s in snapshots]
        )


def _to_document_type(snapshot: DocumentSnapshot) -> DocumentType:
    return DocumentType.from_fields(snapshot.id, snapshot.fields)
