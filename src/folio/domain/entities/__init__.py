"""Domain entities."""

from folio.domain.entities.document import Document
from folio.domain.entities.document_type import DocumentType

__all__ = [
    "Document",
    "DocumentType",
]
