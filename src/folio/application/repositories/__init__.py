"""Repositories."""

from folio.application.repositories.document_repository import DocumentRepository
from folio.application.repositories.document_type_repository import (
    DocumentTypeRepository,
)

__all__ = [
    "DocumentRepository",
    "DocumentTypeRepository",
]
