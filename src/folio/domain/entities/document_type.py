"""Document type entity."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from folio.domain.value_objects import DocumentStatus


@dataclass(frozen=True)
class DocumentType:
    """Content schema that documents are created from. Read-only here."""

    id: str
    slug: str
    standalone: bool = False
    document_status_default: DocumentStatus = DocumentStatus.UNPUBLISHED
    title: str = ""
    description: str = ""

    @classmethod
    def from_fields(cls, document_type_id: str, fields: Mapping[str, Any]) -> "DocumentType":
        """Build from stored (camelCase) fields."""
        return cls(
            id=document_type_id,
            slug=fields.get("slug") or document_type_id,
            standalone=bool(fields.get("standalone", False)),
            document_status_default=DocumentStatus(
                fields.get("documentStatusDefault") or DocumentStatus.UNPUBLISHED
            ),
            title=fields.get("title") or "",
            description=fields.get("description") or "",
        )
