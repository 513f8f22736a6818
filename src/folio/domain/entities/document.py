"""Document entity."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from folio.domain.value_objects import DocumentStatus


@dataclass
class Document:
    """Content document scoped to a site.

    `status` is derived from `published` on every update and `revision` is
    counted by the store, so neither is meant to be set by callers.
    """

    id: str
    document_type: str = ""
    title: str = ""
    url: str = ""
    revision: int = 0
    standalone: bool = False
    status: DocumentStatus = DocumentStatus.UNPUBLISHED
    published: datetime | None = None
    data: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    updated: datetime | None = None
    created: datetime | None = None

    def to_fields(self) -> dict[str, Any]:
        """Stored representation (camelCase keys)."""
        return {
            "id": self.id,
            "documentType": self.document_type,
            "title": self.title,
            "url": self.url,
            "revision": self.revision,
            "standalone": self.standalone,
            "status": str(self.status),
            "published": self.published,
            "data": self.data,
            "tags": list(self.tags),
            "updated": self.updated,
            "created": self.created,
        }

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "Document":
        """Build from a stored mapping. Unknown keys are ignored."""
        return cls(
            id=fields["id"],
            document_type=fields.get("documentType", ""),
            title=fields.get("title") or "",
            url=fields.get("url") or "",
            revision=fields.get("revision") or 0,
            standalone=bool(fields.get("standalone", False)),
            status=DocumentStatus(fields.get("status") or DocumentStatus.UNPUBLISHED),
            published=fields.get("published"),
            data=dict(fields.get("data") or {}),
            tags=list(fields.get("tags") or []),
            updated=fields.get("updated"),
            created=fields.get("created"),
        )
