"""Point-in-time read of a stored document."""

from dataclasses import dataclass, field
from typing import Any

from folio.domain.entities import Document


@dataclass(frozen=True)
class DocumentSnapshot:
    """Fields of the document at `path` as of one read.

    Also serves as a query cursor: `start_after=snapshot` resumes a query
    after this document in the query's ordering.
    """

    path: str
    id: str
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def to_document(self) -> Document:
        return Document.from_fields({**self.fields, "id": self.id})
