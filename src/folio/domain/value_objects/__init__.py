"""Domain value objects."""

from folio.domain.value_objects.document_status import DocumentStatus
from folio.domain.value_objects.field_values import MISSING, SERVER_TIMESTAMP, Increment
from folio.domain.value_objects.url import normalize_url

__all__ = [
    "MISSING",
    "SERVER_TIMESTAMP",
    "DocumentStatus",
    "Increment",
    "normalize_url",
]
