"""Application DTOs."""

from folio.application.dto.query import FieldFilter, OrderBy, QueryOptions, SortOrder
from folio.application.dto.snapshot import DocumentSnapshot

__all__ = [
    "DocumentSnapshot",
    "FieldFilter",
    "OrderBy",
    "QueryOptions",
    "SortOrder",
]
