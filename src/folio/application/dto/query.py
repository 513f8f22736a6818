"""Query DTOs."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from folio.application.dto.snapshot import DocumentSnapshot
from folio.domain.value_objects import DocumentStatus


class SortOrder(StrEnum):
    """Sort direction for ordered queries."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class FieldFilter:
    """Equality filter on a top-level field."""

    field: str
    value: Any


@dataclass(frozen=True)
class OrderBy:
    """Ordering clause."""

    field: str
    sort_order: SortOrder = SortOrder.ASC


@dataclass
class QueryOptions:
    """Optional clauses for a document query."""

    status: DocumentStatus | None = None
    order_by: OrderBy | None = None
    start_after: DocumentSnapshot | None = None
    limit: int | None = None
