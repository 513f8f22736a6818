"""Document store port - hierarchical, schema-less persistence."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from folio.application.dto import DocumentSnapshot, FieldFilter, OrderBy
from folio.application.subscription import Subscription


class DocumentStore(Protocol):
    """Port for the document store.

    Paths are slash-separated, alternating collection and document ids
    (``tanam/site-1/documents/abc``). Write methods accept the
    instructions returned by `server_timestamp` and `increment` as field
    values; the store resolves them at commit time. Failures are raised
    as `StoreFailure`.
    """

    def generate_id(self) -> str: ...

    def server_timestamp(self) -> object: ...

    def increment(self, amount: int) -> object: ...

    async def write(self, path: str, fields: Mapping[str, Any]) -> None: ...

    async def patch(self, path: str, fields: Mapping[str, Any]) -> None: ...

    async def remove(self, path: str) -> None: ...

    async def read_once(self, path: str) -> DocumentSnapshot | None: ...

    def subscribe(self, path: str) -> Subscription[DocumentSnapshot | None]: ...

    def subscribe_query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: OrderBy | None = None,
        start_after: DocumentSnapshot | None = None,
        limit: int | None = None,
    ) -> Subscription[list[DocumentSnapshot]]: ...
