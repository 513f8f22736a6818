"""In-memory document store for development and tests."""

import asyncio
import copy
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from folio.application.dto import DocumentSnapshot, FieldFilter, OrderBy, SortOrder
from folio.application.subscription import Subscription
from folio.domain.exceptions import StoreFailure
from folio.domain.value_objects import MISSING, SERVER_TIMESTAMP, Increment
from folio.infrastructure.persistence.ids import generate_document_id, split_path
from folio.infrastructure.persistence.ordering import sort_key

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False)
class _QueryWatch:
    collection: str
    filters: Sequence[FieldFilter]
    order_by: OrderBy | None
    start_after: DocumentSnapshot | None
    limit: int | None
    subscription: Subscription[list[DocumentSnapshot]]
    last: list[DocumentSnapshot] | None = None


@dataclass(eq=False)
class _DocumentWatch:
    subscription: Subscription[DocumentSnapshot | None]
    last: DocumentSnapshot | None = None
    delivered: bool = False


@dataclass(eq=False)
class InMemoryDocumentStore:
    """Dict-backed `DocumentStore`.

    Writes are applied atomically between suspension points, so increments
    from concurrent updates never interleave. Subscribers are notified after
    every commit that changes what they see.
    """

    clock: Callable[[], datetime] = _utcnow
    _documents: dict[str, dict[str, Any]] = field(default_factory=dict, init=False, repr=False)
    _document_watches: dict[str, list[_DocumentWatch]] = field(default_factory=dict, init=False, repr=False)
    _query_watches: list[_QueryWatch] = field(default_factory=list, init=False, repr=False)

    def generate_id(self) -> str:
        return generate_document_id()

    def server_timestamp(self) -> object:
        return SERVER_TIMESTAMP

    def increment(self, amount: int) -> object:
        return Increment(amount)

    async def write(self, path: str, fields: Mapping[str, Any]) -> None:
        await asyncio.sleep(0)
        self._documents[path] = self._resolve(fields, {}, self.clock())
        self._notify(path)

    async def patch(self, path: str, fields: Mapping[str, Any]) -> None:
        await asyncio.sleep(0)
        current = self._documents.get(path)
        if current is None:
            raise StoreFailure(f"No document to update: {path}")
        current.update(self._resolve(fields, current, self.clock()))
        self._notify(path)

    async def remove(self, path: str) -> None:
        await asyncio.sleep(0)
        if self._documents.pop(path, None) is not None:
            self._notify(path)

    async def read_once(self, path: str) -> DocumentSnapshot | None:
        await asyncio.sleep(0)
        return self._snapshot(path)

    def subscribe(self, path: str) -> Subscription[DocumentSnapshot | None]:
        watch = _DocumentWatch(Subscription(lambda: self._unwatch_document(path, watch)))
        self._document_watches.setdefault(path, []).append(watch)
        self._deliver_document(path, watch)
        return watch.subscription

    def subscribe_query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: OrderBy | None = None,
        start_after: DocumentSnapshot | None = None,
        limit: int | None = None,
    ) -> Subscription[list[DocumentSnapshot]]:
        watch = _QueryWatch(
            collection=collection.strip("/"),
            filters=tuple(filters),
            order_by=order_by,
            start_after=start_after,
            limit=limit,
            subscription=Subscription(lambda: self._query_watches.remove(watch)),
        )
        self._query_watches.append(watch)
        self._deliver_query(watch)
        return watch.subscription

    def documents(self) -> dict[str, dict[str, Any]]:
        """Copy of all stored documents keyed by path."""
        return copy.deepcopy(self._documents)

    def _resolve(
        self, fields: Mapping[str, Any], current: Mapping[str, Any], now: datetime
    ) -> dict[str, Any]:
        resolved: dict[str, Any] = {}
        for key, value in fields.items():
            if value is SERVER_TIMESTAMP:
                resolved[key] = now
            elif isinstance(value, Increment):
                resolved[key] = (current.get(key) or 0) + value.amount
            elif value is MISSING:
                raise StoreFailure(f"Unset value for field {key!r}")
            else:
                resolved[key] = copy.deepcopy(value)
        return resolved

    def _snapshot(self, path: str) -> DocumentSnapshot | None:
        fields = self._documents.get(path)
        if fields is None:
            return None
        return DocumentSnapshot(path=path, id=split_path(path)[1], fields=copy.deepcopy(fields))

    def _notify(self, path: str) -> None:
        for watch in list(self._document_watches.get(path, ())):
            self._deliver_document(path, watch)
        collection = split_path(path)[0]
        for watch in list(self._query_watches):
            if watch.collection == collection:
                self._deliver_query(watch)

    def _deliver_document(self, path: str, watch: _DocumentWatch) -> None:
        snapshot = self._snapshot(path)
        if watch.delivered and snapshot == watch.last:
            return
        watch.last, watch.delivered = snapshot, True
        watch.subscription.push(snapshot)

    def _deliver_query(self, watch: _QueryWatch) -> None:
        results = self._run_query(watch)
        if results == watch.last:
            return
        watch.last = results
        watch.subscription.push(results)

    def _run_query(self, watch: _QueryWatch) -> list[DocumentSnapshot]:
        matches = []
        for path in self._documents:
            if split_path(path)[0] != watch.collection:
                continue
            fields = self._documents[path]
            if all(fields.get(f.field, MISSING) == f.value for f in watch.filters):
                matches.append(self._snapshot(path))

        order_field = watch.order_by.field if watch.order_by else None
        if order_field is not None:
            matches = [s for s in matches if order_field in s.fields]
        descending = watch.order_by is not None and watch.order_by.sort_order == SortOrder.DESC

        def position(snapshot: DocumentSnapshot) -> tuple[Any, str]:
            value = snapshot.get(order_field) if order_field else None
            return (sort_key(value), snapshot.id)

        matches.sort(key=position, reverse=descending)
        if watch.start_after is not None:
            cursor = position(watch.start_after)
            if descending:
                matches = [s for s in matches if position(s) < cursor]
            else:
                matches = [s for s in matches if position(s) > cursor]
        if watch.limit is not None:
            matches = matches[: watch.limit]
        return matches

    def _unwatch_document(self, path: str, watch: _DocumentWatch) -> None:
        watches = self._document_watches.get(path, [])
        if watch in watches:
            watches.remove(watch)
        if not watches:
            self._document_watches.pop(path, None)
        logger.debug("Unsubscribed from %s", path)
