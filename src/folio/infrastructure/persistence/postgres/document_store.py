"""PostgreSQL document store implementation."""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import psycopg
from psycopg import AsyncConnection, sql
from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from folio.application.dto import DocumentSnapshot, FieldFilter, OrderBy, SortOrder
from folio.application.subscription import Subscription
from folio.domain.exceptions import StoreFailure
from folio.domain.value_objects import SERVER_TIMESTAMP, Increment
from folio.infrastructure.persistence.ids import generate_document_id, split_path
from folio.infrastructure.persistence.postgres.codec import (
    decode_value,
    encode_value,
    resolve_timestamps,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOTIFY_CHANNEL = "folio_store"


def build_query(
    collection: str,
    filters: Sequence[FieldFilter] = (),
    order_by: OrderBy | None = None,
    start_after: DocumentSnapshot | None = None,
    limit: int | None = None,
) -> tuple[str, list[Any]]:
    """SELECT for a filtered, ordered, paginated collection query.

    Rows are ordered by the order_by field, then by document id. The
    cursor is a row comparison against that same ordering.
    """
    conditions = ["collection = %s"]
    params: list[Any] = [collection]
    for f in filters:
        conditions.append("fields -> %s::text = %s")
        params.extend([f.field, Jsonb(encode_value(f.value))])

    descending = order_by is not None and order_by.sort_order == SortOrder.DESC
    direction = "DESC" if descending else "ASC"
    comparison = "<" if descending else ">"
    order_params: list[Any] = []
    if order_by is not None:
        conditions.append("fields ? %s::text")
        params.append(order_by.field)
        order = f"ORDER BY fields -> %s::text {direction}, doc_id {direction}"
        order_params.append(order_by.field)
        if start_after is not None:
            conditions.append(f"(fields -> %s::text, doc_id) {comparison} (%s, %s)")
            params.extend(
                [
                    order_by.field,
                    Jsonb(encode_value(start_after.get(order_by.field))),
                    start_after.id,
                ]
            )
    else:
        order = f"ORDER BY doc_id {direction}"
        if start_after is not None:
            conditions.append(f"doc_id {comparison} %s")
            params.append(start_after.id)

    q = (
        "SELECT path, doc_id, fields FROM store_document"
        f" WHERE {' AND '.join(conditions)} {order}"
    )
    params.extend(order_params)
    if limit is not None:
        q += " LIMIT %s"
        params.append(limit)
    return q, params


def _row_to_snapshot(r: tuple[Any, ...]) -> DocumentSnapshot:
    return DocumentSnapshot(path=r[0], id=r[1], fields=decode_value(r[2]))


class PostgresDocumentStore:
    """`DocumentStore` on a single JSONB table.

    Live subscriptions hold their own autocommit connection that LISTENs on
    the change channel fed by the table trigger; reads go through the pool.
    """

    def __init__(
        self,
        pool: AsyncConnectionPool,
        conninfo: str,
        channel: str = NOTIFY_CHANNEL,
    ) -> None:
        self._pool = pool
        self._conninfo = conninfo
        self._channel = channel

    def generate_id(self) -> str:
        return generate_document_id()

    def server_timestamp(self) -> object:
        return SERVER_TIMESTAMP

    def increment(self, amount: int) -> object:
        return Increment(amount)

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        """Pooled connection, one transaction. Driver errors become StoreFailure."""
        try:
            async with self._pool.connection() as conn:
                yield conn
        except psycopg.Error as e:
            raise StoreFailure(str(e)) from e

    async def _now(self, conn: AsyncConnection) -> Any:
        cur = await conn.execute("SELECT now()")
        r = await cur.fetchone()
        return r[0]

    async def write(self, path: str, fields: Mapping[str, Any]) -> None:
        """Create or replace the document at path."""
        collection, doc_id = split_path(path)
        async with self._connection() as conn:
            now = await self._now(conn)
            await conn.execute(
                "INSERT INTO store_document (path, collection, doc_id, fields) "
                "VALUES (%s, %s, %s, %s) "
                "ON CONFLICT (path) DO UPDATE SET fields = EXCLUDED.fields",
                (path, collection, doc_id, Jsonb(encode_value(resolve_timestamps(fields, now)))),
            )

    async def patch(self, path: str, fields: Mapping[str, Any]) -> None:
        """Merge top-level fields; increments are computed from the locked row."""
        increments = {k: v.amount for k, v in fields.items() if isinstance(v, Increment)}
        plain = {k: v for k, v in fields.items() if k not in increments}
        async with self._connection() as conn:
            now = await self._now(conn)
            expr = "fields || %s"
            params: list[Any] = [Jsonb(encode_value(resolve_timestamps(plain, now)))]
            for key, amount in increments.items():
                expr = (
                    f"jsonb_set({expr}, ARRAY[%s::text], "
                    "to_jsonb(COALESCE((fields ->> %s::text)::bigint, 0) + %s))"
                )
                params.extend([key, key, amount])
            params.append(path)
            cur = await conn.execute(
                f"UPDATE store_document SET fields = {expr} WHERE path = %s",
                params,
            )
            if cur.rowcount == 0:
                raise StoreFailure(f"No document to update: {path}")

    async def remove(self, path: str) -> None:
        async with self._connection() as conn:
            await conn.execute("DELETE FROM store_document WHERE path = %s", (path,))

    async def read_once(self, path: str) -> DocumentSnapshot | None:
        async with self._connection() as conn:
            cur = await conn.execute(
                "SELECT path, doc_id, fields FROM store_document WHERE path = %s",
                (path,),
            )
            r = await cur.fetchone()
        if not r:
            return None
        return _row_to_snapshot(r)

    async def _query(self, q: str, params: Sequence[Any]) -> list[DocumentSnapshot]:
        async with self._connection() as conn:
            cur = await conn.execute(q, params)
            rows = await cur.fetchall()
        return [_row_to_snapshot(r) for r in rows]

    def subscribe(self, path: str) -> Subscription[DocumentSnapshot | None]:
        """Live view of one document. Must be called with a running event loop."""
        return self._watch(lambda changed: changed == path, lambda: self.read_once(path))

    def subscribe_query(
        self,
        collection: str,
        filters: Sequence[FieldFilter] = (),
        order_by: OrderBy | None = None,
        start_after: DocumentSnapshot | None = None,
        limit: int | None = None,
    ) -> Subscription[list[DocumentSnapshot]]:
        """Live result sets of a collection query. Must be called with a running event loop."""
        collection = collection.strip("/")
        q, params = build_query(collection, filters, order_by, start_after, limit)
        return self._watch(
            lambda changed: split_path(changed)[0] == collection,
            lambda: self._query(q, params),
        )

    def _watch(
        self,
        affects: Callable[[str], bool],
        fetch: Callable[[], Awaitable[T]],
    ) -> Subscription[T]:
        task: asyncio.Task[None] | None = None

        def _cancel() -> None:
            if task is not None:
                task.cancel()

        subscription: Subscription[T] = Subscription(_cancel)
        task = asyncio.create_task(self._listen(subscription, affects, fetch))
        return subscription

    async def _listen(
        self,
        subscription: Subscription[T],
        affects: Callable[[str], bool],
        fetch: Callable[[], Awaitable[T]],
    ) -> None:
        """Deliver the current value, then a fresh one after each relevant change."""
        try:
            async with await AsyncConnection.connect(self._conninfo, autocommit=True) as conn:
                await conn.execute(sql.SQL("LISTEN {}").format(sql.Identifier(self._channel)))
                last = await fetch()
                subscription.push(last)
                async for notify in conn.notifies():
                    if not affects(notify.payload):
                        continue
                    value = await fetch()
                    if value != last:
                        last = value
                        subscription.push(value)
            subscription.close()
        except psycopg.Error as e:
            logger.warning("Subscription on channel %s failed: %s", self._channel, e)
            subscription.fail(StoreFailure(str(e)))
        except StoreFailure as e:
            logger.warning("Subscription on channel %s failed: %s", self._channel, e)
            subscription.fail(e)
        except Exception as e:
            logger.exception("Subscription on channel %s failed", self._channel)
            subscription.fail(StoreFailure(str(e)))
