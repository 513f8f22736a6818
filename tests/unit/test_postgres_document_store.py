"""Unit tests for the PostgreSQL store: codec, query builder and SQL issued."""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from psycopg import AsyncConnection
from psycopg.types.json import Jsonb

from folio.application.dto import DocumentSnapshot, FieldFilter, OrderBy, SortOrder
from folio.domain.exceptions import StoreFailure
from folio.domain.value_objects import MISSING, SERVER_TIMESTAMP, Increment
from folio.infrastructure.persistence.postgres.codec import (
    decode_value,
    encode_value,
    resolve_timestamps,
)
from folio.infrastructure.persistence.postgres.document_store import (
    PostgresDocumentStore,
    build_query,
)

NOW = datetime(2026, 5, 4, 8, 0, tzinfo=UTC)


class TestCodec:
    def test_datetimes_are_tagged(self) -> None:
        encoded = encode_value({"published": NOW, "data": {"at": [NOW]}})

        assert encoded == {
            "published": {"$timestamp": NOW.isoformat()},
            "data": {"at": [{"$timestamp": NOW.isoformat()}]},
        }
        assert decode_value(encoded) == {"published": NOW, "data": {"at": [NOW]}}

    def test_plain_values_pass_through(self) -> None:
        value = {"title": "x", "revision": 3, "tags": ["a"], "published": None, "ok": True}
        assert decode_value(encode_value(value)) == value

    @pytest.mark.parametrize("value", [MISSING, SERVER_TIMESTAMP, Increment(1)])
    def test_unresolved_values_are_rejected(self, value) -> None:
        with pytest.raises(StoreFailure):
            encode_value({"field": value})

    def test_resolve_timestamps_uses_one_instant(self) -> None:
        resolved = resolve_timestamps(
            {"created": SERVER_TIMESTAMP, "updated": SERVER_TIMESTAMP, "title": "x"}, NOW
        )
        assert resolved == {"created": NOW, "updated": NOW, "title": "x"}


class TestBuildQuery:
    def test_collection_and_filters(self) -> None:
        q, params = build_query("tanam/s/documents", [FieldFilter("documentType", "blog")])

        assert q.startswith("SELECT path, doc_id, fields FROM store_document WHERE collection = %s")
        assert "fields -> %s::text = %s" in q
        assert q.endswith("ORDER BY doc_id ASC")
        assert params[0] == "tanam/s/documents"
        assert params[1] == "documentType"
        assert isinstance(params[2], Jsonb) and params[2].obj == "blog"

    def test_clause_order_with_cursor_and_limit(self) -> None:
        cursor = DocumentSnapshot(path="c/b", id="b", fields={"title": "m"})

        q, params = build_query(
            "c",
            [FieldFilter("documentType", "blog"), FieldFilter("status", "published")],
            order_by=OrderBy("title", SortOrder.DESC),
            start_after=cursor,
            limit=10,
        )

        assert "(fields -> %s::text, doc_id) < (%s, %s)" in q
        assert "ORDER BY fields -> %s::text DESC, doc_id DESC LIMIT %s" in q
        assert q.count("%s") == len(params)
        assert params[-2:] == ["title", 10]
        assert params[5:7] == ["title", "title"]
        assert params[7].obj == "m"
        assert params[8] == "b"

    def test_cursor_without_order_uses_document_id(self) -> None:
        cursor = DocumentSnapshot(path="c/b", id="b")

        q, params = build_query("c", start_after=cursor)

        assert "doc_id > %s" in q
        assert params == ["c", "b"]


def _pool_with(conn) -> MagicMock:
    """Pool double whose connection() yields the given connection."""
    pool = MagicMock()

    @asynccontextmanager
    async def connection():
        yield conn

    pool.connection = connection
    return pool


def _conn_for_patch(rowcount: int) -> MagicMock:
    now_cursor = MagicMock()
    now_cursor.fetchone = AsyncMock(return_value=(NOW,))
    conn = MagicMock()
    conn.execute = AsyncMock(side_effect=[now_cursor, MagicMock(rowcount=rowcount)])
    return conn


class TestPatch:
    @pytest.mark.asyncio
    async def test_increment_is_computed_in_update_statement(self) -> None:
        conn = _conn_for_patch(rowcount=1)
        store = PostgresDocumentStore(_pool_with(conn), conninfo="")

        await store.patch("c/a", {"title": "x", "revision": Increment(1)})

        q, params = conn.execute.await_args_list[1].args
        assert q == (
            "UPDATE store_document SET fields = "
            "jsonb_set(fields || %s, ARRAY[%s::text], "
            "to_jsonb(COALESCE((fields ->> %s::text)::bigint, 0) + %s)) "
            "WHERE path = %s"
        )
        assert isinstance(params[0], Jsonb) and params[0].obj == {"title": "x"}
        assert params[1:] == ["revision", "revision", 1, "c/a"]

    @pytest.mark.asyncio
    async def test_server_timestamp_uses_transaction_now(self) -> None:
        conn = _conn_for_patch(rowcount=1)
        store = PostgresDocumentStore(_pool_with(conn), conninfo="")

        await store.patch("c/a", {"updated": SERVER_TIMESTAMP})

        assert conn.execute.await_args_list[0].args == ("SELECT now()",)
        q, params = conn.execute.await_args_list[1].args
        assert q == "UPDATE store_document SET fields = fields || %s WHERE path = %s"
        assert params[0].obj == {"updated": {"$timestamp": NOW.isoformat()}}

    @pytest.mark.asyncio
    async def test_missing_row_raises_store_failure(self) -> None:
        conn = _conn_for_patch(rowcount=0)
        store = PostgresDocumentStore(_pool_with(conn), conninfo="")

        with pytest.raises(StoreFailure, match="c/a"):
            await store.patch("c/a", {"revision": Increment(1)})


class TestSubscribe:
    @pytest.mark.asyncio
    async def test_unexpected_error_fails_subscription(self, monkeypatch) -> None:
        listen_conn = MagicMock()
        listen_conn.__aenter__.return_value = listen_conn
        listen_conn.__aexit__.return_value = False
        listen_conn.execute = AsyncMock()
        monkeypatch.setattr(AsyncConnection, "connect", AsyncMock(return_value=listen_conn))
        read_conn = MagicMock()
        read_conn.execute = AsyncMock(side_effect=ValueError("bad row"))
        store = PostgresDocumentStore(_pool_with(read_conn), conninfo="")

        subscription = store.subscribe("c/a")

        with pytest.raises(StoreFailure, match="bad row"):
            await subscription.first()
