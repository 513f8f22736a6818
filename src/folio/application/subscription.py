"""Cancellable push stream used for live document views."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from folio.domain.exceptions import StoreFailure

T = TypeVar("T")
U = TypeVar("U")

_END = object()


class _Failure:
    __slots__ = ("error",)

    def __init__(self, error: BaseException) -> None:
        self.error = error


class Stream(ABC, Generic[T]):
    """Consumer-side helpers shared by subscriptions and their mapped views."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop delivery; further iteration ends."""

    @abstractmethod
    async def __anext__(self) -> T:
        """Next value; StopAsyncIteration once ended or cancelled."""

    def __aiter__(self) -> "Stream[T]":
        return self

    async def __aenter__(self) -> "Stream[T]":
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.cancel()

    async def aclose(self) -> None:
        self.cancel()

    async def first(self) -> T:
        """Wait for the next value, then cancel."""
        try:
            return await self.__anext__()
        except StopAsyncIteration:
            raise StoreFailure("Subscription ended before delivering a value") from None
        finally:
            self.cancel()

    def map(self, fn: Callable[[T], U]) -> "Stream[U]":
        """View of this stream with `fn` applied to every value."""
        return _MappedStream(self, fn)


class Subscription(Stream[T]):
    """Live sequence of values pushed by a store.

    The producer calls `push`, `close` (source ended) or `fail` (source
    errored). The consumer iterates with `async for` and calls `cancel` to
    unregister; nothing is delivered after cancellation.
    """

    def __init__(self, on_cancel: Callable[[], Any] | None = None) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._on_cancel = on_cancel
        self._cancelled = False
        self._closed = False
        # Terminal item, kept so iteration after the end never blocks
        self._terminal: Any = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._closed)

    def push(self, value: T) -> None:
        if self.active:
            self._queue.put_nowait(value)

    def close(self) -> None:
        if self.active:
            self._closed = True
            self._queue.put_nowait(_END)

    def fail(self, error: BaseException) -> None:
        if self.active:
            self._closed = True
            self._queue.put_nowait(_Failure(error))

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._queue.put_nowait(_END)
        on_cancel, self._on_cancel = self._on_cancel, None
        if on_cancel is not None:
            on_cancel()

    async def __anext__(self) -> T:
        if self._cancelled:
            raise StopAsyncIteration
        item = self._terminal if self._terminal is not None else await self._queue.get()
        if self._cancelled:
            raise StopAsyncIteration
        if item is _END:
            self._terminal = item
            raise StopAsyncIteration
        if isinstance(item, _Failure):
            self._terminal = item
            raise item.error
        return item


class _MappedStream(Stream[U]):
    def __init__(self, source: Stream[Any], fn: Callable[[Any], U]) -> None:
        self._source = source
        self._fn = fn

    def cancel(self) -> None:
        self._source.cancel()

    async def __anext__(self) -> U:
        return self._fn(await self._source.__anext__())
