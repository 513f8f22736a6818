"""Sentinels and write-time instructions understood by the document store."""

from dataclasses import dataclass


class _Sentinel:
    """Named singleton marker."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    def __repr__(self) -> str:
        return self._name


# A key that is declared but has no value yet. Never persisted.
MISSING = _Sentinel("MISSING")

# Replaced by the store's commit time when the write is applied.
SERVER_TIMESTAMP = _Sentinel("SERVER_TIMESTAMP")


@dataclass(frozen=True)
class Increment:
    """Atomically add `amount` to the stored numeric value (0 when absent)."""

    amount: int = 1
