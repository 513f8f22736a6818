"""Value ordering for store queries: null < bool < number < timestamp < string < other.

Naive timestamps are taken as UTC, as in DocumentStatus.derive.
"""

from datetime import UTC, datetime
from typing import Any


def sort_key(value: Any) -> tuple[int, Any]:
    """Key that orders values of mixed types without raising."""
    if value is None:
        return (0, 0)
    if isinstance(value, bool):
        return (1, value)
    if isinstance(value, int | float):
        return (2, value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return (3, value.timestamp())
    if isinstance(value, str):
        return (4, value)
    return (5, repr(value))
