"""JSON encoding of store fields for the JSONB column."""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from folio.domain.exceptions import StoreFailure
from folio.domain.value_objects import MISSING, SERVER_TIMESTAMP, Increment

TIMESTAMP_KEY = "$timestamp"


def encode_value(value: Any) -> Any:
    """Python value -> JSON-compatible value. Datetimes become tagged objects."""
    if isinstance(value, datetime):
        return {TIMESTAMP_KEY: value.isoformat()}
    if isinstance(value, Mapping):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple | set | frozenset):
        return [encode_value(v) for v in value]
    if value is MISSING or value is SERVER_TIMESTAMP or isinstance(value, Increment):
        raise StoreFailure(f"Cannot store unresolved value {value!r}")
    return value


def decode_value(value: Any) -> Any:
    """Inverse of `encode_value`."""
    if isinstance(value, dict):
        if len(value) == 1 and TIMESTAMP_KEY in value:
            return datetime.fromisoformat(value[TIMESTAMP_KEY])
        return {k: decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [decode_value(v) for v in value]
    return value


def resolve_timestamps(fields: Mapping[str, Any], now: datetime) -> dict[str, Any]:
    """Replace server timestamp instructions with the commit time."""
    return {k: now if v is SERVER_TIMESTAMP else v for k, v in fields.items()}
