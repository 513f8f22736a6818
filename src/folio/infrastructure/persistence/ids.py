"""Document id generation and path helpers shared by store adapters."""

import secrets
import string

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 20


def generate_document_id() -> str:
    """Random 20-character alphanumeric id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


def split_path(path: str) -> tuple[str, str]:
    """Split a document path into (collection path, document id)."""
    collection, _, document_id = path.strip("/").rpartition("/")
    return collection, document_id
