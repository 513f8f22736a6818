"""Application ports - interfaces for external adapters."""

from folio.application.ports.document_store import DocumentStore
from folio.application.ports.site_context import SiteContext

__all__ = [
    "DocumentStore",
    "SiteContext",
]
