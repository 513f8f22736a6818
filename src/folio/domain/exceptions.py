"""Domain exceptions."""


class FolioError(Exception):
    """Base exception for Folio."""

    pass


class InvalidArgument(FolioError):
    """A required argument was missing or empty."""

    pass


class StoreFailure(FolioError):
    """The document store failed to complete a read, write or subscription."""

    pass


class NotFound(FolioError):
    """Requested resource was not found."""

    pass
