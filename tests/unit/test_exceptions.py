"""Unit tests for domain exceptions."""

import pytest

from folio.domain.exceptions import FolioError, InvalidArgument, NotFound, StoreFailure


@pytest.mark.parametrize("exc", [InvalidArgument, StoreFailure, NotFound])
def test_exceptions_inherit_folio_error(exc: type[Exception]) -> None:
    assert issubclass(exc, FolioError)


def test_invalid_argument_catchable_as_folio_error() -> None:
    with pytest.raises(FolioError):
        raise InvalidArgument("Document ID must be provided")


def test_exception_message_preserved() -> None:
    msg = "connection refused"
    with pytest.raises(StoreFailure, match=msg):
        raise StoreFailure(msg)
