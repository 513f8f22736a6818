"""Unit tests for DocumentStatus.derive."""

from datetime import UTC, datetime, timedelta

from folio.domain.value_objects import DocumentStatus

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=UTC)


def test_no_published_time_is_unpublished() -> None:
    assert DocumentStatus.derive(None, NOW) == DocumentStatus.UNPUBLISHED


def test_future_published_time_is_scheduled() -> None:
    assert DocumentStatus.derive(NOW + timedelta(seconds=1), NOW) == DocumentStatus.SCHEDULED


def test_published_time_equal_to_now_is_published() -> None:
    assert DocumentStatus.derive(NOW, NOW) == DocumentStatus.PUBLISHED


def test_past_published_time_is_published() -> None:
    assert DocumentStatus.derive(NOW - timedelta(days=30), NOW) == DocumentStatus.PUBLISHED


def test_naive_published_time_taken_as_utc() -> None:
    naive_future = datetime(2026, 3, 1, 10, 0)
    assert DocumentStatus.derive(naive_future, NOW) == DocumentStatus.SCHEDULED


def test_status_values_are_strings() -> None:
    assert DocumentStatus("scheduled") is DocumentStatus.SCHEDULED
    assert str(DocumentStatus.PUBLISHED) == "published"
