"""Unit tests for normalize_url."""

import pytest

from folio.domain.value_objects import normalize_url

PATHS = ["", "/", "//", "a", "/a", "a/b", "//a//b/", "///x///y///", "blog/post-1", "/events//2026/"]


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("", "/"),
        ("//a//b/", "/a/b/"),
        ("blog/abc", "/blog/abc"),
        ("/blog/abc", "/blog/abc"),
        ("///", "/"),
        ("//events///abc", "/events/abc"),
    ],
)
def test_normalize_url_examples(path: str, expected: str) -> None:
    assert normalize_url(path) == expected


@pytest.mark.parametrize("path", PATHS)
def test_normalize_url_single_leading_slash_and_no_runs(path: str) -> None:
    result = normalize_url(path)
    assert result.startswith("/")
    assert not result.startswith("//")
    assert "//" not in result


@pytest.mark.parametrize("path", PATHS)
def test_normalize_url_idempotent(path: str) -> None:
    assert normalize_url(normalize_url(path)) == normalize_url(path)
