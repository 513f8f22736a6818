"""Document URL normalization."""

import re

_SLASHES = re.compile(r"/+")


def normalize_url(url: str) -> str:
    """Prefix with '/' and collapse every run of slashes into one.

    >>> normalize_url("//a//b/")
    '/a/b/'
    """
    return _SLASHES.sub("/", f"/{url}")
