"""Site context port."""

from typing import Protocol


class SiteContext(Protocol):
    """Resolves the store path of the current site's root record."""

    def root_path(self) -> str: ...
