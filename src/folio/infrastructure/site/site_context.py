"""Site context from configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StaticSiteContext:
    """Site root fixed for the lifetime of the process: `<root_collection>/<site_id>`."""

    root_collection: str
    site_id: str

    def __post_init__(self) -> None:
        if not self.root_collection or not self.site_id:
            raise ValueError("root_collection and site_id are required")
        if "/" in self.root_collection or "/" in self.site_id:
            raise ValueError("root_collection and site_id must not contain '/'")

    def root_path(self) -> str:
        return f"{self.root_collection}/{self.site_id}"
