"""Publication status of a document."""

from datetime import UTC, datetime
from enum import StrEnum


class DocumentStatus(StrEnum):
    """Publication status, derived from the published timestamp."""

    UNPUBLISHED = "unpublished"
    SCHEDULED = "scheduled"
    PUBLISHED = "published"

    @classmethod
    def derive(cls, published: datetime | None, now: datetime) -> "DocumentStatus":
        """Status for a document with the given publish time, as seen at `now`.

        Naive datetimes are taken as UTC.
        """
        if published is None:
            return cls.UNPUBLISHED
        if published.tzinfo is None:
            published = published.replace(tzinfo=UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)
        if published > now:
            return cls.SCHEDULED
        return cls.PUBLISHED
