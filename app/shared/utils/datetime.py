"""UTC datetime helpers. All datetimes in the service are timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Return the current UTC datetime with timezone info.

    Use instead of datetime.utcnow(), which is naive and deprecated.
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize a datetime to UTC-aware.

    Naive values are assumed to be UTC; aware values are converted.
    Used at the persistence boundary before datetimes leave a repository.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def avatar_timestamp(dt: datetime | None = None) -> str:
    """Filesystem-safe UTC timestamp used to name uploaded avatar files."""
    return (dt or utc_now()).strftime("%Y-%m-%dT%H-%M-%S-%f")
