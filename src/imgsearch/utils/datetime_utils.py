"""Utility functions for working with dates and times."""

from datetime import MAXYEAR, UTC, datetime

__all__ = [
    "ensure_utc",
    "get_current_timestamp",
    "parse_timestamp",
    "to_naive_utc",
    "year_window",
]


def get_current_timestamp() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Naive datetimes are taken to already be in UTC; DuckDB ``TIMESTAMP``
    columns hand them back that way.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_naive_utc(value: datetime | None) -> datetime | None:
    """Convert to the naive UTC form stored in ``TIMESTAMP`` columns."""
    if value is None:
        return None
    return ensure_utc(value).replace(tzinfo=None)


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Parse an ISO-8601 string or pass a datetime through, always as UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return ensure_utc(value)


def year_window(year: int) -> tuple[datetime, datetime]:
    """Return ``[Jan 1 of year, Jan 1 of year + 1)`` in UTC."""
    start = datetime(year, 1, 1, tzinfo=UTC)
    if year == MAXYEAR:
        return start, datetime.max.replace(tzinfo=UTC)
    return start, datetime(year + 1, 1, 1, tzinfo=UTC)
