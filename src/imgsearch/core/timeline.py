"""Monthly travel timeline for one year."""

from collections.abc import Iterable
from datetime import MAXYEAR, MINYEAR, UTC, datetime
from typing import Protocol

from ..models.timeline import TimeBucket
from ..utils.datetime_utils import ensure_utc, year_window


class DatedItem(Protocol):
    """Anything with a capture date and optional location labels."""

    date_taken: datetime | None
    location: str | None
    country: str | None


def aggregate_timeline(items: Iterable[DatedItem], year: int) -> list[TimeBucket]:
    """
    Bucket items by calendar month of ``year``.

    Items without a date or dated outside the year are skipped. Buckets are
    returned in the order their first item was seen, so a chronologically
    sorted input gives a chronological timeline.

    Args:
        items: DatedItem-like objects, normally pre-filtered to the year
        year: Target calendar year

    Returns:
        Non-empty month buckets
    """
    if not MINYEAR <= year <= MAXYEAR:
        return []

    start, end = year_window(year)
    buckets: dict[int, TimeBucket] = {}

    for item in items:
        date_taken = getattr(item, "date_taken", None)
        if date_taken is None:
            continue

        date_taken = ensure_utc(date_taken)
        if not start <= date_taken < end:
            continue

        bucket = buckets.get(date_taken.month)
        if bucket is None:
            bucket = TimeBucket(month=datetime(year, date_taken.month, 1, tzinfo=UTC))
            buckets[date_taken.month] = bucket

        bucket.add(item)

    return list(buckets.values())
