"""Timeline bucket model: the photos of one calendar month."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class TimeBucket:
    """
    Photos taken in one calendar month.

    ``month`` is the first-of-month instant. Location and country labels are
    kept as insertion-ordered distinct values (dict keys) so serialization
    is stable across runs.
    """

    month: datetime
    items: list[Any] = field(default_factory=list)
    locations: dict[str, None] = field(default_factory=dict)
    countries: dict[str, None] = field(default_factory=dict)

    @property
    def photo_count(self) -> int:
        return len(self.items)

    def add(self, item: Any) -> None:
        self.items.append(item)

        location = getattr(item, "location", None)
        if location:
            self.locations.setdefault(location, None)

        country = getattr(item, "country", None)
        if country:
            self.countries.setdefault(country, None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month.isoformat(),
            "photos": [item.to_dict() if hasattr(item, "to_dict") else item for item in self.items],
            "locations": list(self.locations),
            "countries": list(self.countries),
            "photoCount": self.photo_count,
        }
