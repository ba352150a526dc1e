"""
Place cluster models.

GeoItem wraps anything with coordinates so the clustering code never has
to know about photos. Cluster keeps its members in arrival order; the
first member is the representative shown on maps.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..utils.datetime_utils import ensure_utc, get_current_timestamp


@dataclass(frozen=True)
class GeoItem:
    """A geotagged item with an opaque payload carried through clustering."""

    id: str
    latitude: float
    longitude: float
    payload: Any = None


@dataclass
class Cluster:
    """Non-empty group of geo items; ``items[0]`` is the seed."""

    items: list[GeoItem] = field(default_factory=list)

    @property
    def representative(self) -> GeoItem:
        return self.items[0]

    @property
    def item_ids(self) -> list[str]:
        return [item.id for item in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self, index: int, now: datetime | None = None) -> dict[str, Any]:
        """
        Serialize the cluster for display.

        The payloads are expected to look like PhotoRecord (``location``,
        ``date_taken`` and ``to_dict``); anything missing falls back
        gracefully. Missing dates in ``dateRange`` become ``now``.

        Args:
            index: Position of the cluster in the response, used for its ID
            now: Timestamp standing in for missing dates (defaults to current time)

        Returns:
            Dictionary with id, location, latitude, longitude, photos and dateRange
        """
        now = now or get_current_timestamp()
        seed = self.representative

        location = getattr(seed.payload, "location", None) or f"{seed.latitude}, {seed.longitude}"

        dates = sorted(
            ensure_utc(date_taken)
            for date_taken in (getattr(item.payload, "date_taken", None) for item in self.items)
            if date_taken is not None
        )

        return {
            "id": f"cluster-{index}",
            "location": location,
            "latitude": seed.latitude,
            "longitude": seed.longitude,
            "photos": [_payload_to_dict(item) for item in self.items],
            "dateRange": {
                "start": (dates[0] if dates else now).isoformat(),
                "end": (dates[-1] if dates else now).isoformat(),
            },
        }


def _payload_to_dict(item: GeoItem) -> Any:
    if hasattr(item.payload, "to_dict"):
        return item.payload.to_dict()
    if item.payload is None:
        return {"id": item.id, "latitude": item.latitude, "longitude": item.longitude}
    return item.payload
