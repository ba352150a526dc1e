"""
Unit tests for GeoItem and Cluster models.
"""

from datetime import UTC, datetime

from imgsearch.models.cluster import Cluster, GeoItem

from ...factories import make_photo

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


def geo(photo) -> GeoItem:
    return GeoItem(id=photo.id, latitude=photo.latitude, longitude=photo.longitude, payload=photo)


class TestCluster:
    """Test cases for Cluster."""

    def test_representative_is_first_item(self):
        """The seed represents the cluster."""
        first = GeoItem(id="a", latitude=1.0, longitude=2.0)
        second = GeoItem(id="b", latitude=1.001, longitude=2.001)

        cluster = Cluster(items=[first, second])

        assert cluster.representative is first
        assert cluster.item_ids == ["a", "b"]
        assert len(cluster) == 2

    def test_to_dict(self):
        """Clusters serialize with id, location, coordinates, photos and date range."""
        first = make_photo(
            "paris-1",
            latitude=48.8584,
            longitude=2.2945,
            location="Eiffel Tower, Paris",
            date_taken=datetime(2023, 7, 15, tzinfo=UTC),
        )
        second = make_photo(
            "paris-2",
            latitude=48.8590,
            longitude=2.2950,
            location="Champ de Mars, Paris",
            date_taken=datetime(2023, 7, 14, tzinfo=UTC),
        )

        result = Cluster(items=[geo(first), geo(second)]).to_dict(3, now=NOW)

        assert result["id"] == "cluster-3"
        assert result["location"] == "Eiffel Tower, Paris"
        assert result["latitude"] == 48.8584
        assert result["longitude"] == 2.2945
        assert [photo["id"] for photo in result["photos"]] == ["paris-1", "paris-2"]
        assert result["dateRange"] == {
            "start": "2023-07-14T00:00:00+00:00",
            "end": "2023-07-15T00:00:00+00:00",
        }

    def test_to_dict_without_dates_uses_now(self):
        """A cluster with no dated photos spans 'now'."""
        photo = make_photo("p", latitude=1.0, longitude=2.0, location="Somewhere")

        result = Cluster(items=[geo(photo)]).to_dict(0, now=NOW)

        assert result["dateRange"] == {"start": NOW.isoformat(), "end": NOW.isoformat()}

    def test_to_dict_location_falls_back_to_coordinates(self):
        """Without a location label the seed coordinates are shown."""
        photo = make_photo("p", latitude=1.5, longitude=-2.25)

        result = Cluster(items=[geo(photo)]).to_dict(0, now=NOW)

        assert result["location"] == "1.5, -2.25"

    def test_to_dict_plain_payloads(self):
        """Non-photo payloads are passed through, missing payloads become coordinates."""
        items = [
            GeoItem(id="a", latitude=1.0, longitude=2.0, payload={"name": "a"}),
            GeoItem(id="b", latitude=1.0, longitude=2.0),
        ]

        result = Cluster(items=items).to_dict(0, now=NOW)

        assert result["photos"] == [{"name": "a"}, {"id": "b", "latitude": 1.0, "longitude": 2.0}]
