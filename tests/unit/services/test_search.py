"""
Unit tests for the search orchestrator.
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest

from imgsearch.errors import DatabaseError, SearchError, ValidationError
from imgsearch.models.filters import FilterPredicate
from imgsearch.models.photo import FaceGroup
from imgsearch.services.search import SearchResult, SearchService, get_search_service

from ...factories import TEST_USER_ID, TODAY, make_photo

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_store():
    """Photo store double returning nothing by default."""
    store = MagicMock()
    store.user_id = TEST_USER_ID
    store.find_photos.return_value = []
    store.count_photos.return_value = 0
    store.find_face_groups_by_name.return_value = []
    store.get_photos_with_location.return_value = []
    store.get_photos_in_range.return_value = []
    return store


@pytest.fixture
def service(mock_store):
    return SearchService(mock_store, page_size=20, max_page_size=100)


class TestSearch:
    """Test cases for SearchService.search."""

    def test_search_passes_parsed_filters_to_store(self, service, mock_store):
        """The parsed predicate is evaluated by the store."""
        mock_store.find_photos.return_value = [make_photo("nice-1")]
        mock_store.count_photos.return_value = 1

        result = service.search("beach in nice", today=TODAY)

        predicate = mock_store.find_photos.call_args.args[0]
        assert predicate.location_substring == "nice"
        assert predicate.tags == ("beach",)
        assert mock_store.find_photos.call_args.kwargs == {"limit": 20, "offset": 0}
        assert [photo.id for photo in result.photos] == ["nice-1"]
        assert result.total == 1

    def test_pagination_offset(self, service, mock_store):
        """Page and limit translate into an offset."""
        service.search("sunset", page=3, limit=10, today=TODAY)

        assert mock_store.find_photos.call_args.kwargs == {"limit": 10, "offset": 20}

    def test_person_resolved_to_face_groups(self, service, mock_store):
        """A person reference is resolved to face group IDs."""
        mock_store.find_face_groups_by_name.return_value = [
            FaceGroup(id="fg-sarah", user_id=TEST_USER_ID, name="Sarah")
        ]

        result = service.search("beach with my sarah", today=TODAY)

        mock_store.find_face_groups_by_name.assert_called_once_with("sarah")
        assert mock_store.find_photos.call_args.args[1] == ["fg-sarah"]
        assert result.unresolved_person is None
        assert [group.id for group in result.resolved_people] == ["fg-sarah"]

    def test_unresolved_person_does_not_filter(self, service, mock_store):
        """An unknown person is reported and ignored."""
        result = service.search("beach with my cousin", today=TODAY)

        assert mock_store.find_photos.call_args.args[1] is None
        assert result.unresolved_person == "cousin"

    def test_no_person_skips_lookup(self, service, mock_store):
        """Queries without a person never touch face groups."""
        service.search("sunset", today=TODAY)

        mock_store.find_face_groups_by_name.assert_not_called()

    @pytest.mark.parametrize("query", ["", "   ", None])
    def test_blank_query_rejected(self, service, query):
        """A blank query is a validation error."""
        with pytest.raises(ValidationError) as exc_info:
            service.search(query)

        assert exc_info.value.code == "query_required"

    def test_invalid_page(self, service):
        """Pages start at 1."""
        with pytest.raises(ValidationError) as exc_info:
            service.search("sunset", page=0)

        assert exc_info.value.code == "invalid_page"

    @pytest.mark.parametrize("limit", [0, 101])
    def test_invalid_limit(self, service, limit):
        """Limits must be between 1 and the maximum page size."""
        with pytest.raises(ValidationError) as exc_info:
            service.search("sunset", limit=limit)

        assert exc_info.value.code == "invalid_limit"

    def test_store_errors_propagate(self, service, mock_store):
        """Database errors reach the caller unchanged."""
        error = DatabaseError("boom", code="find_photos_failed")
        mock_store.find_photos.side_effect = error

        with pytest.raises(DatabaseError) as exc_info:
            service.search("sunset", today=TODAY)

        assert exc_info.value is error

    def test_unexpected_errors_wrapped(self, service, mock_store):
        """Anything else becomes a SearchError."""
        mock_store.count_photos.side_effect = KeyError("total")

        with pytest.raises(SearchError) as exc_info:
            service.search("sunset", today=TODAY)

        assert isinstance(exc_info.value.original_exception, KeyError)


class TestSearchResult:
    """Test cases for SearchResult serialization."""

    def test_to_dict(self):
        """The response carries data, the parsed filters and pagination."""
        result = SearchResult(
            query="beach with my cousin",
            filters=FilterPredicate(tags=("beach",), person_reference="cousin"),
            photos=[make_photo("nice-1")],
            total=41,
            page=2,
            limit=20,
        )

        data = result.to_dict()

        assert [photo["id"] for photo in data["data"]] == ["nice-1"]
        assert data["searchQuery"] == "beach with my cousin"
        assert data["parsedFilters"] == {"tags": ["beach"], "personReference": "cousin"}
        assert data["resolvedPeople"] == []
        assert data["unresolvedPerson"] == "cousin"
        assert data["pagination"] == {"page": 2, "limit": 20, "total": 41, "totalPages": 3}

    def test_total_pages_empty(self):
        """No results means no pages."""
        result = SearchResult(query="x", filters=FilterPredicate(), photos=[], total=0, page=1, limit=20)

        assert result.total_pages == 0


class TestGetClusters:
    """Test cases for SearchService.get_clusters."""

    def test_clusters_geotagged_photos(self, service, mock_store, sample_photos):
        """Geotagged photos are grouped into places."""
        mock_store.get_photos_with_location.return_value = [photo for photo in sample_photos if photo.has_location]

        result = service.get_clusters(radius_km=5.0, now=NOW)

        assert result["totalPhotos"] == 4
        assert result["totalClusters"] == 3
        assert [cluster["id"] for cluster in result["data"]] == ["cluster-0", "cluster-1", "cluster-2"]
        assert [len(cluster["photos"]) for cluster in result["data"]] == [2, 1, 1]
        assert result["data"][0]["location"] == "Eiffel Tower, Paris"

    def test_default_radius(self, mock_store, sample_photos):
        """Without a radius the configured default is used."""
        mock_store.get_photos_with_location.return_value = [photo for photo in sample_photos if photo.has_location]
        service = SearchService(mock_store, default_radius_km=1.0)

        result = service.get_clusters(now=NOW)

        # The Louvre is about 3 km from the Eiffel Tower
        assert result["totalClusters"] == 4

    def test_no_photos(self, service):
        """No geotagged photos, no clusters."""
        assert service.get_clusters(now=NOW) == {"data": [], "totalClusters": 0, "totalPhotos": 0}

    @pytest.mark.parametrize("radius", [0, -1.0, float("nan"), float("inf")])
    def test_invalid_radius(self, service, radius):
        """Radii must be positive and finite."""
        with pytest.raises(ValidationError) as exc_info:
            service.get_clusters(radius_km=radius)

        assert exc_info.value.code == "invalid_radius"

    def test_store_errors_propagate(self, service, mock_store):
        """Database errors reach the caller unchanged."""
        mock_store.get_photos_with_location.side_effect = DatabaseError("boom")

        with pytest.raises(DatabaseError):
            service.get_clusters()


class TestGetTimeline:
    """Test cases for SearchService.get_timeline."""

    def test_timeline_for_year(self, service, mock_store, sample_photos):
        """Photos of the year are bucketed by month."""
        mock_store.get_photos_in_range.return_value = [
            photo for photo in sample_photos if photo.date_taken and photo.date_taken.year == 2023
        ]

        result = service.get_timeline(year=2023)

        mock_store.get_photos_in_range.assert_called_once_with(
            datetime(2023, 1, 1, tzinfo=UTC), datetime(2024, 1, 1, tzinfo=UTC)
        )
        assert result["year"] == 2023
        assert result["totalPhotos"] == 3
        assert [bucket["month"] for bucket in result["data"]] == [
            "2023-07-01T00:00:00+00:00",
            "2023-08-01T00:00:00+00:00",
        ]
        assert result["data"][0]["photoCount"] == 2
        assert result["data"][0]["locations"] == ["Eiffel Tower, Paris", "Louvre, Paris"]
        assert result["data"][1]["countries"] == ["France"]

    def test_default_year(self, service, mock_store):
        """Without a year the current one is used."""
        result = service.get_timeline(today=TODAY)

        assert result == {"data": [], "year": 2024, "totalPhotos": 0}

    @pytest.mark.parametrize("year", [0, 9999, -5])
    def test_invalid_year(self, service, year):
        """Years must be representable."""
        with pytest.raises(ValidationError) as exc_info:
            service.get_timeline(year=year)

        assert exc_info.value.code == "invalid_year"


class TestSearchServiceIntegration:
    """End-to-end requests against a real photo store."""

    def test_search_by_location(self, populated_store):
        """A location query finds the photos taken there."""
        result = SearchService(populated_store).search("in paris", today=TODAY)

        assert [photo.id for photo in result.photos] == ["paris-2", "paris-1"]
        assert result.total == 2

    def test_search_by_tag_and_location(self, populated_store):
        """Tags and locations combine."""
        result = SearchService(populated_store).search("city in tokyo", today=TODAY)

        assert [photo.id for photo in result.photos] == ["tokyo-1"]

    def test_clusters_and_timeline(self, populated_store):
        """Clusters and timeline read from the same store."""
        service = SearchService(populated_store, default_radius_km=5.0)

        assert service.get_clusters(now=NOW)["totalClusters"] == 3
        assert service.get_timeline(year=2023)["totalPhotos"] == 3


class TestGetSearchService:
    """Test cases for get_search_service."""

    def test_wired_from_config(self, db_path, monkeypatch):
        """Settings come from the environment."""
        monkeypatch.setenv("CLUSTER_RADIUS_KM", "2.5")
        monkeypatch.setenv("SEARCH_PAGE_SIZE", "12")
        monkeypatch.setenv("SEARCH_MAX_PAGE_SIZE", "50")

        service = get_search_service(TEST_USER_ID, db_path)

        assert service.default_radius_km == 2.5
        assert service.page_size == 12
        assert service.max_page_size == 50
        assert service.store.user_id == TEST_USER_ID

    def test_uses_cached_store(self, db_path):
        """Services for the same user share the photo store."""
        with patch("imgsearch.services.search.get_photo_store") as mock_get_store:
            get_search_service(TEST_USER_ID, db_path)

        mock_get_store.assert_called_once_with(TEST_USER_ID, db_path)
