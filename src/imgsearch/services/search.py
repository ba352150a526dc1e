"""
Search orchestration for imgsearch application.

Each request flows one way: parse the query, resolve the person it names,
ask the photo store, then optionally cluster or bucket the result. The
service holds only its store and settings, never per-request state.
"""

import math
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from ..config import get_cluster_radius_km, get_max_search_page_size, get_search_page_size
from ..core.clustering import cluster_by_location
from ..core.query_parser import DEFAULT_PARSER_CONFIG, ParserConfig, parse_query
from ..core.timeline import aggregate_timeline
from ..errors import DatabaseError, ImgSearchError, SearchError, ValidationError
from ..logging_config import get_logger, log_performance
from ..models.cluster import GeoItem
from ..models.filters import FilterPredicate
from ..models.photo import FaceGroup, PhotoRecord
from ..utils.datetime_utils import get_current_timestamp, year_window
from .photo_store import PhotoStore, get_photo_store

logger = get_logger(__name__)


@dataclass
class SearchResult:
    """One page of search results together with how the query was read."""

    query: str
    filters: FilterPredicate
    photos: list[PhotoRecord]
    total: int
    page: int
    limit: int
    resolved_people: list[FaceGroup] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def unresolved_person(self) -> str | None:
        """The person named in the query when no face group matched it."""
        if self.filters.person_reference and not self.resolved_people:
            return self.filters.person_reference
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [photo.to_dict() for photo in self.photos],
            "searchQuery": self.query,
            "parsedFilters": self.filters.to_dict(),
            "resolvedPeople": [group.to_dict() for group in self.resolved_people],
            "unresolvedPerson": self.unresolved_person,
            "pagination": {
                "page": self.page,
                "limit": self.limit,
                "total": self.total,
                "totalPages": self.total_pages,
            },
        }


class SearchService:
    """
    Runs free-text search, place clustering and timeline requests for one user.

    Attributes:
        store: Photo store the requests are evaluated against
        parser_config: Word lists handed to the query parser
        default_radius_km: Cluster radius used when the caller gives none
        page_size: Search results per page when the caller gives no limit
        max_page_size: Largest limit a caller may ask for
    """

    def __init__(
        self,
        store: PhotoStore,
        parser_config: ParserConfig = DEFAULT_PARSER_CONFIG,
        default_radius_km: float = 1.0,
        page_size: int = 20,
        max_page_size: int = 100,
    ):
        self.store = store
        self.parser_config = parser_config
        self.default_radius_km = default_radius_km
        self.page_size = page_size
        self.max_page_size = max_page_size

    def _resolve_people(self, filters: FilterPredicate) -> list[FaceGroup]:
        if not filters.person_reference:
            return []

        groups = self.store.find_face_groups_by_name(filters.person_reference)
        if not groups:
            logger.info("person_reference_unresolved", person_reference=filters.person_reference)
        return groups

    def search(
        self,
        query: str,
        page: int = 1,
        limit: int | None = None,
        today: date | None = None,
    ) -> SearchResult:
        """
        Search photos with a free-text query.

        A person reference that matches no face group is reported back on
        the result and does not narrow the search.

        Args:
            query: Raw search phrase
            page: 1-based page number
            limit: Results per page (defaults to the configured page size)
            today: Reference date for relative phrases such as "this year"

        Returns:
            SearchResult for the requested page

        Raises:
            ValidationError: If the query is blank or pagination is out of range
            DatabaseError: If the photo store fails
            SearchError: If anything else goes wrong
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required", code="query_required")

        limit = self.page_size if limit is None else limit
        if page < 1:
            raise ValidationError(f"Page must be at least 1, got {page}", code="invalid_page", details={"page": page})
        if not 1 <= limit <= self.max_page_size:
            raise ValidationError(
                f"Limit must be between 1 and {self.max_page_size}, got {limit}",
                code="invalid_limit",
                details={"limit": limit},
            )

        start_time = time.perf_counter()
        try:
            filters = parse_query(query, self.parser_config, today=today)
            people = self._resolve_people(filters)
            face_group_ids = [group.id for group in people] or None

            photos = self.store.find_photos(filters, face_group_ids, limit=limit, offset=(page - 1) * limit)
            total = self.store.count_photos(filters, face_group_ids)

        except ImgSearchError:
            raise
        except Exception as e:
            raise SearchError(f"Search failed: {e}", details={"query": query}, original_exception=e) from e

        log_performance(
            "search",
            time.perf_counter() - start_time,
            user_id=self.store.user_id,
            query=query,
            filters=filters.to_dict(),
            total=total,
        )
        return SearchResult(
            query=query,
            filters=filters,
            photos=photos,
            total=total,
            page=page,
            limit=limit,
            resolved_people=people,
        )

    def get_clusters(self, radius_km: float | None = None, now: datetime | None = None) -> dict[str, Any]:
        """
        Group the user's geotagged photos into places.

        Args:
            radius_km: Cluster radius (defaults to the configured radius)
            now: Stand-in for missing dates in each cluster's date range

        Returns:
            Dictionary with data (serialized clusters), totalClusters and totalPhotos

        Raises:
            ValidationError: If the radius is not a positive finite number
        """
        radius_km = self.default_radius_km if radius_km is None else radius_km
        if not (isinstance(radius_km, int | float) and math.isfinite(radius_km) and radius_km > 0):
            raise ValidationError(
                f"Radius must be a positive number of kilometers, got {radius_km}",
                code="invalid_radius",
                details={"radius_km": radius_km},
            )

        start_time = time.perf_counter()
        try:
            photos = self.store.get_photos_with_location()
            items = [
                GeoItem(id=photo.id, latitude=photo.latitude, longitude=photo.longitude, payload=photo)
                for photo in photos
            ]
            clusters = cluster_by_location(items, radius_km)

        except DatabaseError:
            raise
        except Exception as e:
            raise SearchError(f"Clustering failed: {e}", details={"radius_km": radius_km}, original_exception=e) from e

        now = now or get_current_timestamp()
        log_performance(
            "get_clusters",
            time.perf_counter() - start_time,
            user_id=self.store.user_id,
            photos=len(photos),
            clusters=len(clusters),
            radius_km=radius_km,
        )
        return {
            "data": [cluster.to_dict(index, now) for index, cluster in enumerate(clusters)],
            "totalClusters": len(clusters),
            "totalPhotos": len(photos),
        }

    def get_timeline(self, year: int | None = None, today: date | None = None) -> dict[str, Any]:
        """
        Month-by-month travel timeline for one year.

        Args:
            year: Calendar year (defaults to the current year)
            today: Reference date used when ``year`` is omitted

        Returns:
            Dictionary with data (serialized buckets), year and totalPhotos

        Raises:
            ValidationError: If the year cannot be represented
        """
        year = (today or get_current_timestamp()).year if year is None else year
        if not 1 <= year <= 9998:
            raise ValidationError(f"Year out of range: {year}", code="invalid_year", details={"year": year})

        start_time = time.perf_counter()
        try:
            start, end = year_window(year)
            photos = self.store.get_photos_in_range(start, end)
            buckets = aggregate_timeline(photos, year)

        except DatabaseError:
            raise
        except Exception as e:
            raise SearchError(f"Timeline failed: {e}", details={"year": year}, original_exception=e) from e

        log_performance(
            "get_timeline",
            time.perf_counter() - start_time,
            user_id=self.store.user_id,
            year=year,
            photos=len(photos),
            months=len(buckets),
        )
        return {
            "data": [bucket.to_dict() for bucket in buckets],
            "year": year,
            "totalPhotos": len(photos),
        }


def get_search_service(user_id: str, db_path: str | None = None) -> SearchService:
    """
    Build a search service for a user from configuration.

    Args:
        user_id: User identifier
        db_path: DuckDB file (defaults to IMGSEARCH_DB_PATH)

    Returns:
        SearchService wired to the user's photo store
    """
    return SearchService(
        store=get_photo_store(user_id, db_path),
        default_radius_km=get_cluster_radius_km(),
        page_size=get_search_page_size(),
        max_page_size=get_max_search_page_size(),
    )
