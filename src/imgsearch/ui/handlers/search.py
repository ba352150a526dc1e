"""Search, place and timeline handlers for imgsearch UI."""

from typing import Any

import streamlit as st
import structlog

from imgsearch.config import get_default_user_id
from imgsearch.services.search import get_search_service

logger = structlog.get_logger(__name__)

# Map marker radius in meters per clustered photo
MAP_METERS_PER_PHOTO = 100

FILTER_LABELS = {
    "dateFrom": "From",
    "dateTo": "Until (exclusive)",
    "locationSubstring": "Place",
    "tags": "Tags",
    "personReference": "Person",
    "descriptionSubstring": "Description",
}


def get_current_user_id() -> str:
    """User whose collection the UI shows."""
    return st.session_state.get("user_id") or get_default_user_id()


@st.cache_data(ttl=300, show_spinner=False)
def run_search(user_id: str, query: str, page: int, limit: int) -> dict[str, Any]:
    """
    Run a free-text search.

    Args:
        user_id: Owner of the photos
        query: Search phrase
        page: 1-based page number
        limit: Results per page

    Returns:
        dict: Serialized SearchResult
    """
    result = get_search_service(user_id).search(query, page=page, limit=limit)
    logger.info("ui_search_completed", user_id=user_id, query=query, total=result.total, page=page)
    return result.to_dict()


@st.cache_data(ttl=300, show_spinner=False)
def load_clusters(user_id: str, radius_km: float) -> dict[str, Any]:
    """
    Load place clusters for the user.

    Args:
        user_id: Owner of the photos
        radius_km: Cluster radius in kilometers

    Returns:
        dict: data, totalClusters and totalPhotos
    """
    return get_search_service(user_id).get_clusters(radius_km=radius_km)


@st.cache_data(ttl=300, show_spinner=False)
def load_timeline(user_id: str, year: int) -> dict[str, Any]:
    """
    Load the month-by-month timeline for one year.

    Args:
        user_id: Owner of the photos
        year: Calendar year

    Returns:
        dict: data, year and totalPhotos
    """
    return get_search_service(user_id).get_timeline(year=year)


def describe_filters(parsed_filters: dict[str, Any]) -> list[str]:
    """
    Human-readable lines describing how a query was understood.

    Args:
        parsed_filters: FilterPredicate.to_dict() output

    Returns:
        list[str]: One "Label: value" line per filter, in display order
    """
    lines = []
    for key, label in FILTER_LABELS.items():
        value = parsed_filters.get(key)
        if not value:
            continue
        if isinstance(value, list):
            value = ", ".join(value)
        elif key in ("dateFrom", "dateTo"):
            value = value[:10]
        lines.append(f"{label}: {value}")
    return lines


def cluster_map_points(clusters: list[dict[str, Any]]) -> list[dict[str, float]]:
    """
    Map points for st.map, one per cluster representative.

    Args:
        clusters: Serialized clusters

    Returns:
        list[dict]: latitude/longitude rows with a marker size in meters
    """
    return [
        {
            "latitude": cluster["latitude"],
            "longitude": cluster["longitude"],
            "size": len(cluster["photos"]) * MAP_METERS_PER_PHOTO,
        }
        for cluster in clusters
    ]
