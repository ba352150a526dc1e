"""Places page for imgsearch application."""

import streamlit as st
import structlog

from imgsearch.config import get_cluster_radius_km
from imgsearch.errors import ImgSearchError
from imgsearch.ui.components.common import render_empty_state, render_error_message
from imgsearch.ui.handlers.search import cluster_map_points, get_current_user_id, load_clusters

logger = structlog.get_logger(__name__)


def render_places_page() -> None:
    """Render geotagged photos grouped into places."""
    st.markdown("### 🗺️ Places")

    radius_km = st.slider(
        "Cluster radius (km)",
        min_value=0.1,
        max_value=50.0,
        value=float(get_cluster_radius_km()),
        step=0.1,
    )

    try:
        result = load_clusters(get_current_user_id(), radius_km)
    except ImgSearchError as e:
        render_error_message("Places Error", e.user_message, str(e))
        return

    clusters = result["data"]
    if not clusters:
        render_empty_state(
            title="No geotagged photos yet",
            description="Photos with GPS coordinates will show up here grouped by place.",
            icon="🗺️",
        )
        return

    st.markdown(f"**{result['totalClusters']}** place(s) from **{result['totalPhotos']}** photo(s)")
    st.map(cluster_map_points(clusters), latitude="latitude", longitude="longitude", size="size")

    for cluster in clusters:
        date_range = cluster["dateRange"]
        with st.expander(f"📍 {cluster['location']} ({len(cluster['photos'])})"):
            st.caption(f"{date_range['start'][:10]} to {date_range['end'][:10]}")
            for photo in cluster["photos"]:
                st.write(f"- {photo['fileName']}")
