"""Reusable UI components for imgsearch application."""

import streamlit as st
import structlog

from imgsearch.models.photo import PhotoRecord

logger = structlog.get_logger()

PAGES = {
    "search": "🔎 Search",
    "places": "🗺️ Places",
    "timeline": "🗓️ Timeline",
}


def render_header() -> None:
    """Render the application header."""
    st.title("📸 imgsearch")
    st.caption("Search your photos in plain words, by place and by month.")


def render_sidebar() -> None:
    """Render page navigation in the sidebar."""
    with st.sidebar:
        st.markdown("### Navigation")
        for page, label in PAGES.items():
            is_current = st.session_state.get("current_page") == page
            if st.button(label, use_container_width=True, type="primary" if is_current else "secondary"):
                st.session_state.current_page = page
                st.rerun()


def render_empty_state(title: str, description: str, icon: str = "📭") -> None:
    """
    Render an empty state message.

    Args:
        title: Main title for the empty state
        description: Description text
        icon: Emoji icon to display
    """
    col1, col2, col3 = st.columns([1, 2, 1])

    with col2:
        st.markdown(
            f"""
        <div style='text-align: center; padding: 2rem 0;'>
            <div style='font-size: 4rem; margin-bottom: 1rem;'>{icon}</div>
            <h3 style='color: #666; margin-bottom: 1rem;'>{title}</h3>
            <p style='color: #888; margin-bottom: 2rem;'>{description}</p>
        </div>
        """,
            unsafe_allow_html=True,
        )


def render_error_message(error_type: str, message: str, details: str | None = None) -> None:
    """
    Render a standardized error message.

    Args:
        error_type: Type of error (e.g., "Search Error")
        message: Main error message
        details: Additional error details (optional)
    """
    st.error(f"**{error_type}:** {message}")

    if details:
        with st.expander("🔍 Error details"):
            st.code(details)


def render_photo_card(photo: dict) -> None:
    """
    Render one serialized photo as a compact card.

    Args:
        photo: Photo dictionary as produced by PhotoRecord.to_dict()
    """
    if photo.get("thumbnailUrl"):
        st.image(photo["thumbnailUrl"], use_container_width=True)

    st.markdown(f"**{PhotoRecord.from_dict(photo).get_display_name()}**")

    if photo.get("country"):
        st.caption(photo["country"])

    if photo.get("tags"):
        st.caption(" ".join(f"#{tag}" for tag in photo["tags"]))
