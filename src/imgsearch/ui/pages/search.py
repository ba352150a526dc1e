"""Search page for imgsearch application."""

import streamlit as st
import structlog

from imgsearch.config import get_search_page_size
from imgsearch.errors import ImgSearchError
from imgsearch.ui.components.common import render_empty_state, render_error_message, render_photo_card
from imgsearch.ui.handlers.search import describe_filters, get_current_user_id, run_search

logger = structlog.get_logger(__name__)

GRID_COLUMNS = 4


def render_search_page() -> None:
    """Render the free-text search page."""
    st.markdown("### 🔎 Search your photos")

    query = st.text_input(
        "Describe what you are looking for",
        value=st.session_state.get("search_query", ""),
        placeholder="beach photos from summer 2023 with my cousin",
    )

    if query != st.session_state.get("search_query", ""):
        st.session_state.search_query = query
        st.session_state.search_page = 1

    if not query.strip():
        render_empty_state(
            title="Start with a few words",
            description="Try a place, a month, a year or something you remember about the photo.",
            icon="🔎",
        )
        return

    page = st.session_state.get("search_page", 1)

    try:
        result = run_search(get_current_user_id(), query, page, get_search_page_size())
    except ImgSearchError as e:
        render_error_message("Search Error", e.user_message, str(e))
        return

    filter_lines = describe_filters(result["parsedFilters"])
    if filter_lines:
        st.caption(" | ".join(filter_lines))
    if result.get("unresolvedPerson"):
        st.info(f"No person named '{result['unresolvedPerson']}' was found, so people were not filtered.")

    pagination = result["pagination"]
    if pagination["total"] == 0:
        render_empty_state(title="No matching photos", description="Try a broader phrase.", icon="🤷")
        return

    st.markdown(f"**{pagination['total']}** photo(s) found")

    photos = result["data"]
    for start in range(0, len(photos), GRID_COLUMNS):
        columns = st.columns(GRID_COLUMNS)
        for column, photo in zip(columns, photos[start : start + GRID_COLUMNS]):
            with column:
                render_photo_card(photo)

    render_pagination_controls(pagination["page"], pagination["totalPages"])


def render_pagination_controls(page: int, total_pages: int) -> None:
    """Previous / next buttons for search results."""
    if total_pages <= 1:
        return

    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if st.button("⬅️ Previous", disabled=page <= 1, use_container_width=True):
            st.session_state.search_page = page - 1
            st.rerun()

    with col2:
        st.markdown(f"<div style='text-align: center;'>Page {page} of {total_pages}</div>", unsafe_allow_html=True)

    with col3:
        if st.button("Next ➡️", disabled=page >= total_pages, use_container_width=True):
            st.session_state.search_page = page + 1
            st.rerun()
