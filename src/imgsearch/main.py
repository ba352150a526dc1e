"""
Main Streamlit application for imgsearch.

This is the entry point for the photo search web application.
"""

import streamlit as st

from imgsearch.config import get_debug_mode, get_default_user_id
from imgsearch.logging_config import configure_structured_logging, get_logger
from imgsearch.ui.components.common import PAGES, render_header, render_sidebar
from imgsearch.ui.pages.places import render_places_page
from imgsearch.ui.pages.search import render_search_page
from imgsearch.ui.pages.timeline import render_timeline_page

# Configure structured logging
configure_structured_logging()
logger = get_logger(__name__)

PAGE_RENDERERS = {
    "search": render_search_page,
    "places": render_places_page,
    "timeline": render_timeline_page,
}


def initialize_session_state() -> None:
    """Initialize session state variables."""
    if "user_id" not in st.session_state:
        st.session_state.user_id = get_default_user_id()

    if "current_page" not in st.session_state:
        st.session_state.current_page = "search"

    if "search_query" not in st.session_state:
        st.session_state.search_query = ""

    if "search_page" not in st.session_state:
        st.session_state.search_page = 1


def render_main_content() -> None:
    """Render the main content area based on current page."""
    current_page = st.session_state.current_page
    renderer = PAGE_RENDERERS.get(current_page)

    if renderer is None:
        st.warning(f"Page '{current_page}' was not found.")
        if st.button(PAGES["search"], use_container_width=True, type="primary"):
            st.session_state.current_page = "search"
            st.rerun()
        return

    renderer()


def main() -> None:
    """Main application entry point."""
    logger.info("application_starting", page="main")

    st.set_page_config(
        page_title="imgsearch - Photo Search",
        page_icon="📸",
        layout="wide",
        initial_sidebar_state="expanded",
        menu_items={
            "Get Help": None,
            "Report a bug": None,
            "About": "imgsearch - Natural-language photo search",
        },
    )

    initialize_session_state()

    logger.info(
        "session_initialized",
        user_id=st.session_state.user_id,
        current_page=st.session_state.current_page,
    )

    render_header()
    render_sidebar()

    with st.container():
        render_main_content()

    if get_debug_mode():
        with st.expander("Debug Info"):
            st.write("Session State:", st.session_state)


if __name__ == "__main__":
    main()
