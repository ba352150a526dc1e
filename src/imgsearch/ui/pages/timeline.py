"""Timeline page for imgsearch application."""

from datetime import date

import streamlit as st
import structlog

from imgsearch.errors import ImgSearchError
from imgsearch.ui.components.common import render_empty_state, render_error_message
from imgsearch.ui.handlers.search import get_current_user_id, load_timeline

logger = structlog.get_logger(__name__)


def render_timeline_page() -> None:
    """Render the month-by-month timeline of one year."""
    st.markdown("### 🗓️ Timeline")

    year = st.number_input("Year", min_value=1, max_value=9998, value=date.today().year, step=1)

    try:
        result = load_timeline(get_current_user_id(), int(year))
    except ImgSearchError as e:
        render_error_message("Timeline Error", e.user_message, str(e))
        return

    if not result["data"]:
        render_empty_state(
            title=f"No photos in {result['year']}",
            description="Photos with a capture date in this year will appear here by month.",
            icon="🗓️",
        )
        return

    st.markdown(f"**{result['totalPhotos']}** photo(s) in {result['year']}")

    for bucket in result["data"]:
        month_label = date.fromisoformat(bucket["month"][:10]).strftime("%B")
        st.markdown(f"#### {month_label} · {bucket['photoCount']}")
        if bucket["locations"]:
            st.caption("Places: " + ", ".join(bucket["locations"]))
        if bucket["countries"]:
            st.caption("Countries: " + ", ".join(bucket["countries"]))
