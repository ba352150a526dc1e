"""Tests for main Streamlit application."""

from unittest.mock import MagicMock, Mock, patch

import streamlit as st

from imgsearch.main import initialize_session_state, main, render_main_content


class TestMainApplication:
    """Test main application functionality."""

    def test_initialize_session_state(self, monkeypatch):
        """Defaults are filled in for a fresh session."""
        monkeypatch.setenv("IMGSEARCH_USER_ID", "configured-user")
        mock_session_state = MagicMock()

        with patch.object(st, "session_state", mock_session_state):
            initialize_session_state()

        assert mock_session_state.user_id == "configured-user"
        assert mock_session_state.current_page == "search"
        assert mock_session_state.search_query == ""
        assert mock_session_state.search_page == 1

    def test_render_main_content_routes_to_page(self):
        """The current page's renderer is called."""
        mock_session_state = MagicMock()
        mock_session_state.current_page = "timeline"
        render_timeline = Mock()

        with patch.object(st, "session_state", mock_session_state), patch.dict(
            "imgsearch.main.PAGE_RENDERERS", {"timeline": render_timeline}
        ):
            render_main_content()

        render_timeline.assert_called_once_with()

    @patch("streamlit.button", return_value=False)
    @patch("streamlit.warning")
    def test_render_main_content_unknown_page(self, mock_warning, mock_button):
        """Unknown pages show a warning and a way back to search."""
        mock_session_state = MagicMock()
        mock_session_state.current_page = "settings"

        with patch.object(st, "session_state", mock_session_state):
            render_main_content()

        mock_warning.assert_called_once()
        mock_button.assert_called_once()

    @patch("imgsearch.main.get_debug_mode", return_value=False)
    @patch("imgsearch.main.render_main_content")
    @patch("imgsearch.main.render_sidebar")
    @patch("imgsearch.main.render_header")
    @patch("imgsearch.main.logger")
    @patch("streamlit.set_page_config")
    @patch("streamlit.container")
    def test_main_function_basic(
        self,
        mock_container,
        mock_set_page_config,
        mock_logger,
        mock_header,
        mock_sidebar,
        mock_content,
        mock_debug,
    ):
        """Test basic main function execution."""
        mock_session_state = MagicMock()
        mock_session_state.current_page = "search"

        with patch.object(st, "session_state", mock_session_state):
            main()

        mock_set_page_config.assert_called_once()
        mock_header.assert_called_once()
        mock_sidebar.assert_called_once()
        mock_content.assert_called_once()
        mock_logger.info.assert_called()
