"""Tests for reusable UI components."""

from unittest.mock import patch

from imgsearch.ui.components.common import render_photo_card

from ...factories import make_photo


class TestPhotoCard:
    """Test rendering of serialized photos."""

    @patch("streamlit.caption")
    @patch("streamlit.markdown")
    @patch("streamlit.image")
    def test_card_title_is_display_name(self, mock_image, mock_markdown, mock_caption, sample_photos):
        """A dated photo is titled with its capture time and place."""
        render_photo_card(sample_photos[3].to_dict())

        mock_image.assert_not_called()
        mock_markdown.assert_called_once_with("**2024-03-28 18:00 - Shinjuku, Tokyo**")
        mock_caption.assert_any_call("Japan")
        mock_caption.assert_any_call("#city #food")

    @patch("streamlit.caption")
    @patch("streamlit.markdown")
    @patch("streamlit.image")
    def test_undated_card_uses_filename(self, mock_image, mock_markdown, mock_caption):
        """Without date or place the filename is shown."""
        render_photo_card(make_photo("p1", thumbnail_url="https://example.com/p1.jpg").to_dict())

        mock_image.assert_called_once_with("https://example.com/p1.jpg", use_container_width=True)
        mock_markdown.assert_called_once_with("**p1.jpg**")
        mock_caption.assert_not_called()
