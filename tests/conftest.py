"""
Pytest configuration and fixtures for imgsearch tests.
"""

import tempfile
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from imgsearch.config import get_config
from imgsearch.models.photo import FaceGroup, PhotoRecord
from imgsearch.services.photo_store import PhotoStore, cleanup_photo_stores

from .factories import TEST_USER_ID, make_photo


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def db_path(temp_dir: Path) -> str:
    """Path of a not-yet-created DuckDB file."""
    return str(temp_dir / "imgsearch.db")


@pytest.fixture
def photo_store(db_path: str) -> PhotoStore:
    """Photo store over a fresh database."""
    return PhotoStore(TEST_USER_ID, db_path)


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Forget cached configuration and store instances between tests."""
    get_config().clear_cache()
    cleanup_photo_stores()
    yield
    get_config().clear_cache()
    cleanup_photo_stores()


@pytest.fixture
def sample_photos() -> list[PhotoRecord]:
    """A small collection spanning two cities and two years."""
    return [
        make_photo(
            "paris-1",
            date_taken=datetime(2023, 7, 14, 10, 0, tzinfo=UTC),
            latitude=48.8584,
            longitude=2.2945,
            location="Eiffel Tower, Paris",
            city="Paris",
            country="France",
            tags=["city", "architecture"],
            ai_description="Tower at sunset over the river",
            uploaded_at=datetime(2024, 1, 1, 0, 0, tzinfo=UTC),
        ),
        make_photo(
            "paris-2",
            date_taken=datetime(2023, 7, 15, 12, 0, tzinfo=UTC),
            latitude=48.8606,
            longitude=2.3376,
            location="Louvre, Paris",
            city="Paris",
            country="France",
            tags=["museum"],
            ai_description="Glass pyramid in a courtyard",
            uploaded_at=datetime(2024, 1, 1, 0, 1, tzinfo=UTC),
        ),
        make_photo(
            "nice-1",
            date_taken=datetime(2023, 8, 2, 9, 30, tzinfo=UTC),
            latitude=43.6950,
            longitude=7.2650,
            location="Promenade des Anglais, Nice",
            city="Nice",
            country="France",
            tags=["beach", "ocean"],
            ai_description="Pebble beach with blue umbrellas",
            uploaded_at=datetime(2024, 1, 1, 0, 2, tzinfo=UTC),
        ),
        make_photo(
            "tokyo-1",
            date_taken=datetime(2024, 3, 28, 18, 0, tzinfo=UTC),
            latitude=35.6762,
            longitude=139.6503,
            location="Shinjuku, Tokyo",
            city="Tokyo",
            country="Japan",
            tags=["city", "food"],
            ai_description="Ramen bowl on a wooden counter",
            uploaded_at=datetime(2024, 4, 1, tzinfo=UTC),
        ),
        make_photo(
            "undated-1",
            tags=["nature"],
            ai_description="Fern leaves close up",
            uploaded_at=datetime(2024, 4, 2, tzinfo=UTC),
        ),
    ]


@pytest.fixture
def populated_store(photo_store: PhotoStore, sample_photos: list[PhotoRecord]) -> PhotoStore:
    """Photo store holding ``sample_photos`` and one named face group."""
    for photo in sample_photos:
        photo_store.save_photo(photo)

    photo_store.save_face_group(FaceGroup(id="fg-sarah", user_id=TEST_USER_ID, name="Sarah"))
    photo_store.add_face("nice-1", "fg-sarah", 0.93)
    return photo_store
