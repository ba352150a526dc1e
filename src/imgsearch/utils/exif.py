"""EXIF capture date and GPS extraction for indexing local photo folders."""

import uuid
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from PIL import ExifTags, Image

from ..core.geo import is_valid_coordinate
from ..logging_config import get_logger, log_error
from ..models.photo import PhotoRecord
from .datetime_utils import ensure_utc

try:
    from pillow_heif import register_heif_opener  # type: ignore[import-untyped]

    register_heif_opener()
    HEIF_AVAILABLE = True
except ImportError:
    HEIF_AVAILABLE = False

logger = get_logger(__name__)

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".tif", ".tiff", ".webp"}
if HEIF_AVAILABLE:
    SUPPORTED_EXTENSIONS |= {".heic", ".heif"}

# EXIF date tags in priority order
EXIF_DATE_TAGS = (
    ExifTags.Base.DateTimeOriginal,  # When photo was taken
    ExifTags.Base.DateTime,  # When file was modified
    ExifTags.Base.DateTimeDigitized,  # When photo was digitized
)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def dms_to_decimal(degrees: float, minutes: float, seconds: float, direction: str) -> float:
    """Convert degrees/minutes/seconds to signed decimal degrees (S and W are negative)."""
    decimal = float(degrees) + float(minutes) / 60 + float(seconds) / 3600
    if direction.upper() in ("S", "W"):
        decimal = -decimal
    return decimal


def _ref_to_str(ref: Any) -> str:
    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="ignore")
    return str(ref or "").strip("\x00 ").upper()


def _coordinate(value: Any, ref: Any) -> float | None:
    try:
        degrees, minutes, seconds = value
        return dms_to_decimal(degrees, minutes, seconds, _ref_to_str(ref))
    except (TypeError, ValueError, ZeroDivisionError):
        return None


def gps_to_decimal(gps_info: Mapping[int, Any]) -> tuple[float | None, float | None]:
    """
    Read latitude and longitude from a GPS IFD.

    Coordinates outside the valid range, and the 0/0 "null island" that
    some cameras write when they have no fix, are dropped.

    Args:
        gps_info: GPS IFD keyed by ``ExifTags.GPS`` tag IDs

    Returns:
        (latitude, longitude), both None when unusable
    """
    if not gps_info:
        return None, None

    latitude = _coordinate(gps_info.get(ExifTags.GPS.GPSLatitude), gps_info.get(ExifTags.GPS.GPSLatitudeRef))
    longitude = _coordinate(gps_info.get(ExifTags.GPS.GPSLongitude), gps_info.get(ExifTags.GPS.GPSLongitudeRef))

    if not is_valid_coordinate(latitude, longitude) or (latitude == 0 and longitude == 0):
        return None, None
    return latitude, longitude


def parse_exif_date(tags: Mapping[int, Any]) -> datetime | None:
    """
    First parseable date among ``EXIF_DATE_TAGS``.

    EXIF dates carry no timezone; they are stored as UTC.
    """
    for tag in EXIF_DATE_TAGS:
        date_string = tags.get(tag)
        if not date_string:
            continue
        try:
            return ensure_utc(datetime.strptime(str(date_string).strip("\x00 "), EXIF_DATE_FORMAT))
        except ValueError as e:
            logger.debug("exif_date_parse_failed", tag=int(tag), date_string=str(date_string), error=str(e))

    return None


def photo_id_for_path(path: Path) -> str:
    """Stable ID so re-indexing a file replaces its record."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, path.resolve().as_uri()))


def extract_photo_record(path: str | Path, user_id: str) -> PhotoRecord:
    """
    Build a PhotoRecord from a local image file's EXIF data.

    Unreadable files or files without EXIF still produce a record, just
    without date and coordinates.

    Args:
        path: Image file to read
        user_id: Owner of the photo

    Returns:
        PhotoRecord with date_taken, latitude and longitude when available
    """
    path = Path(path)
    date_taken = None
    latitude = longitude = None

    try:
        with Image.open(path) as image:
            exif = image.getexif()

            tags = dict(exif)
            tags.update(exif.get_ifd(ExifTags.IFD.Exif))
            date_taken = parse_exif_date(tags)

            latitude, longitude = gps_to_decimal(exif.get_ifd(ExifTags.IFD.GPSInfo))

    except Exception as e:
        log_error(e, {"operation": "extract_photo_record", "path": str(path)})

    record = PhotoRecord(
        id=photo_id_for_path(path),
        user_id=user_id,
        filename=path.name,
        date_taken=date_taken,
        latitude=latitude,
        longitude=longitude,
    )

    logger.debug(
        "exif_extracted",
        path=str(path),
        date_taken=date_taken.isoformat() if date_taken else None,
        has_location=record.has_location,
    )
    return record


def find_image_files(directory: str | Path, recursive: bool = False) -> list[Path]:
    """Image files in a directory, sorted by path."""
    directory = Path(directory)
    candidates = directory.rglob("*") if recursive else directory.iterdir()
    return sorted(
        path for path in candidates if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )
