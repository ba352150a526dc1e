"""
Photo record model for imgsearch application.

This module contains the PhotoRecord dataclass describing a photo as the
search layer sees it: when and where it was taken, and what the external
image analysis said about it. FaceGroup names a person across photos.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..utils.datetime_utils import get_current_timestamp, parse_timestamp


@dataclass
class PhotoRecord:
    """
    Represents a photo in the imgsearch system.

    Coordinates, location labels, tags and the AI description are produced
    by external geocoding and image-analysis services and arrive here
    already computed.
    """

    id: str
    user_id: str
    filename: str
    date_taken: datetime | None = None
    latitude: float | None = None
    longitude: float | None = None
    location: str | None = None
    city: str | None = None
    country: str | None = None
    tags: list[str] = field(default_factory=list)
    ai_description: str | None = None
    thumbnail_url: str | None = None
    uploaded_at: datetime = field(default_factory=get_current_timestamp)

    @classmethod
    def create_new(cls, user_id: str, filename: str, **fields: Any) -> "PhotoRecord":
        """
        Create a new PhotoRecord with a generated ID.

        Args:
            user_id: ID of the user who owns the photo
            filename: Original filename of the photo
            **fields: Any other PhotoRecord field

        Returns:
            New PhotoRecord instance
        """
        return cls(id=str(uuid.uuid4()), user_id=user_id, filename=filename, **fields)

    @property
    def has_location(self) -> bool:
        """True when both coordinates are known."""
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert PhotoRecord to a JSON-ready dictionary.

        Returns:
            Dictionary representation with ISO-8601 timestamps
        """
        return {
            "id": self.id,
            "userId": self.user_id,
            "fileName": self.filename,
            "dateTaken": self.date_taken.isoformat() if self.date_taken else None,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "location": self.location,
            "city": self.city,
            "country": self.country,
            "tags": list(self.tags),
            "aiDescription": self.ai_description,
            "thumbnailUrl": self.thumbnail_url,
            "uploadedAt": self.uploaded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PhotoRecord":
        """
        Create PhotoRecord from a dictionary produced by ``to_dict``.

        Args:
            data: Dictionary containing photo fields

        Returns:
            PhotoRecord instance
        """
        uploaded_at = parse_timestamp(data.get("uploadedAt")) or get_current_timestamp()

        return cls(
            id=data["id"],
            user_id=data["userId"],
            filename=data["fileName"],
            date_taken=parse_timestamp(data.get("dateTaken")),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            location=data.get("location"),
            city=data.get("city"),
            country=data.get("country"),
            tags=list(data.get("tags") or []),
            ai_description=data.get("aiDescription"),
            thumbnail_url=data.get("thumbnailUrl"),
            uploaded_at=uploaded_at,
        )

    def get_display_name(self) -> str:
        """
        Get a user-friendly display name for the photo.

        Returns:
            Display name based on date taken, location or filename
        """
        label = self.location or self.filename
        if self.date_taken:
            return f"{self.date_taken.strftime('%Y-%m-%d %H:%M')} - {label}"
        return label


@dataclass
class FaceGroup:
    """A named person, as grouped by the external face detection service."""

    id: str
    user_id: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "userId": self.user_id, "name": self.name}


@dataclass
class PersonSummary:
    """A face group with how many faces it holds and a preview of its photos."""

    face_group: FaceGroup
    face_count: int = 0
    preview_photos: list[PhotoRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.face_group.to_dict(),
            "faceCount": self.face_count,
            "previewPhotos": [
                {
                    "id": photo.id,
                    "thumbnailUrl": photo.thumbnail_url,
                    "dateTaken": photo.date_taken.isoformat() if photo.date_taken else None,
                }
                for photo in self.preview_photos
            ],
        }
