"""
Photo store backed by DuckDB.

The store answers the simple key/value and range queries the search layer
needs: look up one photo, evaluate a FilterPredicate, list geotagged
photos for place clustering, and list photos taken within a time window
for the timeline. Upload, thumbnails and image analysis happen elsewhere;
their results are written here with ``save_photo`` / ``add_face``.

Usage Examples:
    store = PhotoStore(user_id="user123", db_path="data/imgsearch.db")

    store.save_photo(PhotoRecord.create_new("user123", "IMG_0001.jpg", tags=["beach"]))
    photos = store.find_photos(FilterPredicate(tags=("beach",)), limit=20)
"""

import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any

from ..config import get_database_path
from ..errors import DatabaseError
from ..logging_config import get_logger, log_performance
from ..models.database import DatabaseManager, get_database_manager
from ..models.filters import FilterPredicate
from ..models.photo import FaceGroup, PersonSummary, PhotoRecord
from ..models.schema import PHOTO_COLUMNS
from ..utils.datetime_utils import ensure_utc, to_naive_utc

logger = get_logger(__name__)

SELECT_PHOTOS = f"SELECT {', '.join(PHOTO_COLUMNS)} FROM photos"

# Photos shown per person when listing face groups
PEOPLE_PREVIEW_SIZE = 5


class PhotoStore:
    """
    Per-user access to photo records in a DuckDB database.

    Attributes:
        user_id: Owner of the photos this store reads and writes
        db_path: Path to the DuckDB database file
    """

    def __init__(self, user_id: str, db_path: str | None = None):
        """
        Initialize the photo store for a user.

        Args:
            user_id: User identifier
            db_path: DuckDB file (defaults to IMGSEARCH_DB_PATH)
        """
        self.user_id = user_id
        self.db_path = db_path or get_database_path()
        self._db_manager: DatabaseManager | None = None

        logger.info("photo_store_initialized", user_id=user_id, db_path=self.db_path)

    @property
    def db_manager(self) -> DatabaseManager:
        """Get database manager, creating the database if needed."""
        if self._db_manager is None:
            try:
                self._db_manager = get_database_manager(self.db_path, create_if_missing=True)
            except Exception as e:
                raise DatabaseError(
                    f"Failed to open photo database: {e}",
                    code="database_open_failed",
                    details={"db_path": self.db_path},
                    original_exception=e,
                ) from e
        return self._db_manager

    def _query(self, operation: str, query: str, parameters: list[Any] | None = None) -> list[tuple]:
        """Run one statement, turning any failure into DatabaseError."""
        try:
            with self.db_manager as db:
                return db.execute_query(query, parameters)
        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(
                f"Failed to {operation.replace('_', ' ')}: {e}",
                code=f"{operation}_failed",
                details={"operation": operation, "user_id": self.user_id},
                original_exception=e,
            ) from e

    @staticmethod
    def _row_to_photo(row: tuple) -> PhotoRecord:
        values = dict(zip(PHOTO_COLUMNS, row, strict=True))
        return PhotoRecord(
            id=values["id"],
            user_id=values["user_id"],
            filename=values["filename"],
            thumbnail_url=values["thumbnail_url"],
            date_taken=ensure_utc(values["date_taken"]) if values["date_taken"] else None,
            latitude=values["latitude"],
            longitude=values["longitude"],
            location=values["location"],
            city=values["city"],
            country=values["country"],
            tags=list(values["tags"] or []),
            ai_description=values["ai_description"],
            uploaded_at=ensure_utc(values["uploaded_at"]),
        )

    def _replace_row(
        self, operation: str, table: str, record_id: str, columns: tuple[str, ...], values: list[Any]
    ) -> bool:
        """
        Insert a row owned by this user, replacing the user's previous row with the same ID.

        The ownership check, delete and insert share one connection and one
        transaction, so a failed insert leaves the previous row in place.

        Returns:
            True if a previous row was replaced

        Raises:
            DatabaseError: If the ID belongs to another user or the write fails
        """
        placeholders = ", ".join("?" for _ in columns)

        try:
            with self.db_manager as db:
                conn = db.connect()
                conn.begin()
                try:
                    owners = db.execute_query(f"SELECT user_id FROM {table} WHERE id = ?", [record_id])
                    if owners and owners[0][0] != self.user_id:
                        raise DatabaseError(
                            f"ID {record_id} in {table} belongs to another user",
                            code=f"{operation.removeprefix('save_')}_id_conflict",
                            details={"id": record_id, "table": table, "user_id": self.user_id},
                            recoverable=False,
                            retry_suggested=False,
                        )
                    if owners:
                        db.execute_query(f"DELETE FROM {table} WHERE id = ? AND user_id = ?", [record_id, self.user_id])
                    db.execute_query(f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})", values)
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
                return bool(owners)
        except DatabaseError:
            raise
        except Exception as e:
            raise DatabaseError(
                f"Failed to {operation.replace('_', ' ')}: {e}",
                code=f"{operation}_failed",
                details={"operation": operation, "user_id": self.user_id, "id": record_id},
                original_exception=e,
            ) from e

    # Writes

    def save_photo(self, photo: PhotoRecord) -> None:
        """
        Insert a photo record, replacing the user's previous record with the same ID.

        Raises:
            DatabaseError: If the photo or its ID belongs to another user, or the write fails
        """
        if photo.user_id != self.user_id:
            raise DatabaseError(
                f"User ID mismatch: expected {self.user_id}, got {photo.user_id}",
                code="user_mismatch",
                details={"photo_id": photo.id},
                recoverable=False,
                retry_suggested=False,
            )

        parameters = [
            photo.id,
            photo.user_id,
            photo.filename,
            photo.thumbnail_url,
            to_naive_utc(photo.date_taken),
            photo.latitude,
            photo.longitude,
            photo.location,
            photo.city,
            photo.country,
            list(photo.tags),
            photo.ai_description,
            to_naive_utc(photo.uploaded_at),
        ]

        replaced = self._replace_row("save_photo", "photos", photo.id, PHOTO_COLUMNS, parameters)

        logger.info("photo_saved", user_id=self.user_id, photo_id=photo.id, replaced=replaced)

    def delete_photo(self, photo_id: str) -> bool:
        """
        Delete a photo and its face links.

        Returns:
            True if deleted, False if not found
        """
        deleted = self._query(
            "delete_photo",
            "DELETE FROM photos WHERE id = ? AND user_id = ? RETURNING id",
            [photo_id, self.user_id],
        )

        if deleted:
            self._query("delete_faces", "DELETE FROM faces WHERE photo_id = ?", [photo_id])
            logger.info("photo_deleted", user_id=self.user_id, photo_id=photo_id)
        else:
            logger.warning("photo_not_found_for_deletion", user_id=self.user_id, photo_id=photo_id)

        return bool(deleted)

    def save_face_group(self, face_group: FaceGroup) -> None:
        """
        Insert or rename a face group.

        Raises:
            DatabaseError: If the group or its ID belongs to another user, or the write fails
        """
        if face_group.user_id != self.user_id:
            raise DatabaseError(
                f"User ID mismatch: expected {self.user_id}, got {face_group.user_id}",
                code="user_mismatch",
                details={"face_group_id": face_group.id},
                recoverable=False,
                retry_suggested=False,
            )

        replaced = self._replace_row(
            "save_face_group",
            "face_groups",
            face_group.id,
            ("id", "user_id", "name"),
            [face_group.id, face_group.user_id, face_group.name],
        )

        logger.info("face_group_saved", user_id=self.user_id, face_group_id=face_group.id, replaced=replaced)

    def rename_face_group(self, face_group_id: str, name: str | None) -> FaceGroup | None:
        """
        Rename one of the user's face groups.

        Returns:
            The renamed FaceGroup, or None if the user has no such group
        """
        rows = self._query(
            "rename_face_group",
            "UPDATE face_groups SET name = ? WHERE id = ? AND user_id = ? RETURNING id, user_id, name",
            [name, face_group_id, self.user_id],
        )

        if not rows:
            logger.warning("face_group_not_found_for_rename", user_id=self.user_id, face_group_id=face_group_id)
            return None

        logger.info("face_group_renamed", user_id=self.user_id, face_group_id=face_group_id)
        return FaceGroup(id=rows[0][0], user_id=rows[0][1], name=rows[0][2])

    def remove_faces(self, photo_id: str) -> int:
        """
        Delete the face links of one of the user's photos.

        Returns:
            Number of face rows removed
        """
        rows = self._query(
            "remove_faces",
            "DELETE FROM faces WHERE photo_id IN (SELECT id FROM photos WHERE id = ? AND user_id = ?) RETURNING id",
            [photo_id, self.user_id],
        )
        return len(rows)

    def add_face(self, photo_id: str, face_group_id: str | None, confidence: float | None = None) -> str:
        """
        Record a detected face on a photo.

        Returns:
            ID of the new face row
        """
        face_id = str(uuid.uuid4())
        self._query(
            "add_face",
            "INSERT INTO faces (id, photo_id, face_group_id, confidence) VALUES (?, ?, ?, ?)",
            [face_id, photo_id, face_group_id, confidence],
        )
        return face_id

    # Reads

    def get_photo_by_id(self, photo_id: str) -> PhotoRecord | None:
        """
        Get a photo by ID.

        Returns:
            PhotoRecord or None if not found
        """
        rows = self._query(
            "get_photo_by_id",
            f"{SELECT_PHOTOS} WHERE id = ? AND user_id = ?",
            [photo_id, self.user_id],
        )
        return self._row_to_photo(rows[0]) if rows else None

    def get_photos_count(self) -> int:
        """Total number of photos owned by the user."""
        rows = self._query("get_photos_count", "SELECT COUNT(*) FROM photos WHERE user_id = ?", [self.user_id])
        return rows[0][0] if rows else 0

    def find_face_groups_by_name(self, name: str) -> list[FaceGroup]:
        """Face groups whose name equals ``name``, ignoring case."""
        rows = self._query(
            "find_face_groups_by_name",
            "SELECT id, user_id, name FROM face_groups WHERE user_id = ? AND lower(name) = lower(?) ORDER BY id",
            [self.user_id, name],
        )
        return [FaceGroup(id=row[0], user_id=row[1], name=row[2]) for row in rows]

    def list_face_groups(self, preview_size: int = PEOPLE_PREVIEW_SIZE) -> list[PersonSummary]:
        """
        The user's face groups, most faces first.

        Args:
            preview_size: Maximum number of photos previewed per group

        Returns:
            List of PersonSummary instances ordered by face count, then name and ID
        """
        start_time = time.perf_counter()

        group_rows = self._query(
            "list_face_groups",
            "SELECT g.id, g.user_id, g.name, COUNT(f.id) AS face_count"
            " FROM face_groups g LEFT JOIN faces f ON f.face_group_id = g.id"
            " WHERE g.user_id = ?"
            " GROUP BY g.id, g.user_id, g.name"
            " ORDER BY face_count DESC, g.name NULLS LAST, g.id",
            [self.user_id],
        )
        people = [
            PersonSummary(face_group=FaceGroup(id=row[0], user_id=row[1], name=row[2]), face_count=row[3])
            for row in group_rows
        ]

        if people and preview_size > 0:
            photo_columns = ", ".join(f"p.{column}" for column in PHOTO_COLUMNS)
            preview_rows = self._query(
                "list_face_group_previews",
                f"SELECT DISTINCT f.face_group_id, {photo_columns}"
                " FROM faces f JOIN photos p ON p.id = f.photo_id"
                " WHERE p.user_id = ? AND list_contains(?::VARCHAR[], f.face_group_id)"
                " ORDER BY f.face_group_id, p.date_taken DESC NULLS LAST, p.id",
                [self.user_id, [person.face_group.id for person in people]],
            )
            by_group = {person.face_group.id: person for person in people}
            for row in preview_rows:
                person = by_group[row[0]]
                if len(person.preview_photos) < preview_size:
                    person.preview_photos.append(self._row_to_photo(row[1:]))

        log_performance("list_face_groups", time.perf_counter() - start_time, user_id=self.user_id, groups=len(people))
        return people

    def _filter_clause(
        self, predicate: FilterPredicate, face_group_ids: list[str] | None = None
    ) -> tuple[str, list[Any]]:
        """Translate a predicate into a WHERE clause and its parameters."""
        clauses = ["user_id = ?"]
        parameters: list[Any] = [self.user_id]

        if predicate.date_from is not None:
            clauses.append("date_taken >= ?")
            parameters.append(to_naive_utc(predicate.date_from))

        if predicate.date_to is not None:
            clauses.append("date_taken < ?")
            parameters.append(to_naive_utc(predicate.date_to))

        if predicate.location_substring:
            fragment = predicate.location_substring.lower()
            clauses.append(
                "(contains(lower(coalesce(location, '')), ?)"
                " OR contains(lower(coalesce(city, '')), ?)"
                " OR contains(lower(coalesce(country, '')), ?))"
            )
            parameters.extend([fragment, fragment, fragment])

        if predicate.tags:
            clauses.append("list_has_any(tags, ?::VARCHAR[])")
            parameters.append(list(predicate.tags))

        if predicate.description_substring:
            clauses.append("contains(lower(coalesce(ai_description, '')), ?)")
            parameters.append(predicate.description_substring.lower())

        if face_group_ids:
            clauses.append("id IN (SELECT photo_id FROM faces WHERE list_contains(?::VARCHAR[], face_group_id))")
            parameters.append(list(face_group_ids))

        return " AND ".join(clauses), parameters

    def find_photos(
        self,
        predicate: FilterPredicate,
        face_group_ids: list[str] | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> list[PhotoRecord]:
        """
        Photos matching a predicate, newest first.

        Args:
            predicate: Parsed filters; empty matches every photo of the user
            face_group_ids: Restrict to photos showing any of these people
            limit: Maximum number of photos to return
            offset: Number of photos to skip

        Returns:
            List of PhotoRecord instances
        """
        start_time = time.perf_counter()
        where, parameters = self._filter_clause(predicate, face_group_ids)

        rows = self._query(
            "find_photos",
            f"{SELECT_PHOTOS} WHERE {where} ORDER BY date_taken DESC NULLS LAST, uploaded_at DESC, id LIMIT ? OFFSET ?",
            [*parameters, limit, offset],
        )
        photos = [self._row_to_photo(row) for row in rows]

        log_performance(
            "find_photos",
            time.perf_counter() - start_time,
            user_id=self.user_id,
            photos_count=len(photos),
            limit=limit,
            offset=offset,
        )
        return photos

    def count_photos(self, predicate: FilterPredicate, face_group_ids: list[str] | None = None) -> int:
        """Number of photos matching a predicate."""
        where, parameters = self._filter_clause(predicate, face_group_ids)
        rows = self._query("count_photos", f"SELECT COUNT(*) FROM photos WHERE {where}", parameters)
        return rows[0][0] if rows else 0

    def get_photos_with_location(self) -> list[PhotoRecord]:
        """
        Photos that have both coordinates, in upload order.

        The order is the seeding order of place clustering, so it is kept
        stable: upload time, then ID.
        """
        rows = self._query(
            "get_photos_with_location",
            f"{SELECT_PHOTOS} WHERE user_id = ? AND latitude IS NOT NULL AND longitude IS NOT NULL"
            " ORDER BY uploaded_at, id",
            [self.user_id],
        )
        return [self._row_to_photo(row) for row in rows]

    def get_photos_in_range(self, start: datetime, end: datetime) -> list[PhotoRecord]:
        """Photos taken in ``[start, end)``, oldest first."""
        rows = self._query(
            "get_photos_in_range",
            f"{SELECT_PHOTOS} WHERE user_id = ? AND date_taken >= ? AND date_taken < ? ORDER BY date_taken, id",
            [self.user_id, to_naive_utc(start), to_naive_utc(end)],
        )
        return [self._row_to_photo(row) for row in rows]


# Global photo store instances
_photo_stores: dict[tuple[str, str], PhotoStore] = {}


def get_photo_store(user_id: str, db_path: str | None = None) -> PhotoStore:
    """
    Get photo store instance for a user.

    Args:
        user_id: User identifier
        db_path: DuckDB file (defaults to IMGSEARCH_DB_PATH)

    Returns:
        PhotoStore: Photo store instance
    """
    resolved_path = str(Path(db_path or get_database_path()))
    key = (user_id, resolved_path)
    if key not in _photo_stores:
        _photo_stores[key] = PhotoStore(user_id, resolved_path)
    return _photo_stores[key]


def cleanup_photo_stores() -> None:
    """Forget all cached photo store instances."""
    _photo_stores.clear()
