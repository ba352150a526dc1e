"""
Database schema definitions for imgsearch application.

This module contains SQL schema definitions and database initialization functions.
"""

PHOTOS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS photos (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    filename TEXT NOT NULL,
    thumbnail_url TEXT,
    date_taken TIMESTAMP,
    latitude DOUBLE,
    longitude DOUBLE,
    location TEXT,
    city TEXT,
    country TEXT,
    tags VARCHAR[],
    ai_description TEXT,
    uploaded_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

FACE_GROUPS_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS face_groups (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    name TEXT
);
"""

FACES_TABLE_SCHEMA = """
CREATE TABLE IF NOT EXISTS faces (
    id TEXT PRIMARY KEY,
    photo_id TEXT NOT NULL,
    face_group_id TEXT,
    confidence DOUBLE
);
"""

TABLE_SCHEMAS = [PHOTOS_TABLE_SCHEMA, FACE_GROUPS_TABLE_SCHEMA, FACES_TABLE_SCHEMA]

# Indexes for performance optimization
TABLE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_photos_user_id ON photos(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_photos_user_date_taken ON photos(user_id, date_taken);",
    "CREATE INDEX IF NOT EXISTS idx_face_groups_user_id ON face_groups(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_faces_photo_id ON faces(photo_id);",
]

ALL_SCHEMA_STATEMENTS = TABLE_SCHEMAS + TABLE_INDEXES

PHOTO_COLUMNS = (
    "id",
    "user_id",
    "filename",
    "thumbnail_url",
    "date_taken",
    "latitude",
    "longitude",
    "location",
    "city",
    "country",
    "tags",
    "ai_description",
    "uploaded_at",
)

REQUIRED_COLUMNS = {
    "photos": set(PHOTO_COLUMNS),
    "face_groups": {"id", "user_id", "name"},
    "faces": {"id", "photo_id", "face_group_id", "confidence"},
}


def get_schema_statements() -> list[str]:
    """
    Get all database schema creation statements.

    Returns:
        List of SQL statements to create tables and indexes
    """
    return ALL_SCHEMA_STATEMENTS


def validate_schema_compatibility() -> bool:
    """
    Validate that the schema is compatible with the PhotoRecord model.

    Checks that every column the store reads is declared in the
    corresponding CREATE TABLE statement.

    Returns:
        True if schema is compatible, False otherwise
    """
    schemas = {
        "photos": PHOTOS_TABLE_SCHEMA,
        "face_groups": FACE_GROUPS_TABLE_SCHEMA,
        "faces": FACES_TABLE_SCHEMA,
    }

    for table, columns in REQUIRED_COLUMNS.items():
        schema_lower = schemas[table].lower()
        for column in columns:
            if f"    {column} " not in schema_lower:
                return False

    return True
