"""
Models module for imgsearch application.

This module contains data models and schemas:
- PhotoRecord / FaceGroup: photos and the people found in them
- FilterPredicate: structured filter parsed from a search query
- GeoItem / Cluster: place clustering input and output
- TimeBucket: one month of the travel timeline
- DatabaseManager: DuckDB connection and schema management
"""

from .cluster import Cluster, GeoItem
from .database import DatabaseManager, create_database, get_database_manager
from .filters import FilterPredicate
from .photo import FaceGroup, PhotoRecord
from .schema import get_schema_statements, validate_schema_compatibility
from .timeline import TimeBucket

__all__ = [
    "Cluster",
    "DatabaseManager",
    "FaceGroup",
    "FilterPredicate",
    "GeoItem",
    "PhotoRecord",
    "TimeBucket",
    "create_database",
    "get_database_manager",
    "get_schema_statements",
    "validate_schema_compatibility",
]
