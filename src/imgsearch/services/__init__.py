"""
Services module for imgsearch application.

This module contains the service classes that handle business logic:
- PhotoStore: DuckDB photo, face group and face storage
- SearchService: query parsing, place clustering and timeline orchestration
"""

from .photo_store import PhotoStore, cleanup_photo_stores, get_photo_store
from .search import SearchResult, SearchService, get_search_service

__all__ = [
    "PhotoStore",
    "SearchResult",
    "SearchService",
    "cleanup_photo_stores",
    "get_photo_store",
    "get_search_service",
]
