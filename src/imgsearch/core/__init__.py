"""
Core search algorithms for imgsearch application.

These are pure functions over in-memory inputs:
- parse_query: free-text query to FilterPredicate
- cluster_by_location: greedy seed-radius place clustering
- aggregate_timeline: calendar-month buckets for one year
- haversine_km: great-circle distance on a spherical Earth
"""

from .clustering import DEFAULT_RADIUS_KM, cluster_by_location
from .geo import EARTH_RADIUS_KM, haversine_km
from .query_parser import DEFAULT_PARSER_CONFIG, ParserConfig, parse_query
from .timeline import aggregate_timeline

__all__ = [
    "DEFAULT_PARSER_CONFIG",
    "DEFAULT_RADIUS_KM",
    "EARTH_RADIUS_KM",
    "ParserConfig",
    "aggregate_timeline",
    "cluster_by_location",
    "haversine_km",
    "parse_query",
]
