"""
imgsearch - Natural-language search over a personal photo collection

A photo search application with features including:
- Free-text query parsing into structured photo filters
- Place clustering of geotagged photos by proximity
- Travel timeline grouped by calendar month
- Metadata storage with DuckDB
- Streamlit frontend and invoke command-line tasks
"""

__version__ = "0.1.0"
__author__ = "imgsearch"
__description__ = "Natural-language photo search, place clustering and travel timeline"
