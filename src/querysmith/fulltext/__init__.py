"""Full-text search module.

This module provides Typesense integration for Querysmith:
- Collection creation from declared field schemas
- Document import, update and deletion (by id or by structured filter)
- Keyword search with structured filters and facets
- Vector search through multi-search
"""

from querysmith.fulltext.client import IMPORT_OPTIONS, TypesenseCollection

__all__ = [
    "IMPORT_OPTIONS",
    "TypesenseCollection",
]
