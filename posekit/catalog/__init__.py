"""
Catalog module - Text search and filtering over pose catalog entries
"""

from .search import CatalogItem, CatalogSearch, SearchFilters, SearchResult

__all__ = [
    "CatalogItem",
    "CatalogSearch",
    "SearchFilters",
    "SearchResult",
]
