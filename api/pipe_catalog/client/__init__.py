"""
HTTP consumers of the catalog search API (search page and type-ahead box).
"""
from pipe_catalog.client.controller import (
    FILTER_OPTIONS,
    POPULAR_SEARCHES,
    SORT_OPTIONS,
    SearchController,
    SearchFilters,
    SearchStatus,
)
from pipe_catalog.client.typeahead import TypeaheadBox

__all__ = [
    "FILTER_OPTIONS",
    "POPULAR_SEARCHES",
    "SORT_OPTIONS",
    "SearchController",
    "SearchFilters",
    "SearchStatus",
    "TypeaheadBox",
]
