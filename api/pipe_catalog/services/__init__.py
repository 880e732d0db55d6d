"""
Business logic services for the Pipe Catalog.
"""
from pipe_catalog.services.search import CatalogSearchService

__all__ = [
    "CatalogSearchService",
]
