# pipe_catalog/routers/search.py
"""
Search Router - cross-entity catalog search.
"""
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pipe_catalog.database import get_sessionmaker
from pipe_catalog.models import SearchQuery, SearchResponse
from pipe_catalog.services import CatalogSearchService
from pipe_catalog.settings import settings

router = APIRouter(prefix="/api", tags=["search"])


@router.get(
    "/search",
    response_model=SearchResponse,
    response_model_exclude_none=True,
)
async def search_catalog(
    q: Optional[str] = Query(None),
    page: str = Query("1"),
    limit: Optional[str] = Query(None),
    types: str = Query(""),
    brands: str = Query(""),
    categories: str = Query(""),
    sort_by: str = Query("relevance", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    sessions: async_sessionmaker[AsyncSession] = Depends(get_sessionmaker),
):
    """
    Search pipes, tobaccos and accessories at once.

    400 when ``q`` is blank or paging is malformed, 500 when any repository
    lookup fails (no partial results).
    """
    query = SearchQuery.from_params(
        q=q,
        page=page,
        limit=limit if limit is not None else str(settings.SEARCH_DEFAULT_LIMIT),
        types=types,
        brands=brands,
        categories=categories,
        sort_by=sort_by,
        sort_order=sort_order,
        max_limit=settings.SEARCH_MAX_LIMIT,
    )
    service = CatalogSearchService(sessions, image_prefix=settings.IMAGE_URL_PREFIX)
    return await service.search(query)
