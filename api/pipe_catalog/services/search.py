# pipe_catalog/services/search.py
"""
Catalog Search Service - cross-entity aggregation.

Handles:
- Per-variant fan-out (pipes, tobaccos, accessories) with substring predicates
- Batched rating aggregates and featured images per variant
- Normalization into SearchableItem
- Merge, sort, paginate, suggestions
"""
from __future__ import annotations
import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from sqlalchemy import select, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pipe_catalog.db_models import Pipe, Tobacco, Accessory, Rating, Image, ItemType
from pipe_catalog.errors import AggregationFailure
from pipe_catalog.models import SearchQuery, SearchableItem, SearchResponse
from pipe_catalog.services import ranking

logger = logging.getLogger(__name__)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the query matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


# ============================================================================
# Per-variant transforms
# ============================================================================

def _rating_of(stats: Dict[str, Tuple[float, int]], item_id: str) -> Tuple[float, int]:
    return stats.get(item_id, (0.0, 0))


def _joined(*parts: Optional[str]) -> str:
    return " - ".join(p or "" for p in parts)


def transform_pipe(row: Pipe, stats, images, image_prefix: str) -> SearchableItem:
    avg, count = _rating_of(stats, row.id)
    return SearchableItem(
        id=row.id,
        name=row.name,
        manufacturer=row.brand,
        type="pipe",
        images=_image_urls(images, row.id, image_prefix),
        description=_joined(row.material, row.shape, row.finish),
        average_rating=avg,
        total_ratings=count,
        category=row.shape or "",
        brand=row.brand,
        shape=row.shape,
    )


def transform_tobacco(row: Tobacco, stats, images, image_prefix: str) -> SearchableItem:
    avg, count = _rating_of(stats, row.id)
    return SearchableItem(
        id=row.id,
        name=row.name,
        manufacturer=row.brand,
        type="tobacco",
        images=_image_urls(images, row.id, image_prefix),
        description=_joined(row.blend_type, row.cut),
        average_rating=avg,
        total_ratings=count,
        category=row.blend_type or "",
        brand=row.brand,
        blend_type=row.blend_type,
    )


def transform_accessory(row: Accessory, stats, images, image_prefix: str) -> SearchableItem:
    avg, count = _rating_of(stats, row.id)
    return SearchableItem(
        id=row.id,
        name=row.name,
        manufacturer=row.brand or "N/A",
        type="accessory",
        images=_image_urls(images, row.id, image_prefix),
        description=row.description or "",
        average_rating=avg,
        total_ratings=count,
        category=row.category,
    )


def _image_urls(images: Dict[str, str], item_id: str, image_prefix: str) -> List[str]:
    filename = images.get(item_id)
    return [f"{image_prefix.rstrip('/')}/{filename}"] if filename else []


class VariantSpec:
    """How one item variant is searched and projected."""

    def __init__(
        self,
        item_type: ItemType,
        model: Type[Any],
        search_fields: Sequence[str],
        transform: Callable[..., SearchableItem],
        category_field: Optional[str] = None,
    ):
        self.item_type = item_type
        self.model = model
        self.search_fields = tuple(search_fields)
        self.transform = transform
        self.category_field = category_field

    def where(self, query: SearchQuery):
        pattern = f"%{escape_like(query.q)}%"
        model = self.model
        clauses = [
            model.is_active.is_(True),
            or_(*(getattr(model, f).ilike(pattern, escape="\\") for f in self.search_fields)),
        ]
        if query.brands:
            clauses.append(model.brand.in_(query.brands))
        if query.categories and self.category_field:
            clauses.append(getattr(model, self.category_field).in_(query.categories))
        return and_(*clauses)


VARIANT_SPECS: Dict[str, VariantSpec] = {
    "pipe": VariantSpec(
        ItemType.pipe, Pipe,
        ("name", "brand", "material", "shape", "finish", "country"),
        transform_pipe,
    ),
    "tobacco": VariantSpec(
        ItemType.tobacco, Tobacco,
        ("name", "brand", "blend_type", "contents", "cut"),
        transform_tobacco,
    ),
    "accessory": VariantSpec(
        ItemType.accessory, Accessory,
        ("name", "brand", "category", "description"),
        transform_accessory,
        category_field="category",
    ),
}


def build_item(variant: str, row: Any, stats, images, image_prefix: str) -> SearchableItem:
    """Common factory: dispatch a fetched row to its variant transform."""
    return VARIANT_SPECS[variant].transform(row, stats, images, image_prefix)


# ============================================================================
# Aggregator
# ============================================================================

class CatalogSearchService:
    """Runs a SearchQuery against the three item repositories."""

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        image_prefix: str = "/api/images",
    ):
        self.sessions = sessions
        self.image_prefix = image_prefix

    # =========================================================================
    # Repository lookups
    # =========================================================================

    async def fetch_rows(self, spec: VariantSpec, query: SearchQuery) -> List[Any]:
        model = spec.model
        stmt = (
            select(model)
            .where(spec.where(query))
            .order_by(model.created_at, model.id)
            .limit(query.limit)
        )
        async with self.sessions() as db:
            result = await db.execute(stmt)
            return list(result.scalars().all())

    async def fetch_rating_stats(self, item_type: ItemType, ids: List[str]) -> Dict[str, Tuple[float, int]]:
        """item_id -> (average rating, number of ratings)."""
        if not ids:
            return {}
        stmt = (
            select(Rating.item_id, func.avg(Rating.rating), func.count(Rating.id))
            .where(Rating.item_id.in_(ids), Rating.item_type == item_type)
            .group_by(Rating.item_id)
        )
        async with self.sessions() as db:
            result = await db.execute(stmt)
            return {item_id: (float(avg or 0), int(cnt)) for item_id, avg, cnt in result.all()}

    async def fetch_featured_images(self, item_type: ItemType, ids: List[str]) -> Dict[str, str]:
        """item_id -> filename of its featured image."""
        if not ids:
            return {}
        stmt = (
            select(Image.item_id, Image.filename)
            .where(
                Image.item_id.in_(ids),
                Image.item_type == item_type,
                Image.is_featured.is_(True),
            )
            .order_by(Image.sort_order, Image.created_at)
        )
        async with self.sessions() as db:
            result = await db.execute(stmt)
            featured: Dict[str, str] = {}
            for item_id, filename in result.all():
                featured.setdefault(item_id, filename)
            return featured

    async def search_variant(self, variant: str, query: SearchQuery) -> List[SearchableItem]:
        spec = VARIANT_SPECS[variant]
        rows = await self.fetch_rows(spec, query)
        ids = [r.id for r in rows]
        stats, images = await asyncio.gather(
            self.fetch_rating_stats(spec.item_type, ids),
            self.fetch_featured_images(spec.item_type, ids),
        )
        return [build_item(variant, r, stats, images, self.image_prefix) for r in rows]

    # =========================================================================
    # Entry point
    # =========================================================================

    async def search(self, query: SearchQuery) -> SearchResponse:
        variants = query.selected_variants()
        try:
            per_variant = await asyncio.gather(
                *(self.search_variant(v, query) for v in variants)
            )
        except Exception as e:
            logger.exception("Search failed for q=%r variants=%s", query.q, variants)
            raise AggregationFailure() from e

        # gather keeps argument order: pipes, tobaccos, accessories
        merged: List[SearchableItem] = [item for chunk in per_variant for item in chunk]
        ordered = ranking.sort_results(merged, query.q, query.sort_by, query.sort_order)
        total = len(ordered)
        counts = ranking.page_counts(total, query.page, query.limit)

        logger.info(
            "search q=%r variants=%s page=%s limit=%s total=%s",
            query.q, variants, query.page, query.limit, total,
        )
        return SearchResponse(
            results=ranking.paginate(ordered, query.page, query.limit),
            total=total,
            page=query.page,
            suggestions=ranking.suggest(query.q, total),
            **counts,
        )
