# pipe_catalog/services/ranking.py
"""
In-memory ordering, paging and suggestions over merged search results.

Everything here is pure: input lists are never mutated.
"""
from __future__ import annotations
import math
from numbers import Number
from typing import Any, Dict, List, Sequence, Tuple

from pipe_catalog.models import SearchableItem

RELEVANCE = "relevance"

# Vocabulary offered when a search comes back nearly empty
SUGGESTION_TERMS = ("Peterson", "Savinelli", "Virginia", "English", "Aromatic", "Bent", "Straight")
SUGGESTION_THRESHOLD = 3
MAX_SUGGESTIONS = 3

SORT_FIELD_ALIASES: Dict[str, str] = {
    "rating": "averageRating",
}


def relevance_key(item: SearchableItem, query: str) -> Tuple[bool, bool, str]:
    """Exact name match first, then prefix match, then name A-Z."""
    q = query.lower()
    name = item.name.lower()
    return (name != q, not name.startswith(q), item.name.casefold())


def _is_number(v: Any) -> bool:
    return isinstance(v, Number) and not isinstance(v, bool)


def sort_results(
    items: Sequence[SearchableItem],
    query: str,
    sort_by: str = RELEVANCE,
    sort_order: str = "desc",
) -> List[SearchableItem]:
    """
    Stable sort of merged results.

    ``relevance`` ignores ``sort_order``. Any other ``sort_by`` names a field
    of the JSON item shape; missing values compare as "" (or 0 when every
    present value is numeric). ``asc`` sorts ascending, anything else
    descending.
    """
    if sort_by == RELEVANCE:
        return sorted(items, key=lambda it: relevance_key(it, query))

    field = SORT_FIELD_ALIASES.get(sort_by, sort_by)
    values = [it.field_value(field) for it in items]
    present = [v for v in values if v not in (None, "")]
    numeric = bool(present) and all(_is_number(v) for v in present)

    def norm(v: Any) -> Any:
        if numeric:
            return v if _is_number(v) else 0
        return "" if v is None else str(v)

    order = sorted(range(len(items)), key=lambda i: norm(values[i]), reverse=(sort_order != "asc"))
    return [items[i] for i in order]


def paginate(items: Sequence[SearchableItem], page: int, limit: int) -> List[SearchableItem]:
    skip = (page - 1) * limit
    return list(items[skip:skip + limit])


def page_counts(total: int, page: int, limit: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "total_pages": total_pages,
        "has_next_page": page < total_pages,
        "has_previous_page": page > 1,
    }


def suggest(query: str, total: int) -> List[str]:
    if total >= SUGGESTION_THRESHOLD:
        return []
    q = query.lower()
    hits = [t for t in SUGGESTION_TERMS if q in t.lower() or t.lower() in q]
    return hits[:MAX_SUGGESTIONS]
