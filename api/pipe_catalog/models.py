from typing import Optional, List, Literal, Dict, Any
from pydantic import BaseModel, Field, ConfigDict

from pipe_catalog.errors import EmptyQuery, MalformedPagination

Variant = Literal["pipe", "tobacco", "accessory"]
VARIANTS = ("pipe", "tobacco", "accessory")


def split_csv(raw: Optional[str]) -> List[str]:
    return [p for p in (raw or "").split(",") if p]


def _parse_positive_int(raw: Any, message: str, param: str, maximum: Optional[int] = None) -> int:
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        raise MalformedPagination(message, param)
    if value < 1 or (maximum is not None and value > maximum):
        raise MalformedPagination(message, param)
    return value


class SearchQuery(BaseModel):
    q: str
    page: int = 1
    limit: int = 12
    types: List[str] = Field(default_factory=list)
    brands: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    sort_by: str = "relevance"
    sort_order: str = "desc"

    @classmethod
    def from_params(
        cls,
        q: Optional[str],
        page: Optional[str] = "1",
        limit: Optional[str] = "12",
        types: Optional[str] = "",
        brands: Optional[str] = "",
        categories: Optional[str] = "",
        sort_by: Optional[str] = "relevance",
        sort_order: Optional[str] = "desc",
        max_limit: int = 100,
    ) -> "SearchQuery":
        """
        Build a query from raw query-string values.

        Raises EmptyQuery for a blank ``q`` and MalformedPagination for a
        non-integer or out-of-range ``page``/``limit``.
        """
        q = q or ""
        if not q.strip():
            raise EmptyQuery()
        return cls(
            q=q,
            page=_parse_positive_int(page, "Invalid page parameter", "page"),
            limit=_parse_positive_int(
                limit, f"Invalid limit parameter (1-{max_limit})", "limit", maximum=max_limit
            ),
            types=split_csv(types),
            brands=split_csv(brands),
            categories=split_csv(categories),
            sort_by=sort_by or "relevance",
            sort_order=sort_order or "desc",
        )

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def selected_variants(self) -> List[str]:
        """Variants to fan out to, in merge order. Empty ``types`` means all."""
        if not self.types:
            return list(VARIANTS)
        return [v for v in VARIANTS if v in self.types]


class SearchableItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    manufacturer: str
    type: Variant
    images: List[str] = Field(default_factory=list)
    description: str = ""
    average_rating: float = Field(0.0, alias="averageRating")
    total_ratings: int = Field(0, alias="totalRatings")
    category: str = ""
    brand: Optional[str] = None
    shape: Optional[str] = None
    blend_type: Optional[str] = Field(None, alias="blendType")

    def field_value(self, name: str) -> Any:
        """Look a field up by its JSON name or attribute name; None when absent."""
        data: Dict[str, Any] = self.model_dump(by_alias=True)
        if name in data:
            return data[name]
        return getattr(self, name, None) if name in type(self).model_fields else None


class SearchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    results: List[SearchableItem]
    total: int
    page: int
    total_pages: int = Field(alias="totalPages")
    has_next_page: bool = Field(alias="hasNextPage")
    has_previous_page: bool = Field(alias="hasPreviousPage")
    suggestions: List[str] = Field(default_factory=list)
