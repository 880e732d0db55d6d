# -*- coding: utf-8 -*-
"""
Search page controller.

Owns the state of one search session (query, filters, page, sort, results)
and talks to ``GET /api/search``. The view layer reads the public attributes
and reacts to two hooks:

- ``navigate(address)``: the shallow address bar update after a successful
  search (``q``, ``page`` and the first selected type only);
- ``scroll_to_top()``: fired on page changes.

Requests are synchronous (``requests``). Every request gets a sequence
number; a response that is not the latest one is dropped, so a slow earlier
call can never overwrite a newer result.
"""
from __future__ import annotations

import enum
import logging
import math
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlencode

import requests

from pipe_catalog.models import SearchableItem
from pipe_catalog.settings import settings

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/search"
SEARCH_PAGE_PATH = "/buscar"
ITEMS_PER_PAGE = 12
MAX_VISIBLE_PAGES = 5
FILTER_KINDS = ("type", "brands", "categories")

# Shortcuts offered on the empty search page
POPULAR_SEARCHES = (
    "Peterson", "Savinelli", "Dunhill", "Virginia", "English", "Aromatic",
    "Bent", "Straight", "Bulldog", "Dublin", "Isqueiros", "Ferramentas",
)

# Options rendered in the filter sidebar, keyed by filter kind
FILTER_OPTIONS: Dict[str, Tuple[Any, ...]] = {
    "type": (("pipe", "Cachimbos"), ("tobacco", "Tabacos"), ("accessory", "Acessórios")),
    "brands": (
        "Peterson", "Savinelli", "Dunhill", "Stanwell", "Brigham", "Chacom",
        "Cornell & Diehl", "McClelland", "Samuel Gawith", "Esoterica", "Zippo", "Colibri",
    ),
    "categories": (
        "Bent", "Straight", "Bulldog", "Dublin", "Virginia", "English", "Aromatic",
        "Isqueiros", "Ferramentas", "Limpeza", "Armazenamento",
    ),
}

# (sortBy, sortOrder, label) in dropdown order
SORT_OPTIONS = (
    ("relevance", "desc", "Mais Relevante"),
    ("name", "asc", "Nome (A-Z)"),
    ("name", "desc", "Nome (Z-A)"),
    ("brand", "asc", "Marca (A-Z)"),
    ("rating", "desc", "Melhor Avaliação"),
    ("createdAt", "desc", "Mais Recentes"),
)
TYPE_VALUES = tuple(value for value, _ in FILTER_OPTIONS["type"])


class SearchStatus(str, enum.Enum):
    idle = "idle"
    loading = "loading"
    loaded = "loaded"
    empty = "empty"


@dataclass
class SearchFilters:
    type: List[str] = field(default_factory=list)
    brands: List[str] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)
    sort_by: str = "relevance"
    sort_order: str = "desc"

    def to_params(self) -> Dict[str, str]:
        params = {"sortBy": self.sort_by, "sortOrder": self.sort_order}
        if self.type:
            params["types"] = ",".join(self.type)
        if self.brands:
            params["brands"] = ",".join(self.brands)
        if self.categories:
            params["categories"] = ",".join(self.categories)
        return params


def _new_session() -> requests.Session:
    s = requests.Session()
    s.headers.update({"Accept": "application/json"})
    return s


class SearchController:
    """State machine behind the search page: idle -> loading -> loaded/empty."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Any = None,
        navigate: Optional[Callable[[str], None]] = None,
        scroll_to_top: Optional[Callable[[], None]] = None,
        items_per_page: int = ITEMS_PER_PAGE,
        timeout: Optional[float] = None,
    ):
        base = settings.CATALOG_API_URL if base_url is None else base_url
        self.endpoint = f"{base.rstrip('/')}{SEARCH_PATH}"
        self.session = session if session is not None else _new_session()
        self.navigate = navigate
        self.scroll_to_top = scroll_to_top
        self.items_per_page = items_per_page
        self.timeout = settings.CLIENT_TIMEOUT if timeout is None else timeout

        self.status = SearchStatus.idle
        self.query = ""
        self.page = 1
        self.filters = SearchFilters()
        self.results: List[SearchableItem] = []
        self.total = 0
        self.suggestions: List[str] = []
        self.address = ""

        self._lock = threading.Lock()
        self._seq = 0

    # ------------------------------------------------------------------
    # Derived view state
    # ------------------------------------------------------------------
    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.items_per_page)

    @property
    def has_query(self) -> bool:
        return bool(self.query.strip())

    @property
    def active_filters_count(self) -> int:
        return len(self.filters.type) + len(self.filters.brands) + len(self.filters.categories)

    def visible_pages(self) -> List[int]:
        """Up to five page numbers around the current page."""
        total_pages = self.total_pages
        start = max(1, min(total_pages - (MAX_VISIBLE_PAGES - 1), self.page - 2))
        return [p for p in range(start, start + min(MAX_VISIBLE_PAGES, total_pages)) if p <= total_pages]

    def showing(self) -> tuple:
        """(first, last) 1-based positions shown on the current page."""
        n = self.items_per_page
        return (min((self.page - 1) * n + 1, self.total), min(self.page * n, self.total))

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    def search(self, query: str) -> None:
        self.query = query
        self.page = 1
        self._perform(query, 1, self.filters)

    def set_filter(self, kind: str, value: str) -> None:
        if kind not in FILTER_KINDS:
            raise ValueError(f"Unknown filter kind: {kind!r}")
        current = list(getattr(self.filters, kind))
        if value in current:
            current.remove(value)
        else:
            current.append(value)
        self.filters = replace(self.filters, **{kind: current})
        self.page = 1
        self._perform(self.query, 1, self.filters)

    def set_sort(self, sort_by: str, sort_order: str) -> None:
        self.filters = replace(self.filters, sort_by=sort_by, sort_order=sort_order)
        self._perform(self.query, self.page, self.filters)

    def set_sort_option(self, value: str) -> None:
        """Apply a dropdown value such as ``name-asc``."""
        sort_by, _, sort_order = value.partition("-")
        self.set_sort(sort_by, sort_order or "desc")

    def set_page(self, page: int) -> None:
        self.page = page
        self._perform(self.query, page, self.filters)
        if self.scroll_to_top is not None:
            self.scroll_to_top()

    def clear_filters(self) -> None:
        self.filters = SearchFilters()
        self.page = 1
        if self.query:
            self._perform(self.query, 1, self.filters)

    def restore(self, address: str) -> None:
        """Initialize from an address query string such as ``q=bent&type=pipe&page=2``."""
        qs = parse_qs(address.split("?", 1)[-1])
        q = (qs.get("q") or [""])[0]
        if not q:
            return
        url_type = (qs.get("type") or [""])[0]
        if url_type in TYPE_VALUES:
            self.filters = replace(self.filters, type=[url_type])
        try:
            page = int((qs.get("page") or ["1"])[0]) or 1
        except ValueError:
            page = 1
        self.query = q
        self.page = page
        self._perform(q, page, self.filters)

    # ------------------------------------------------------------------
    # Request cycle
    # ------------------------------------------------------------------
    def _build_params(self, query: str, page: int, filters: SearchFilters) -> Dict[str, str]:
        params = {"q": query, "page": str(page), "limit": str(self.items_per_page)}
        params.update(filters.to_params())
        return params

    def _build_address(self, query: str, page: int, filters: SearchFilters) -> str:
        params = {"q": query, "page": str(page)}
        if filters.type:
            params["type"] = filters.type[0]
        return urlencode(params)

    def _perform(self, query: str, page: int, filters: SearchFilters) -> None:
        if not query.strip():
            with self._lock:
                self._seq += 1  # outdates anything still in flight
                self.results = []
                self.total = 0
                self.suggestions = []
                if self.status != SearchStatus.idle:
                    self.status = SearchStatus.empty
            return

        with self._lock:
            self._seq += 1
            seq = self._seq
            self.status = SearchStatus.loading

        try:
            resp = self.session.get(
                self.endpoint,
                params=self._build_params(query, page, filters),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
            results = [SearchableItem.model_validate(r) for r in data.get("results") or []]
            total = int(data.get("total") or 0)
            suggestions = list(data.get("suggestions") or [])
        except Exception as e:
            logger.error("Search error for q=%r: %s", query, e)
            with self._lock:
                if seq != self._seq:
                    return
                self.results = []
                self.total = 0
                self.suggestions = []
                self.status = SearchStatus.empty
            return

        with self._lock:
            if seq != self._seq:
                logger.debug("dropping stale response seq=%s (latest %s)", seq, self._seq)
                return
            self.results = results
            self.total = total
            self.suggestions = suggestions
            self.status = SearchStatus.loaded if results else SearchStatus.empty
            self.address = self._build_address(query, page, filters)
            address = self.address

        if self.navigate is not None:
            self.navigate(address)
