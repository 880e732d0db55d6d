"""Parsing of raw search parameters into a SearchQuery."""
import pytest

from pipe_catalog.errors import EmptyQuery, MalformedPagination
from pipe_catalog.models import SearchQuery, split_csv


@pytest.mark.parametrize("q", [None, "", "   ", "\t\n"])
def test_blank_query_is_rejected(q):
    with pytest.raises(EmptyQuery) as exc:
        SearchQuery.from_params(q=q)
    assert exc.value.status_code == 400
    assert exc.value.message == "Query is required"


def test_defaults():
    query = SearchQuery.from_params(q="Peterson")
    assert query.page == 1
    assert query.limit == 12
    assert query.types == [] and query.brands == [] and query.categories == []
    assert query.sort_by == "relevance"
    assert query.sort_order == "desc"
    assert query.skip == 0


def test_query_text_is_kept_untrimmed():
    assert SearchQuery.from_params(q=" bent ").q == " bent "


@pytest.mark.parametrize("page", ["abc", "0", "-1", "1.5", ""])
def test_malformed_page(page):
    with pytest.raises(MalformedPagination) as exc:
        SearchQuery.from_params(q="bent", page=page)
    assert exc.value.param == "page"
    assert exc.value.message == "Invalid page parameter"


@pytest.mark.parametrize("limit", ["x", "0", "101", "-5"])
def test_malformed_limit(limit):
    with pytest.raises(MalformedPagination) as exc:
        SearchQuery.from_params(q="bent", limit=limit)
    assert exc.value.param == "limit"
    assert exc.value.message == "Invalid limit parameter (1-100)"


def test_limit_bound_follows_max_limit():
    assert SearchQuery.from_params(q="bent", limit="250", max_limit=500).limit == 250


def test_skip_from_page_and_limit():
    query = SearchQuery.from_params(q="bent", page="3", limit="12")
    assert query.skip == 24


def test_csv_lists_drop_empty_segments():
    assert split_csv("pipe,,tobacco,") == ["pipe", "tobacco"]
    assert split_csv("") == []
    assert split_csv(None) == []
    query = SearchQuery.from_params(q="x", brands="Peterson,,Savinelli", categories="Isqueiros")
    assert query.brands == ["Peterson", "Savinelli"]
    assert query.categories == ["Isqueiros"]


def test_selected_variants_all_when_no_type_filter():
    assert SearchQuery.from_params(q="x").selected_variants() == ["pipe", "tobacco", "accessory"]


def test_selected_variants_keep_merge_order():
    query = SearchQuery.from_params(q="x", types="accessory,pipe")
    assert query.selected_variants() == ["pipe", "accessory"]


def test_unknown_type_selects_nothing():
    assert SearchQuery.from_params(q="x", types="cigar").selected_variants() == []
