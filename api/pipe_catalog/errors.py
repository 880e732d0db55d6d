# pipe_catalog/errors.py
from __future__ import annotations
from typing import Optional


class SearchError(Exception):
    """Base for errors rendered as ``{"message": ...}`` with an HTTP status."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code

        super().__init__(self.message)


class EmptyQuery(SearchError):
    status_code = 400

    def __init__(self, message: str = "Query is required"):
        super().__init__(message)


class MalformedPagination(SearchError):
    status_code = 400

    def __init__(self, message: str, param: str):
        self.param = param
        super().__init__(message)


class AggregationFailure(SearchError):
    status_code = 500

    def __init__(self, message: str = "Internal server error", item_type: Optional[str] = None):
        self.item_type = item_type
        super().__init__(message)
