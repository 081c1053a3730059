"""Utility modules."""

from adoption_api.utils.pagination import (
    PaginationParams,
    get_pagination,
    page_count,
)

__all__ = [
    "PaginationParams",
    "get_pagination",
    "page_count",
]
