"""Catalog filter engine: predicates, category profiles, sorting and pagination."""

from storefront_core.catalog.categories import (
    BOOK_PROFILE,
    FLOWER_PROFILE,
    PROFILES,
    STATIONARY_PROFILE,
    CategoryProfile,
    get_profile,
)
from storefront_core.catalog.engine import CatalogFilterEngine, CatalogSummary
from storefront_core.catalog.pagination import Page, page_numbers, paginate, total_pages
from storefront_core.catalog.predicates import parse_bound
from storefront_core.catalog.view import CatalogView

__all__ = [
    "BOOK_PROFILE",
    "FLOWER_PROFILE",
    "PROFILES",
    "STATIONARY_PROFILE",
    "CatalogFilterEngine",
    "CatalogSummary",
    "CatalogView",
    "CategoryProfile",
    "Page",
    "get_profile",
    "page_numbers",
    "paginate",
    "parse_bound",
    "total_pages",
]
