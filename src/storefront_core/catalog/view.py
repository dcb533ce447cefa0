"""Stateful catalog view: products, filters and the current page for one session."""

import logging
from collections.abc import Sequence
from typing import Any

from storefront_core.catalog.engine import CatalogFilterEngine, CatalogSummary
from storefront_core.catalog.pagination import clamp_page, page_numbers, paginate, total_pages
from storefront_core.exceptions import CatalogFetchError
from storefront_core.integrations.base import ProductSource
from storefront_core.models.filters import FilterState, NumericRange, SortKey
from storefront_core.models.product import Product

logger = logging.getLogger(__name__)


class CatalogView:
    """
    Explicitly constructed catalog state container.

    Holds the loaded products, the active filters and the current page. Any change
    that can alter the filtered set resets the page to 1; changing only the sort
    order keeps it. Derived results are recomputed lazily after each change.
    """

    def __init__(
        self,
        engine: CatalogFilterEngine,
        page_size: int = 12,
        products: Sequence[Product] | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        self.engine = engine
        self.page_size = page_size
        self._products: list[Product] = list(products or [])
        self._filters = FilterState()
        self._page = 1
        self._results: list[Product] | None = None
        self.loading = False
        self.error: str | None = None

    # -- state ---------------------------------------------------------------

    @property
    def products(self) -> list[Product]:
        return list(self._products)

    @property
    def filters(self) -> FilterState:
        return self._filters

    @property
    def current_page(self) -> int:
        return self._page

    def set_products(self, products: Sequence[Product]) -> None:
        self._products = list(products)
        self._page = 1
        self._results = None

    def _apply(self, filters: FilterState, reset_page: bool = True) -> None:
        self._filters = filters
        self._results = None
        if reset_page:
            self._page = 1

    def update_filters(self, **changes: Any) -> FilterState:
        """Replace top-level filter fields and reset to page 1."""
        self._apply(self._filters.with_updates(**changes))
        return self._filters

    def set_search(self, search: str) -> None:
        self.update_filters(search=search)

    def set_categorical(self, dimension: str, value: str) -> None:
        self.update_filters(categorical={**self._filters.categorical, dimension: value})

    def set_range(self, dimension: str, minimum: str = "", maximum: str = "") -> None:
        ranges = {**self._filters.ranges, dimension: NumericRange(min=minimum, max=maximum)}
        self.update_filters(ranges=ranges)

    def set_sort(self, sort_by: SortKey | str) -> None:
        """Change the sort order without leaving the current page."""
        self._apply(self._filters.with_updates(sort_by=sort_by), reset_page=False)

    def clear_filters(self) -> None:
        self._apply(FilterState())

    # -- pagination ----------------------------------------------------------

    def set_page(self, page: int) -> bool:
        """Go to ``page`` if it exists. Returns False and keeps the page otherwise."""
        if 1 <= page <= self.total_pages:
            self._page = page
            return True
        return False

    def next_page(self) -> None:
        self._page = clamp_page(self._page + 1, self.total_pages)

    def previous_page(self) -> None:
        self._page = clamp_page(self._page - 1, self.total_pages)

    # -- derived -------------------------------------------------------------

    @property
    def results(self) -> list[Product]:
        if self._results is None:
            self._results = self.engine.compute(self._products, self._filters)
        return self._results

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.results), self.page_size)

    @property
    def page_items(self) -> list[Product]:
        return paginate(self.results, self._page, self.page_size)

    @property
    def page_numbers(self) -> list[int]:
        return page_numbers(self._page, self.total_pages)

    @property
    def options(self) -> dict[str, list[str]]:
        return self.engine.filter_options(self._products)

    def suggestions(self, term: str, limit: int = 5, min_length: int = 2) -> list[str]:
        return self.engine.suggestions(self._products, term, limit=limit, min_length=min_length)

    def summary(self) -> CatalogSummary:
        return self.engine.summarize(self._products)

    # -- loading -------------------------------------------------------------

    async def load(self, source: ProductSource) -> bool:
        """
        Fetch the category's products from ``source``.

        On failure the previous products are cleared and ``error`` holds the
        message; calling ``load`` again is the retry.

        Returns:
            True if the listing was loaded.
        """
        self.loading = True
        self.error = None
        try:
            listing = await source.list_products(self.engine.category)
        except CatalogFetchError as e:
            logger.error(f"Failed to load {self.engine.category.value} catalog: {e.message}")
            self.set_products([])
            self.error = e.message
            return False
        finally:
            self.loading = False

        self.set_products(listing.products)
        logger.info(f"Loaded {len(listing.products)} {self.engine.category.value} products")
        return True
