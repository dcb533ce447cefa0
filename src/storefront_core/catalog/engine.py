"""Catalog filter engine: filter, sort and paginate a product list."""

import logging
from collections import Counter
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from storefront_core.catalog.categories import CategoryProfile, get_profile
from storefront_core.catalog.pagination import Page, build_page, paginate
from storefront_core.catalog.predicates import (
    DEFAULT_EXPIRING_SOON,
    matches_categorical,
    matches_discount,
    matches_expiry,
    matches_range,
    matches_rating,
    matches_search,
    matches_stock,
)
from storefront_core.catalog.sorting import Entry, sort_entries
from storefront_core.exceptions import InvalidEngineCallError
from storefront_core.models.filters import ExpiryFilter, FilterState
from storefront_core.models.product import Product, ProductCategory

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CatalogSummary(BaseModel):
    """Aggregate figures over a category's products."""

    total: int = 0
    in_stock: int = 0
    out_of_stock: int = 0
    on_sale: int = 0
    average_price: float = 0.0
    average_rating: float = 0.0
    distributions: dict[str, dict[str, int]] = Field(default_factory=dict)


class CatalogFilterEngine:
    """
    Pure filter/sort/paginate pipeline for one product category.

    The engine holds no state besides its configuration; ``compute`` can be called
    on every input change. Detail fields are only read by the predicates and sort
    key that are active, so a partial or malformed detail record excludes its
    product only when one of those fails for it. Such failures are logged and the
    rest of the computation continues.
    """

    def __init__(
        self,
        profile: CategoryProfile | ProductCategory | str,
        clock: Clock | None = None,
        expiring_soon: timedelta = DEFAULT_EXPIRING_SOON,
    ) -> None:
        """
        Initialize the engine.

        Args:
            profile: Category profile, or a category name to look one up.
            clock: Returns the current time for expiry filtering (UTC now by default).
            expiring_soon: Window for the expiring-soon expiry filter.
        """
        if not isinstance(profile, CategoryProfile):
            profile = get_profile(profile)
        self.profile = profile
        self.clock = clock or utc_now
        self.expiring_soon = expiring_soon

    @property
    def category(self) -> ProductCategory:
        return self.profile.category

    def _entries(self, products: Sequence[Product] | None) -> list[Entry]:
        """
        Pair each product of this category with its parsed detail record.

        A record that fails validation is paired with None; accessors reading it
        then fail per item.
        """
        if products is None:
            raise InvalidEngineCallError("Product list must not be None")

        entries: list[Entry] = []
        for product in products:
            if product.category != self.category:
                continue
            try:
                details = product.typed_details()
            except ValidationError as e:
                logger.debug(f"Product {product.id} has malformed details: {e}")
                details = None
            entries.append((product, details))
        return entries

    def _matches(self, product: Product, details: Any, filters: FilterState, now: datetime) -> bool:
        profile = self.profile

        if not matches_search(
            filters.search,
            (field(product, details) for field in profile.search_fields),
        ):
            return False

        for dimension in profile.categorical:
            selected = filters.categorical_value(dimension.name)
            if selected is None:
                continue
            if not matches_categorical(
                selected, dimension.accessor(product, details), substring=dimension.substring
            ):
                return False

        for dimension in profile.ranges:
            bounds = filters.range_for(dimension.name)
            if bounds.is_unset:
                continue
            if not matches_range(dimension.accessor(product, details), bounds, integer=dimension.integer):
                return False

        if (
            profile.supports_expiry
            and filters.expiry != ExpiryFilter.ALL
            and not matches_expiry(profile.expiry(product, details), filters.expiry, now, self.expiring_soon)
        ):
            return False

        return (
            matches_rating(product.average_rating, filters.rating)
            and matches_stock(product.stock, filters.stock)
            and matches_discount(product.discount, filters.discount_only)
        )

    def _filter_entries(self, entries: list[Entry], filters: FilterState) -> list[Entry]:
        now = self.clock()
        kept: list[Entry] = []
        for product, details in entries:
            try:
                if self._matches(product, details, filters, now):
                    kept.append((product, details))
            except Exception as e:
                logger.warning(f"Error filtering product {product.id}: {e}")
        return kept

    def compute(self, products: Sequence[Product], filters: FilterState | None = None) -> list[Product]:
        """
        Filter and sort ``products``.

        Args:
            products: Full product list; products of other categories are ignored.
            filters: Filter state; defaults to no constraints, sorted by name.

        Returns:
            Products satisfying every active predicate, in sort order.

        Raises:
            InvalidEngineCallError: If ``products`` is None.
        """
        filters = filters or FilterState()
        entries = self._filter_entries(self._entries(products), filters)
        return [product for product, _ in sort_entries(entries, filters.sort_by, self.profile)]

    def paginate(self, items: Sequence[Product], page: int, page_size: int) -> list[Product]:
        return paginate(items, page, page_size)

    def page(
        self,
        products: Sequence[Product],
        filters: FilterState | None,
        page: int,
        page_size: int,
    ) -> Page[Product]:
        """Compute and paginate in one call."""
        return build_page(self.compute(products, filters), page, page_size)

    def filter_options(self, products: Sequence[Product]) -> dict[str, list[str]]:
        """
        Distinct non-empty values per categorical dimension, in first-occurrence order.

        Multi-valued fields contribute each of their values.
        """
        entries = self._entries(products)
        options: dict[str, list[str]] = {}
        for dimension in self.profile.categorical:
            if not dimension.enumerate_options:
                continue
            seen: dict[str, None] = {}
            for product, details in entries:
                try:
                    value = dimension.accessor(product, details)
                except Exception:
                    continue
                values = value if isinstance(value, list) else [value]
                for item in values:
                    if item:
                        seen.setdefault(item, None)
            options[dimension.name] = list(seen)
        return options

    def suggestions(
        self,
        products: Sequence[Product],
        term: str,
        limit: int = 5,
        min_length: int = 2,
    ) -> list[str]:
        """
        Search suggestions drawn from names and searchable text fields.

        Terms shorter than ``min_length`` produce no suggestions.
        """
        if not term or len(term) < min_length:
            return []

        needle = term.lower()
        matches: dict[str, None] = {}
        for product, details in self._entries(products):
            for field in self.profile.search_fields:
                try:
                    value = field(product, details)
                except Exception:
                    continue
                if value and needle in value.lower():
                    matches.setdefault(value, None)
        return list(matches)[:limit]

    def summarize(self, products: Sequence[Product]) -> CatalogSummary:
        """Stock, sale and rating figures plus per-dimension distributions."""
        entries = self._entries(products)
        if not entries:
            return CatalogSummary()

        items = [product for product, _ in entries]
        distributions: dict[str, dict[str, int]] = {}
        for dimension in (*self.profile.categorical, *self.profile.bands):
            if not dimension.enumerate_options:
                continue
            counter: Counter[str] = Counter()
            for product, details in entries:
                try:
                    value = dimension.accessor(product, details)
                except Exception:
                    continue
                for item in value if isinstance(value, list) else [value]:
                    if item:
                        counter[item] += 1
            distributions[dimension.name] = dict(counter)

        return CatalogSummary(
            total=len(items),
            in_stock=sum(1 for p in items if p.stock > 0),
            out_of_stock=sum(1 for p in items if p.stock == 0),
            on_sale=sum(1 for p in items if p.discount > 0),
            average_price=sum(p.price for p in items) / len(items),
            average_rating=sum(p.average_rating or 0 for p in items) / len(items),
            distributions=distributions,
        )
