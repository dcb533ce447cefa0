"""Per-category capability sets for the catalog filter engine.

A profile declares which fields a category searches, which categorical and numeric
dimensions it filters on, and which sort keys it supports. The engine itself is
category-agnostic.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from storefront_core.models.filters import SortKey
from storefront_core.models.product import Product, ProductCategory, as_utc

# (product, typed details) -> value
Accessor = Callable[[Product, Any], Any]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def text_key(value: str | None) -> tuple[str, str]:
    """Case-insensitive ordering key for display text."""
    value = value or ""
    return (value.casefold(), value)


def freshness_band(freshness: float) -> str:
    if freshness >= 80:
        return "High (80-100)"
    if freshness >= 60:
        return "Medium (60-79)"
    return "Low (0-59)"


def _created(product: Product, details: Any) -> datetime:
    return as_utc(product.created_at) if product.created_at else _EPOCH


@dataclass(frozen=True)
class CategoricalDimension:
    """Equality (or membership) filter over a text field."""

    name: str
    accessor: Accessor
    substring: bool = False
    enumerate_options: bool = True


@dataclass(frozen=True)
class RangeDimension:
    """Inclusive numeric range filter."""

    name: str
    accessor: Accessor
    integer: bool = False


@dataclass(frozen=True)
class SortSpec:
    """Sort key function and direction."""

    key: Accessor
    descending: bool = False


PRICE = RangeDimension("price", lambda p, d: p.price)

COMMON_SORTS: dict[SortKey, SortSpec] = {
    SortKey.NAME: SortSpec(lambda p, d: text_key(p.name)),
    SortKey.PRICE_LOW: SortSpec(lambda p, d: p.price),
    SortKey.PRICE_HIGH: SortSpec(lambda p, d: p.price, descending=True),
    SortKey.RATING: SortSpec(lambda p, d: p.average_rating or 0, descending=True),
    SortKey.NEWEST: SortSpec(_created, descending=True),
}


@dataclass(frozen=True)
class CategoryProfile:
    """Capability set of one product category."""

    category: ProductCategory
    search_fields: tuple[Accessor, ...]
    categorical: tuple[CategoricalDimension, ...] = ()
    ranges: tuple[RangeDimension, ...] = (PRICE,)
    sorts: dict[SortKey, SortSpec] = field(default_factory=lambda: dict(COMMON_SORTS))
    expiry: Accessor | None = None
    # Extra label dimensions reported by catalog summaries (e.g. freshness bands)
    bands: tuple[CategoricalDimension, ...] = ()

    @property
    def supports_expiry(self) -> bool:
        return self.expiry is not None

    def sort_spec(self, sort_key: SortKey | str | None) -> SortSpec:
        """Sort spec for a key; unknown or unsupported keys fall back to name."""
        key = SortKey.coerce(sort_key)
        return self.sorts.get(key) or self.sorts[SortKey.NAME]


BOOK_PROFILE = CategoryProfile(
    category=ProductCategory.BOOK,
    search_fields=(
        lambda p, d: p.name,
        lambda p, d: d.author,
        lambda p, d: d.genre,
    ),
    categorical=(
        CategoricalDimension("genre", lambda p, d: d.genre),
        CategoricalDimension("language", lambda p, d: d.language),
        CategoricalDimension("publisher", lambda p, d: d.publisher),
        CategoricalDimension("author", lambda p, d: d.author, substring=True, enumerate_options=False),
    ),
    ranges=(
        PRICE,
        RangeDimension("pages", lambda p, d: d.pages, integer=True),
        RangeDimension("year", lambda p, d: d.publication_date.year, integer=True),
    ),
    sorts={
        **COMMON_SORTS,
        SortKey.AUTHOR: SortSpec(lambda p, d: text_key(d.author)),
        SortKey.PUBLICATION_DATE: SortSpec(
            lambda p, d: as_utc(d.publication_date), descending=True
        ),
        SortKey.PAGES_LOW: SortSpec(lambda p, d: d.pages),
        SortKey.PAGES_HIGH: SortSpec(lambda p, d: d.pages, descending=True),
    },
)

STATIONARY_PROFILE = CategoryProfile(
    category=ProductCategory.STATIONARY,
    search_fields=(
        lambda p, d: p.name,
        lambda p, d: d.brand,
        lambda p, d: d.type,
        lambda p, d: d.material,
    ),
    categorical=(
        CategoricalDimension("type", lambda p, d: d.type),
        CategoricalDimension("brand", lambda p, d: d.brand),
        CategoricalDimension("color", lambda p, d: list(d.color)),
        CategoricalDimension("material", lambda p, d: d.material),
    ),
    sorts={
        **COMMON_SORTS,
        SortKey.BRAND: SortSpec(lambda p, d: text_key(d.brand)),
    },
)

FLOWER_PROFILE = CategoryProfile(
    category=ProductCategory.FLOWER,
    search_fields=(
        lambda p, d: p.name,
        lambda p, d: d.color,
        lambda p, d: d.season,
    ),
    categorical=(
        CategoricalDimension("color", lambda p, d: d.color),
        CategoricalDimension("season", lambda p, d: d.season),
    ),
    ranges=(
        PRICE,
        RangeDimension("freshness", lambda p, d: d.freshness, integer=True),
        RangeDimension("lifespan", lambda p, d: d.lifespan, integer=True),
    ),
    sorts={
        **COMMON_SORTS,
        SortKey.FRESHNESS_HIGH: SortSpec(lambda p, d: d.freshness, descending=True),
        SortKey.FRESHNESS_LOW: SortSpec(lambda p, d: d.freshness),
        SortKey.LIFESPAN_HIGH: SortSpec(lambda p, d: d.lifespan, descending=True),
        SortKey.LIFESPAN_LOW: SortSpec(lambda p, d: d.lifespan),
        SortKey.EXPIRY_DATE: SortSpec(lambda p, d: as_utc(d.expiry_date)),
        SortKey.COLOR: SortSpec(lambda p, d: text_key(d.color)),
    },
    expiry=lambda p, d: d.expiry_date,
    bands=(CategoricalDimension("freshness", lambda p, d: freshness_band(d.freshness)),),
)

PROFILES: dict[ProductCategory, CategoryProfile] = {
    ProductCategory.BOOK: BOOK_PROFILE,
    ProductCategory.STATIONARY: STATIONARY_PROFILE,
    ProductCategory.FLOWER: FLOWER_PROFILE,
}


def get_profile(category: ProductCategory | str) -> CategoryProfile:
    """Look up the profile for a category.

    Raises:
        ValueError: If the category is unknown.
    """
    return PROFILES[ProductCategory(category)]
