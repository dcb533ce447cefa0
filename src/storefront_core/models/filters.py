"""Filter and sort state for catalog queries."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

ALL = "all"


class StockFilter(str, Enum):
    """Stock-presence filter."""

    ALL = "all"
    IN_STOCK = "in-stock"
    OUT_OF_STOCK = "out-of-stock"


class ExpiryFilter(str, Enum):
    """Expiry-status filter (flowers only).

    FRESH and EXPIRING_SOON overlap: both require a future expiry date.
    """

    ALL = "all"
    FRESH = "fresh"
    EXPIRING_SOON = "expiring-soon"
    EXPIRED = "expired"


class SortKey(str, Enum):
    """Closed set of sort keys. Unknown values coerce to NAME."""

    NAME = "name"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    NEWEST = "newest"
    # Books
    AUTHOR = "author"
    PUBLICATION_DATE = "publication-date"
    PAGES_LOW = "pages-low"
    PAGES_HIGH = "pages-high"
    # Stationery
    BRAND = "brand"
    # Flowers
    FRESHNESS_HIGH = "freshness-high"
    FRESHNESS_LOW = "freshness-low"
    LIFESPAN_HIGH = "lifespan-high"
    LIFESPAN_LOW = "lifespan-low"
    EXPIRY_DATE = "expiry-date"
    COLOR = "color"

    @classmethod
    def coerce(cls, value: Any) -> "SortKey":
        """Map any input to a sort key, falling back to NAME."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NAME


class NumericRange(BaseModel):
    """
    Optional ``{min, max}`` bounds kept as the raw text the user typed.

    An empty bound means no constraint on that side. Bounds that do not parse as
    numbers are also treated as unset, so bad input widens rather than narrows results.
    """

    model_config = ConfigDict(frozen=True)

    min: str = ""
    max: str = ""

    @field_validator("min", "max", mode="before")
    @classmethod
    def _to_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @property
    def is_unset(self) -> bool:
        return not self.min.strip() and not self.max.strip()


class FilterState(BaseModel):
    """
    Immutable filter specification for one recomputation.

    ``categorical`` maps a dimension name (color, season, genre, brand ...) to the
    selected value; ``"all"`` or an empty string imposes no constraint. ``ranges``
    maps a numeric dimension (price, freshness, pages ...) to its bounds.
    """

    model_config = ConfigDict(frozen=True)

    search: str = ""
    categorical: dict[str, str] = Field(default_factory=dict)
    ranges: dict[str, NumericRange] = Field(default_factory=dict)
    rating: float = Field(default=0, ge=0, le=5, description="Rating floor, 0 means no constraint")
    stock: StockFilter = StockFilter.ALL
    discount_only: bool = False
    sort_by: SortKey = SortKey.NAME
    expiry: ExpiryFilter = ExpiryFilter.ALL

    @field_validator("sort_by", mode="before")
    @classmethod
    def _coerce_sort(cls, value: Any) -> SortKey:
        return SortKey.coerce(value)

    @field_validator("search", mode="before")
    @classmethod
    def _none_search(cls, value: Any) -> str:
        return "" if value is None else value

    def categorical_value(self, dimension: str) -> str | None:
        """Active value for a categorical dimension, or None when unconstrained."""
        value = self.categorical.get(dimension)
        if value is None or value == "" or value == ALL:
            return None
        return value

    def range_for(self, dimension: str) -> NumericRange:
        return self.ranges.get(dimension) or NumericRange()

    def with_updates(self, **changes: Any) -> "FilterState":
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return FilterState.model_validate(data)

    @property
    def is_default(self) -> bool:
        """True when every predicate is at its no-constraint default."""
        return (
            not self.search
            and all(self.categorical_value(dim) is None for dim in self.categorical)
            and all(bounds.is_unset for bounds in self.ranges.values())
            and self.rating == 0
            and self.stock == StockFilter.ALL
            and not self.discount_only
            and self.expiry == ExpiryFilter.ALL
        )
