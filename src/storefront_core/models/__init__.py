"""Data models for the storefront core."""

from storefront_core.models.cart import (
    CartItem,
    CartResult,
    Notification,
    ResolutionAction,
    Severity,
    StockIssue,
    StockIssueKind,
)
from storefront_core.models.filters import (
    ExpiryFilter,
    FilterState,
    NumericRange,
    SortKey,
    StockFilter,
)
from storefront_core.models.product import (
    BookDetails,
    FlowerDetails,
    Product,
    ProductCategory,
    ProductListing,
    Review,
    StationaryDetails,
    StockLevel,
)

__all__ = [
    "BookDetails",
    "CartItem",
    "CartResult",
    "ExpiryFilter",
    "FilterState",
    "FlowerDetails",
    "Notification",
    "NumericRange",
    "Product",
    "ProductCategory",
    "ProductListing",
    "ResolutionAction",
    "Review",
    "Severity",
    "SortKey",
    "StationaryDetails",
    "StockFilter",
    "StockIssue",
    "StockIssueKind",
    "StockLevel",
]
