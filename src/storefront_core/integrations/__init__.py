"""Backend integrations."""

from storefront_core.integrations.base import ProductSource, StockSource
from storefront_core.integrations.storefront import StorefrontClient

__all__ = [
    "ProductSource",
    "StockSource",
    "StorefrontClient",
]
