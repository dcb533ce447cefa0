"""Backend source interfaces consumed by the catalog and the cart."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from storefront_core.models.product import ProductCategory, ProductListing, StockLevel


class ProductSource(ABC):
    """Read access to the product listing."""

    @abstractmethod
    async def list_products(self, category: ProductCategory | None = None) -> ProductListing:
        """
        Fetch the product listing.

        Args:
            category: Restrict the listing to one category.

        Returns:
            ProductListing with the matching products.

        Raises:
            CatalogFetchError: If the listing cannot be fetched.
        """
        ...


class StockSource(ABC):
    """Batched access to authoritative stock levels."""

    @abstractmethod
    async def check_stock(self, product_ids: Sequence[str]) -> dict[str, StockLevel]:
        """
        Fetch current stock for several products in one request.

        Args:
            product_ids: Products to look up.

        Returns:
            Stock levels keyed by product ID. Unknown IDs are absent.

        Raises:
            StockCheckError: If the stock check fails.
        """
        ...

    async def health_check(self) -> bool:
        """
        Check if the backend connection is healthy.

        Returns:
            True if connection is working.
        """
        return True
