"""HTTP client for the storefront backend's product and stock routes."""

import logging
from collections.abc import Sequence
from typing import Any

import httpx
from pydantic import ValidationError

from storefront_core.exceptions import CatalogFetchError, ProductNotFoundError, StockCheckError
from storefront_core.integrations.base import ProductSource, StockSource
from storefront_core.models.product import Product, ProductCategory, ProductListing, StockLevel

logger = logging.getLogger(__name__)


class StorefrontClient(ProductSource, StockSource):
    """
    Storefront backend client.

    Talks to the JSON routes of the shop backend:
    - ``GET /api/product?type=<category>`` for the product listing
    - ``POST /api/product/stock-sync`` for batched stock checks
    - ``GET /api/product/<id>/check-stock`` for a single product
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Backend base URL (e.g., "https://shop.example.com").
            timeout: Request timeout in seconds.
            client: Pre-configured HTTP client, mainly for tests.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict | list:
        response = await self.client.request(method, path, **kwargs)
        response.raise_for_status()
        return response.json()

    async def list_products(self, category: ProductCategory | None = None) -> ProductListing:
        """Fetch the listing, keeping only products of ``category`` that carry details."""
        params = {"type": category.value} if category else None
        try:
            data = await self._request("GET", "/api/product", params=params)
        except (httpx.HTTPError, ValueError) as e:
            raise CatalogFetchError(f"Failed to fetch products: {e}") from e

        raw_products = data.get("products", []) if isinstance(data, dict) else data
        products: list[Product] = []
        for raw in raw_products or []:
            if not isinstance(raw, dict) or not raw.get("details"):
                continue
            try:
                product = Product.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"Skipping invalid product record {raw.get('_id')}: {e}")
                continue
            if category is None or product.category == category:
                products.append(product)

        meta = data if isinstance(data, dict) else {}
        return ProductListing(
            products=products,
            total=meta.get("total", len(products)),
            page=meta.get("page"),
            pages=meta.get("pages"),
        )

    async def check_stock(self, product_ids: Sequence[str]) -> dict[str, StockLevel]:
        """Batched stock lookup in a single request."""
        if not product_ids:
            return {}
        try:
            data = await self._request(
                "POST",
                "/api/product/stock-sync",
                json={"productIds": list(product_ids)},
            )
        except (httpx.HTTPError, ValueError) as e:
            raise StockCheckError(f"Stock sync request failed: {e}") from e

        if not isinstance(data, dict) or not data.get("success", False):
            message = data.get("message") if isinstance(data, dict) else None
            raise StockCheckError(message or "Stock sync returned an unsuccessful response")

        try:
            levels = [StockLevel.model_validate(item) for item in data.get("products", [])]
        except ValidationError as e:
            raise StockCheckError(f"Malformed stock sync response: {e}") from e
        return {level.product_id: level for level in levels}

    async def check_product_stock(self, product_id: str) -> StockLevel:
        """Current stock of a single product."""
        try:
            data = await self._request("GET", f"/api/product/{product_id}/check-stock")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise ProductNotFoundError(f"Product {product_id} not found") from e
            raise StockCheckError(f"Stock check failed for {product_id}: {e}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise StockCheckError(f"Stock check failed for {product_id}: {e}") from e

        if not isinstance(data, dict) or not data.get("success") or not data.get("product"):
            raise StockCheckError(f"Stock check returned no product for {product_id}")
        try:
            return StockLevel.model_validate(data["product"])
        except ValidationError as e:
            raise StockCheckError(f"Malformed stock response for {product_id}: {e}") from e

    async def health_check(self) -> bool:
        try:
            response = await self.client.get("/api/product", params={"limit": 1})
            return response.status_code < 500
        except httpx.HTTPError:
            return False
