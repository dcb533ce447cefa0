"""In-memory product repository backing the HTTP routes."""

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from storefront_core.exceptions import ProductNotFoundError
from storefront_core.integrations.base import ProductSource, StockSource
from storefront_core.models.product import Product, ProductCategory, ProductListing, StockLevel

logger = logging.getLogger(__name__)


class ProductRepository(ProductSource, StockSource):
    """
    Product records held in memory, in insertion order.

    Serves both the listing and the stock lookups, so it can stand in for the
    backend wherever a ProductSource or StockSource is expected.
    """

    def __init__(self, products: Iterable[Product] | None = None) -> None:
        self._products: dict[str, Product] = {}
        for product in products or []:
            self.upsert(product)

    @classmethod
    def from_json(cls, path: str | Path) -> "ProductRepository":
        """Load products from a JSON file holding a list or ``{"products": [...]}``."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        records = data.get("products", []) if isinstance(data, dict) else data
        repo = cls(Product.model_validate(record) for record in records)
        logger.info(f"Loaded {len(repo)} products from {path}")
        return repo

    def __len__(self) -> int:
        return len(self._products)

    def upsert(self, product: Product) -> None:
        self._products[product.id] = product

    def set_stock(self, product_id: str, stock: int) -> Product:
        product = self.get(product_id)
        updated = product.model_copy(update={"stock": stock})
        self._products[product_id] = updated
        return updated

    def get(self, product_id: str) -> Product:
        """
        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = self._products.get(product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {product_id} not found")
        return product

    def all(self, category: ProductCategory | None = None) -> list[Product]:
        return [p for p in self._products.values() if category is None or p.category == category]

    async def list_products(self, category: ProductCategory | None = None) -> ProductListing:
        products = self.all(category)
        return ProductListing(products=products, total=len(products))

    async def check_stock(self, product_ids: Sequence[str]) -> dict[str, StockLevel]:
        levels: dict[str, StockLevel] = {}
        for product_id in product_ids:
            product = self._products.get(product_id)
            if product is not None:
                levels[product_id] = stock_level(product)
        return levels


def stock_level(product: Product) -> StockLevel:
    return StockLevel(
        product_id=product.id,
        name=product.name,
        stock=product.stock,
        price=product.price,
        discount=product.discount,
    )
