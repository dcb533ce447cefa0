"""Cart and stock reconciliation models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from storefront_core.models.product import Product, ProductCategory


class CartItem(BaseModel):
    """
    A product line in the cart.

    Display fields are denormalized from the product at add-time. ``max_stock`` is
    the stock known when the item was added.
    """

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    image: str = ""
    price: float = Field(ge=0)
    discount: float = Field(default=0, ge=0, le=100)
    category: ProductCategory
    quantity: int = Field(ge=1)
    max_stock: int = Field(ge=0)

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(
            product_id=product.id,
            name=product.name,
            image=product.image,
            price=product.price,
            discount=product.discount,
            category=product.category,
            quantity=quantity,
            max_stock=product.stock,
        )

    @property
    def unit_price(self) -> float:
        """Unit price after discount."""
        if self.discount > 0:
            return self.price * (1 - self.discount / 100)
        return self.price

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


class CartResult(BaseModel):
    """Outcome of a cart mutation requested by the user."""

    success: bool
    message: str | None = None


class StockIssueKind(str, Enum):
    """Kind of mismatch between requested quantity and server stock."""

    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_STOCK = "insufficient_stock"


class StockIssue(BaseModel):
    """Transient stock discrepancy produced by a reconciliation pass."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    requested_quantity: int
    available_stock: int
    kind: StockIssueKind


class ResolutionAction(str, Enum):
    """Manual resolution choices offered for a stock issue."""

    REMOVE = "remove"
    UPDATE = "update"
    KEEP = "keep"


class Severity(str, Enum):
    """Notification severity."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """User-facing message emitted by the reconciliation protocol."""

    model_config = ConfigDict(frozen=True)

    message: str
    severity: Severity = Severity.INFO
