"""Cart item store."""

import logging
from collections.abc import Callable

from storefront_core.models.cart import CartItem, CartResult
from storefront_core.models.product import Product

logger = logging.getLogger(__name__)

CartListener = Callable[[tuple[CartItem, ...]], None]


class CartStore:
    """
    The cart's item collection.

    All mutation goes through ``add_item``, ``remove_item``, ``update_quantity``
    and ``clear``; listeners are notified after each change. One instance per
    shopping session, passed explicitly to whatever needs it.
    """

    def __init__(self, items: list[CartItem] | None = None) -> None:
        self._items: list[CartItem] = list(items or [])
        self._listeners: list[CartListener] = []

    # -- observation ---------------------------------------------------------

    @property
    def items(self) -> tuple[CartItem, ...]:
        """Snapshot of the current items."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def get_item(self, product_id: str) -> CartItem | None:
        return next((item for item in self._items if item.product_id == product_id), None)

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        snapshot = self.items
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Cart listener failed")

    # -- mutation ------------------------------------------------------------

    def add_item(self, product: Product) -> CartResult:
        """
        Add one unit of ``product``.

        A new line starts at quantity 1 when the product is in stock; an existing
        line grows by one while it stays within the stock known at add-time.
        """
        existing = self.get_item(product.id)
        if existing:
            quantity = existing.quantity + 1
            if quantity > existing.max_stock:
                return CartResult(success=False, message="Not enough stock available!")
            self._replace(existing.model_copy(update={"quantity": quantity}))
            self._changed()
            return CartResult(success=True, message="Product quantity updated!")

        if product.stock <= 0:
            return CartResult(success=False, message="Product out of stock!")

        self._items.append(CartItem.from_product(product))
        self._changed()
        return CartResult(success=True, message="Product added to cart!")

    def remove_item(self, product_id: str) -> bool:
        """Remove a line. Returns False if it was not in the cart."""
        before = len(self._items)
        self._items = [item for item in self._items if item.product_id != product_id]
        if len(self._items) == before:
            return False
        self._changed()
        return True

    def update_quantity(
        self,
        product_id: str,
        quantity: int,
        max_stock: int | None = None,
    ) -> CartResult:
        """
        Set the quantity of a line.

        A quantity of 0 or less removes the line. Quantities above the line's known
        stock are rejected.

        Args:
            product_id: Line to update.
            quantity: New quantity.
            max_stock: Replace the line's known stock first (used when the server
                reports a lower stock level).
        """
        if quantity <= 0:
            removed = self.remove_item(product_id)
            return CartResult(success=removed, message=None if removed else "Item not in cart")

        item = self.get_item(product_id)
        if item is None:
            return CartResult(success=False, message="Item not in cart")

        limit = item.max_stock if max_stock is None else max_stock
        if quantity > limit:
            return CartResult(success=False, message="Not enough stock available!")

        self._replace(item.model_copy(update={"quantity": quantity, "max_stock": limit}))
        self._changed()
        return CartResult(success=True)

    def clear(self) -> None:
        if not self._items:
            return
        self._items = []
        self._changed()

    def _replace(self, updated: CartItem) -> None:
        self._items = [
            updated if item.product_id == updated.product_id else item for item in self._items
        ]

    # -- totals --------------------------------------------------------------

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self._items)

    @property
    def total_price(self) -> float:
        """Total after discounts."""
        return sum(item.line_total for item in self._items)

    @property
    def original_total(self) -> float:
        """Total before discounts."""
        return sum(item.price * item.quantity for item in self._items)

    @property
    def total_discount(self) -> float:
        return self.original_total - self.total_price

    @property
    def discount_percentage(self) -> float:
        original = self.original_total
        return (self.total_discount / original) * 100 if original > 0 else 0.0
