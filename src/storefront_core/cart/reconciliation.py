"""Cart stock reconciliation: detect and resolve quantity/stock mismatches."""

import logging
import time
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass

from storefront_core.cart.notifications import LoggingNotifier, Notifier
from storefront_core.cart.store import CartStore
from storefront_core.exceptions import StockCheckError
from storefront_core.integrations.base import StockSource
from storefront_core.models.cart import (
    CartItem,
    ResolutionAction,
    Severity,
    StockIssue,
    StockIssueKind,
)
from storefront_core.models.product import StockLevel

logger = logging.getLogger(__name__)


def classify(
    items: Iterable[CartItem],
    snapshot: Mapping[str, StockLevel | int],
) -> list[StockIssue]:
    """
    Compare cart quantities with one stock snapshot.

    Zero stock is ``out_of_stock``; stock below the requested quantity is
    ``insufficient_stock``. Items missing from the snapshot are not flagged.
    """
    issues: list[StockIssue] = []
    for item in items:
        level = snapshot.get(item.product_id)
        if level is None:
            continue
        stock = level.stock if isinstance(level, StockLevel) else int(level)

        if stock == 0:
            kind = StockIssueKind.OUT_OF_STOCK
        elif stock < item.quantity:
            kind = StockIssueKind.INSUFFICIENT_STOCK
        else:
            continue

        issues.append(
            StockIssue(
                product_id=item.product_id,
                product_name=item.name,
                requested_quantity=item.quantity,
                available_stock=stock,
                kind=kind,
            )
        )
    return issues


@dataclass(frozen=True)
class KeptOverride:
    """A user's decision to keep a flagged quantity against a given stock level."""

    quantity: int
    available_stock: int
    kept_at: float


class StockReconciler:
    """
    Reconciles cart quantities against authoritative stock.

    Each pass fetches all cart items' stock in one batched request and recomputes
    the issue list from scratch. A failed pass leaves the cart and the previous
    issues untouched.

    A "keep" decision suppresses re-flagging of that item while the grace period
    runs, as long as neither the cart quantity nor the server stock changed.
    """

    def __init__(
        self,
        cart: CartStore,
        source: StockSource,
        notifier: Notifier | None = None,
        keep_grace_period: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the reconciler.

        Args:
            cart: Cart to reconcile; mutated only through its public operations.
            source: Batched stock lookup.
            notifier: Receives auto-resolution messages (logged by default).
            keep_grace_period: Seconds a "keep" decision stays in force.
            clock: Monotonic time source in seconds.
        """
        self.cart = cart
        self.source = source
        self.notifier = notifier or LoggingNotifier()
        self.keep_grace_period = keep_grace_period
        self.clock = clock

        self._issues: list[StockIssue] = []
        self._kept: dict[str, KeptOverride] = {}
        self._closed = False
        self.passes = 0

    @property
    def issues(self) -> list[StockIssue]:
        return list(self._issues)

    @property
    def has_issues(self) -> bool:
        return bool(self._issues)

    def close(self) -> None:
        """Stop accepting results; an in-flight pass completes but is discarded."""
        self._closed = True

    def open(self) -> None:
        self._closed = False

    def _is_kept(self, issue: StockIssue, now: float) -> bool:
        override = self._kept.get(issue.product_id)
        if override is None:
            return False
        if (
            now - override.kept_at < self.keep_grace_period
            and override.quantity == issue.requested_quantity
            and override.available_stock == issue.available_stock
        ):
            return True
        del self._kept[issue.product_id]
        return False

    async def reconcile(self) -> list[StockIssue] | None:
        """
        Run one reconciliation pass.

        Returns:
            The new issue list, or None if the pass failed or was discarded.
        """
        if self._closed:
            return None

        if self.cart.is_empty:
            self._issues = []
            self._kept.clear()
            return []

        product_ids = [item.product_id for item in self.cart.items]
        try:
            snapshot = await self.source.check_stock(product_ids)
        except StockCheckError as e:
            logger.warning(f"Stock reconciliation failed, keeping previous state: {e.message}")
            return None

        if self._closed:
            logger.debug("Discarding reconciliation result after close")
            return None

        now = self.clock()
        # Items removed while the request was in flight are no longer checked
        issues = [
            issue
            for issue in classify(self.cart.items, snapshot)
            if not self._is_kept(issue, now)
        ]
        live = {item.product_id for item in self.cart.items}
        self._kept = {pid: kept for pid, kept in self._kept.items() if pid in live}

        self._issues = issues
        self.passes += 1
        if issues:
            logger.info(
                f"Reconciliation found {len(issues)} stock issue(s): "
                + ", ".join(f"{i.product_id}={i.kind.value}" for i in issues)
            )
        return self.issues

    def auto_resolve(self) -> int:
        """
        Resolve every current issue without asking the user.

        Out-of-stock items are removed with a warning; items with insufficient
        stock are clamped to the available stock with an info message.

        Returns:
            Number of issues resolved.
        """
        resolved = 0
        for issue in self._issues:
            if self.cart.get_item(issue.product_id) is None:
                continue
            if issue.kind == StockIssueKind.OUT_OF_STOCK:
                self.cart.remove_item(issue.product_id)
                self.notifier.notify(
                    f"{issue.product_name} was removed from your cart (out of stock)",
                    Severity.WARNING,
                )
            else:
                self.cart.update_quantity(
                    issue.product_id, issue.available_stock, max_stock=issue.available_stock
                )
                self.notifier.notify(
                    f"{issue.product_name} quantity updated to {issue.available_stock} (limited stock)",
                    Severity.INFO,
                )
            resolved += 1

        self._issues = []
        return resolved

    def resolve(self, product_id: str, action: ResolutionAction | str) -> bool:
        """
        Resolve one issue with the user's choice.

        Args:
            product_id: Product whose issue is resolved.
            action: ``remove`` the item, ``update`` (clamp) it to available stock,
                or ``keep`` the current quantity.

        Returns:
            False if there is no current issue for ``product_id``.
        """
        action = ResolutionAction(action)
        issue = next((i for i in self._issues if i.product_id == product_id), None)
        if issue is None:
            return False

        if action == ResolutionAction.REMOVE:
            self.cart.remove_item(product_id)
        elif action == ResolutionAction.UPDATE:
            self.cart.update_quantity(
                product_id, issue.available_stock, max_stock=issue.available_stock
            )
        else:
            self._kept[product_id] = KeptOverride(
                quantity=issue.requested_quantity,
                available_stock=issue.available_stock,
                kept_at=self.clock(),
            )

        self._issues = [i for i in self._issues if i.product_id != product_id]
        return True
