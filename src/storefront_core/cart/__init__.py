"""Cart store and stock reconciliation."""

from storefront_core.cart.notifications import CollectingNotifier, LoggingNotifier, Notifier
from storefront_core.cart.reconciliation import StockReconciler, classify
from storefront_core.cart.scheduler import ReconciliationScheduler, TriggerReason
from storefront_core.cart.store import CartStore

__all__ = [
    "CartStore",
    "CollectingNotifier",
    "LoggingNotifier",
    "Notifier",
    "ReconciliationScheduler",
    "StockReconciler",
    "TriggerReason",
    "classify",
]
