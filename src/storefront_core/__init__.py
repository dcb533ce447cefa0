"""Storefront core: catalog filter engine and cart stock reconciliation."""

from storefront_core.cart import CartStore, ReconciliationScheduler, StockReconciler
from storefront_core.catalog import CatalogFilterEngine, CatalogView
from storefront_core.models import FilterState, Product, ProductCategory

__version__ = "0.1.0"

__all__ = [
    "CartStore",
    "CatalogFilterEngine",
    "CatalogView",
    "FilterState",
    "Product",
    "ProductCategory",
    "ReconciliationScheduler",
    "StockReconciler",
]
