"""Sort comparator layer."""

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from storefront_core.catalog.categories import CategoryProfile, text_key
from storefront_core.models.filters import SortKey
from storefront_core.models.product import Product

logger = logging.getLogger(__name__)

# (product, typed details) pairs flow through the engine so details are parsed once
Entry = tuple[Product, Any]


def sort_entries(
    entries: Sequence[Entry],
    sort_key: SortKey | str | None,
    profile: CategoryProfile,
) -> list[Entry]:
    """
    Sort (product, details) pairs by the profile's comparator for ``sort_key``.

    The sort is stable in both directions: entries with equal keys keep their
    input order. Entries whose key cannot be computed, or is missing, go last,
    ordered by name.
    """
    spec = profile.sort_spec(sort_key)

    keyed: list[tuple[Any, Entry]] = []
    failed: list[Entry] = []
    for entry in entries:
        product, details = entry
        try:
            key = spec.key(product, details)
        except Exception:
            logger.warning("Sort key failed for product %s", product.id, exc_info=True)
            failed.append(entry)
            continue
        if key is None:
            failed.append(entry)
        else:
            keyed.append((key, entry))

    keyed.sort(key=lambda pair: pair[0], reverse=spec.descending)
    failed.sort(key=lambda entry: text_key(entry[0].name))
    return [entry for _, entry in keyed] + failed


def sort_products(
    products: Sequence[Product],
    sort_key: SortKey | str | None,
    profile: CategoryProfile,
) -> list[Product]:
    """Sort products directly, parsing each detail record once."""
    entries: list[Entry] = []
    for product in products:
        try:
            details = product.typed_details()
        except ValidationError:
            details = None
        entries.append((product, details))
    return [product for product, _ in sort_entries(entries, sort_key, profile)]
