"""Filter predicates for catalog products.

Every predicate answers True when its filter is at the no-constraint default.
Numeric bounds fail open: empty or unparsable text is treated as unset.
"""

import math
import re
from collections.abc import Iterable
from datetime import datetime, timedelta

from storefront_core.models.filters import ExpiryFilter, NumericRange, StockFilter
from storefront_core.models.product import as_utc

_INT_PREFIX = re.compile(r"^[+-]?\d+")
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

DEFAULT_EXPIRING_SOON = timedelta(days=7)


def parse_bound(text: str | None, integer: bool = False) -> float | None:
    """
    Parse a range bound typed by the user.

    Leading numeric prefixes are accepted (``"12abc"`` parses as 12), anything else
    returns None. Integer bounds truncate a decimal part the same way.

    Args:
        text: Raw bound text.
        integer: Parse as an integer bound.

    Returns:
        The parsed bound, or None when the bound is unset or unparsable.
    """
    if text is None:
        return None
    text = text.strip()
    if not text:
        return None

    pattern = _INT_PREFIX if integer else _FLOAT_PREFIX
    match = pattern.match(text)
    if not match:
        return None

    value = int(match.group()) if integer else float(match.group())
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def matches_search(term: str, texts: Iterable[str | None]) -> bool:
    """Case-insensitive substring match of ``term`` against any of ``texts``."""
    if not term:
        return True
    needle = term.lower()
    return any(text is not None and needle in text.lower() for text in texts)


def matches_categorical(
    selected: str | None,
    candidate: str | list[str] | None,
    substring: bool = False,
) -> bool:
    """
    Match a categorical filter.

    Args:
        selected: Active filter value, None when unconstrained.
        candidate: Product value; a list means set-membership matching.
        substring: Match as a case-insensitive substring instead of exact equality.
    """
    if selected is None:
        return True
    if candidate is None:
        return False
    if isinstance(candidate, list):
        return selected in candidate
    if substring:
        return selected.lower() in candidate.lower()
    return candidate == selected


def matches_range(value: float, bounds: NumericRange, integer: bool = False) -> bool:
    """Inclusive range match; unset or unparsable bounds impose no constraint."""
    low = parse_bound(bounds.min, integer=integer)
    high = parse_bound(bounds.max, integer=integer)
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def matches_rating(rating: float | None, floor: float) -> bool:
    if floor == 0:
        return True
    return (rating or 0) >= floor


def matches_stock(stock: int, stock_filter: StockFilter) -> bool:
    if stock_filter == StockFilter.IN_STOCK:
        return stock > 0
    if stock_filter == StockFilter.OUT_OF_STOCK:
        return stock == 0
    return True


def matches_discount(discount: float, discount_only: bool) -> bool:
    return not discount_only or discount > 0


def matches_expiry(
    expiry: datetime,
    expiry_filter: ExpiryFilter,
    now: datetime,
    soon_window: timedelta = DEFAULT_EXPIRING_SOON,
) -> bool:
    """
    Match a flower's expiry date against the expiry-status filter.

    ``fresh`` means expiry strictly in the future; ``expiring-soon`` means in the
    future and within ``soon_window``; ``expired`` means at or before ``now``.
    The first two overlap.
    """
    if expiry_filter == ExpiryFilter.ALL:
        return True

    expiry = as_utc(expiry)
    now = as_utc(now)

    if expiry_filter == ExpiryFilter.FRESH:
        return expiry > now
    if expiry_filter == ExpiryFilter.EXPIRING_SOON:
        return now < expiry <= now + soon_window
    if expiry_filter == ExpiryFilter.EXPIRED:
        return expiry <= now
    return True
