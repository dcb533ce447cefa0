"""Unit tests for filter predicates."""

from datetime import timedelta

import pytest

from factories import NOW
from storefront_core.catalog.predicates import (
    matches_categorical,
    matches_discount,
    matches_expiry,
    matches_range,
    matches_rating,
    matches_search,
    matches_stock,
    parse_bound,
)
from storefront_core.models.filters import ExpiryFilter, NumericRange, StockFilter


class TestParseBound:
    """Tests for range bound parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("12", 12),
            ("12.5", 12.5),
            (" 7 ", 7),
            ("12abc", 12),
            ("-3", -3),
            (".5", 0.5),
            ("1e2", 100),
        ],
    )
    def test_float_bounds(self, text, expected):
        assert parse_bound(text) == expected

    @pytest.mark.parametrize("text", [None, "", "   ", "abc", "-", "$10"])
    def test_unparsable_bounds_are_unset(self, text):
        assert parse_bound(text) is None

    def test_integer_bounds_truncate(self):
        assert parse_bound("12.9", integer=True) == 12
        assert parse_bound("80x", integer=True) == 80

    def test_infinite_values_are_unset(self):
        assert parse_bound("1e999") is None


class TestMatchesRange:
    """Tests for inclusive numeric ranges."""

    def test_unset_range_matches(self):
        assert matches_range(5, NumericRange())

    def test_bounds_are_inclusive(self):
        bounds = NumericRange(min="5", max="10")
        assert matches_range(5, bounds)
        assert matches_range(10, bounds)
        assert not matches_range(4.99, bounds)
        assert not matches_range(10.01, bounds)

    def test_garbage_bound_is_ignored(self):
        assert matches_range(1000, NumericRange(min="5", max="lots"))
        assert not matches_range(1, NumericRange(min="5", max="lots"))

    def test_numeric_input_is_accepted(self):
        assert matches_range(15, NumericRange(min=10, max=None))


class TestTextPredicates:
    """Tests for search and categorical predicates."""

    def test_empty_search_matches(self):
        assert matches_search("", ["anything"])

    def test_search_is_case_insensitive(self):
        assert matches_search("ROSE", ["Red Rose", None])
        assert not matches_search("tulip", ["Red Rose", None])

    def test_categorical_exact(self):
        assert matches_categorical(None, "Red")
        assert matches_categorical("Red", "Red")
        assert not matches_categorical("Red", "red")
        assert not matches_categorical("Red", None)

    def test_categorical_membership(self):
        assert matches_categorical("Blue", ["Black", "Blue"])
        assert not matches_categorical("Green", ["Black", "Blue"])

    def test_categorical_substring(self):
        assert matches_categorical("austen", "Jane Austen", substring=True)
        assert not matches_categorical("bronte", "Jane Austen", substring=True)


class TestScalarPredicates:
    """Tests for rating, stock and discount predicates."""

    def test_rating_floor(self):
        assert matches_rating(None, 0)
        assert matches_rating(4.0, 4)
        assert not matches_rating(3.9, 4)
        assert not matches_rating(None, 1)

    def test_stock(self):
        assert matches_stock(0, StockFilter.ALL)
        assert matches_stock(3, StockFilter.IN_STOCK)
        assert not matches_stock(0, StockFilter.IN_STOCK)
        assert matches_stock(0, StockFilter.OUT_OF_STOCK)
        assert not matches_stock(1, StockFilter.OUT_OF_STOCK)

    def test_discount(self):
        assert matches_discount(0, False)
        assert matches_discount(5, True)
        assert not matches_discount(0, True)


class TestMatchesExpiry:
    """Tests for the expiry-status predicate."""

    def test_all(self):
        assert matches_expiry(NOW - timedelta(days=5), ExpiryFilter.ALL, NOW)

    def test_fresh(self):
        assert matches_expiry(NOW + timedelta(days=30), ExpiryFilter.FRESH, NOW)
        assert not matches_expiry(NOW, ExpiryFilter.FRESH, NOW)

    def test_expiring_soon_window(self):
        assert matches_expiry(NOW + timedelta(days=7), ExpiryFilter.EXPIRING_SOON, NOW)
        assert not matches_expiry(NOW + timedelta(days=7, seconds=1), ExpiryFilter.EXPIRING_SOON, NOW)
        assert not matches_expiry(NOW, ExpiryFilter.EXPIRING_SOON, NOW)

    def test_expiring_soon_is_also_fresh(self):
        expiry = NOW + timedelta(days=2)
        assert matches_expiry(expiry, ExpiryFilter.EXPIRING_SOON, NOW)
        assert matches_expiry(expiry, ExpiryFilter.FRESH, NOW)

    def test_expired_includes_now(self):
        assert matches_expiry(NOW, ExpiryFilter.EXPIRED, NOW)
        assert matches_expiry(NOW - timedelta(days=1), ExpiryFilter.EXPIRED, NOW)

    def test_naive_expiry_is_treated_as_utc(self):
        naive = (NOW + timedelta(days=1)).replace(tzinfo=None)
        assert matches_expiry(naive, ExpiryFilter.FRESH, NOW)

    def test_custom_window(self):
        expiry = NOW + timedelta(days=10)
        assert matches_expiry(expiry, ExpiryFilter.EXPIRING_SOON, NOW, soon_window=timedelta(days=14))
