"""Unit tests for book and stationery catalog behaviour."""

import pytest

from storefront_core.catalog.categories import get_profile
from storefront_core.catalog.engine import CatalogFilterEngine
from storefront_core.models.filters import ExpiryFilter, FilterState, NumericRange, SortKey
from storefront_core.models.product import ProductCategory


def ids(products):
    return [p.id for p in products]


@pytest.fixture
def book_engine() -> CatalogFilterEngine:
    return CatalogFilterEngine(ProductCategory.BOOK)


@pytest.fixture
def stationery_engine() -> CatalogFilterEngine:
    return CatalogFilterEngine("stationary")


class TestProfiles:
    """Tests for profile lookup."""

    def test_lookup_by_name(self):
        assert get_profile("flower").category == ProductCategory.FLOWER

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            get_profile("furniture")

    def test_unsupported_sort_falls_back(self):
        profile = get_profile("book")
        assert profile.sort_spec(SortKey.FRESHNESS_HIGH) is profile.sorts[SortKey.NAME]


class TestBooks:
    """Book filters and sorts."""

    def test_search_covers_author(self, book_engine, books):
        assert ids(book_engine.compute(books, FilterState(search="fran"))) == ["b3", "b1"]

    def test_genre_filter(self, book_engine, books):
        result = book_engine.compute(books, FilterState(categorical={"genre": "Classic"}))
        assert sorted(ids(result)) == ["b2", "b3"]

    def test_author_is_a_substring_filter(self, book_engine, books):
        result = book_engine.compute(books, FilterState(categorical={"author": "austen"}))
        assert ids(result) == ["b2"]

    def test_year_and_page_ranges(self, book_engine, books):
        modern = book_engine.compute(books, FilterState(ranges={"year": NumericRange(min="1900")}))
        assert sorted(ids(modern)) == ["b1", "b3"]

        short = book_engine.compute(books, FilterState(ranges={"pages": NumericRange(max="500")}))
        assert sorted(ids(short)) == ["b2", "b3"]

    def test_book_sorts(self, book_engine, books):
        assert ids(book_engine.compute(books, FilterState(sort_by="pages-high"))) == ["b1", "b2", "b3"]
        assert ids(book_engine.compute(books, FilterState(sort_by="publication-date"))) == ["b1", "b3", "b2"]
        assert ids(book_engine.compute(books, FilterState(sort_by="author"))) == ["b1", "b3", "b2"]

    def test_expiry_filter_is_ignored(self, book_engine, books):
        result = book_engine.compute(books, FilterState(expiry=ExpiryFilter.EXPIRED))
        assert len(result) == len(books)

    def test_options_skip_author(self, book_engine, books):
        options = book_engine.filter_options(books)
        assert options["genre"] == ["Science Fiction", "Classic"]
        assert options["language"] == ["English", "German"]
        assert options["publisher"] == ["Penguin", "Fischer"]
        assert "author" not in options


class TestStationery:
    """Stationery filters and sorts."""

    def test_color_is_membership(self, stationery_engine, stationery):
        black = stationery_engine.compute(stationery, FilterState(categorical={"color": "Black"}))
        assert sorted(ids(black)) == ["s1", "s3"]

        red = stationery_engine.compute(stationery, FilterState(categorical={"color": "Red"}))
        assert ids(red) == ["s1"]

    def test_brand_filter_and_sort(self, stationery_engine, stationery):
        pilot = stationery_engine.compute(stationery, FilterState(categorical={"brand": "Pilot"}))
        assert ids(pilot) == ["s2"]

        by_brand = stationery_engine.compute(stationery, FilterState(sort_by=SortKey.BRAND))
        assert ids(by_brand) == ["s3", "s1", "s2"]

    def test_search_covers_material(self, stationery_engine, stationery):
        assert ids(stationery_engine.compute(stationery, FilterState(search="plastic"))) == ["s2"]

    def test_options_flatten_colors(self, stationery_engine, stationery):
        options = stationery_engine.filter_options(stationery)
        assert options["color"] == ["Black", "Red", "Blue", "White"]
        assert options["brand"] == ["Moleskine", "Pilot", "Canson"]

    def test_summary_counts_each_color(self, stationery_engine, stationery):
        summary = stationery_engine.summarize(stationery)
        assert summary.distributions["color"] == {"Black": 2, "Red": 1, "Blue": 1, "White": 1}
        assert summary.out_of_stock == 1
