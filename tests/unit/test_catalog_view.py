"""Unit tests for the stateful catalog view."""

from unittest.mock import AsyncMock

import pytest

from factories import NOW, make_flower
from storefront_core.catalog.engine import CatalogFilterEngine
from storefront_core.catalog.view import CatalogView
from storefront_core.exceptions import CatalogFetchError
from storefront_core.models.filters import SortKey
from storefront_core.models.product import ProductCategory, ProductListing


@pytest.fixture
def many_flowers():
    colors = ["Red", "White", "Yellow"]
    return [
        make_flower(f"f{i:02d}", f"Flower {i:02d}", color=colors[i % 3], price=i + 1)
        for i in range(30)
    ]


@pytest.fixture
def view(many_flowers) -> CatalogView:
    return CatalogView(CatalogFilterEngine("flower", clock=lambda: NOW), page_size=12, products=many_flowers)


class TestPaging:
    """Tests for page navigation."""

    def test_first_page(self, view):
        assert view.current_page == 1
        assert view.total_pages == 3
        assert len(view.page_items) == 12
        assert view.page_numbers == [1, 2, 3]

    def test_set_page_in_range(self, view):
        assert view.set_page(3)
        assert len(view.page_items) == 6

    def test_set_page_out_of_range_is_ignored(self, view):
        view.set_page(2)
        assert not view.set_page(4)
        assert not view.set_page(0)
        assert view.current_page == 2

    def test_next_and_previous_are_clamped(self, view):
        view.previous_page()
        assert view.current_page == 1
        view.set_page(3)
        view.next_page()
        assert view.current_page == 3


class TestFilterChanges:
    """Tests for how filter changes interact with the page."""

    def test_filter_change_resets_page(self, view):
        view.set_page(3)
        view.set_categorical("color", "Red")

        assert view.current_page == 1
        assert len(view.results) == 10
        assert all(p.flower_details().color == "Red" for p in view.results)

    def test_search_and_range_reset_page(self, view):
        view.set_page(2)
        view.set_range("price", "1", "5")
        assert view.current_page == 1
        assert len(view.results) == 5

        view.clear_filters()
        view.set_search("Flower 0")
        assert [p.id for p in view.results] == [f"f{i:02d}" for i in range(10)]

    def test_sort_change_keeps_page(self, view):
        view.set_page(2)
        view.set_sort(SortKey.PRICE_HIGH)

        assert view.current_page == 2
        assert view.results[0].id == "f29"

    def test_clear_filters(self, view):
        view.set_categorical("color", "White")
        view.clear_filters()
        assert view.filters.is_default
        assert len(view.results) == 30

    def test_options_and_suggestions(self, view):
        assert view.options["color"] == ["Red", "White", "Yellow"]
        assert view.suggestions("flower 1", limit=3) == ["Flower 10", "Flower 11", "Flower 12"]
        assert view.summary().total == 30


class TestLoad:
    """Tests for loading products from a source."""

    @pytest.mark.asyncio
    async def test_load_replaces_products(self, view):
        source = AsyncMock()
        source.list_products.return_value = ProductListing(
            products=[make_flower("new", "New Flower")], total=1
        )
        view.set_page(2)

        assert await view.load(source)

        source.list_products.assert_awaited_once_with(ProductCategory.FLOWER)
        assert [p.id for p in view.products] == ["new"]
        assert view.current_page == 1
        assert view.error is None
        assert not view.loading

    @pytest.mark.asyncio
    async def test_load_failure_clears_products(self, view):
        source = AsyncMock()
        source.list_products.side_effect = CatalogFetchError("Failed to fetch products: timeout")

        assert not await view.load(source)

        assert view.products == []
        assert view.results == []
        assert view.error == "Failed to fetch products: timeout"
        assert not view.loading

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            CatalogView(CatalogFilterEngine("flower"), page_size=0)
