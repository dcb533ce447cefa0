"""Pytest configuration and fixtures."""

import os
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Set test environment variables
os.environ.setdefault("STOREFRONT_LOG_JSON", "false")
os.environ.setdefault("STOREFRONT_API_BASE_URL", "http://storefront.test")

from factories import NOW, make_book, make_flower, make_stationary  # noqa: E402
from storefront_core.models.product import Product  # noqa: E402


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def rose_and_lily() -> list[Product]:
    """The two reference flowers used throughout the catalog tests."""
    return [
        make_flower("f-rose", "Red Rose", color="Red", season="spring", price=20, stock=5, discount=0),
        make_flower("f-lily", "White Lily", color="White", season="summer", price=15, stock=0, discount=10),
    ]


@pytest.fixture
def flowers() -> list[Product]:
    """A varied flower catalog."""
    return [
        make_flower("f1", "Red Rose", color="Red", season="spring", price=20, stock=5,
                    freshness=95, lifespan=7, expires_in=timedelta(days=3), rating=4.5),
        make_flower("f2", "White Lily", color="White", season="summer", price=15, stock=0,
                    discount=10, freshness=70, lifespan=10, expires_in=timedelta(days=20), rating=3.0),
        make_flower("f3", "Yellow Tulip", color="Yellow", season="spring", price=8, stock=12,
                    freshness=55, lifespan=5, expires_in=timedelta(days=-1), rating=4.0),
        make_flower("f4", "Pink Peony", color="Pink", season="summer", price=25, stock=2,
                    discount=5, freshness=85, lifespan=6, expires_in=timedelta(days=6)),
        make_flower("f5", "Red Carnation", color="Red", season="autumn", price=8, stock=7,
                    freshness=60, lifespan=14, expires_in=timedelta(days=10), rating=4.5),
    ]


@pytest.fixture
def books() -> list[Product]:
    return [
        make_book("b1", "Dune", author="Frank Herbert", genre="Science Fiction", pages=612,
                  year=1965, price=18, rating=4.8),
        make_book("b2", "Emma", author="Jane Austen", genre="Classic", pages=474, year=1815,
                  price=9, stock=0, language="English", publisher="Penguin"),
        make_book("b3", "Der Process", author="Franz Kafka", genre="Classic", pages=256,
                  year=1925, price=12, language="German", publisher="Fischer", discount=15),
    ]


@pytest.fixture
def stationery() -> list[Product]:
    return [
        make_stationary("s1", "Classic Notebook", brand="Moleskine", colors=["Black", "Red"]),
        make_stationary("s2", "Gel Pen", brand="Pilot", colors=["Blue"], item_type="Pen",
                        material="Plastic", price=2, stock=0),
        make_stationary("s3", "Sketchbook", brand="Canson", colors=["White", "Black"],
                        price=12, discount=20),
    ]
