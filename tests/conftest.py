"""Shared pytest fixtures for the RecEngine test suite."""

import pytest

from recengine.recommender.engine import RecommendationEngine
from recengine.recommender.models import CatalogItem


@pytest.fixture
def small_catalog():
    """Three-item catalog: two close electronics items and one book."""
    return [
        CatalogItem(item_id=1, category="electronics", price=100.0, rating=4.0),
        CatalogItem(item_id=2, category="electronics", price=110.0, rating=4.2),
        CatalogItem(item_id=3, category="books", price=15.0, rating=3.0),
    ]


@pytest.fixture
def shop_catalog():
    """A slightly richer catalog with text, subcategories and popularity fields."""
    return [
        CatalogItem(
            item_id=1,
            name="Wireless Headphones",
            description="Noise cancelling wireless headphones with long battery life",
            manufacturer="Acme",
            category="electronics",
            subcategory="audio",
            price=199.0,
            rating=4.5,
            view_count=900,
        ),
        CatalogItem(
            item_id=2,
            name="Bluetooth Speaker",
            description="Portable wireless speaker for outdoor use",
            manufacturer="Acme",
            category="electronics",
            subcategory="audio",
            price=89.0,
            rating=4.2,
            view_count=1500,
        ),
        CatalogItem(
            item_id=3,
            name="Gaming Laptop",
            description="Fast laptop with dedicated graphics",
            manufacturer="Globex",
            category="electronics",
            subcategory="laptops",
            price=1499.0,
            rating=4.7,
            view_count=400,
            is_featured=True,
        ),
        CatalogItem(
            item_id=4,
            name="Cooking Basics",
            description="A cookbook of everyday recipes",
            manufacturer="Initech Press",
            category="books",
            subcategory="cooking",
            price=25.0,
            rating=4.5,
            view_count=900,
            is_featured=True,
        ),
        CatalogItem(
            item_id=5,
            name="Space Opera",
            description="A science fiction novel",
            manufacturer="Initech Press",
            category="books",
            subcategory="fiction",
            price=15.0,
            rating=3.9,
            view_count=300,
        ),
        CatalogItem(
            item_id=6,
            name="Trail Running Shoes",
            description="Lightweight running shoes for trails",
            manufacturer="Stark",
            category="sports",
            subcategory="running",
            price=120.0,
            rating=4.1,
            view_count=700,
            is_on_sale=True,
        ),
    ]


@pytest.fixture
def engine():
    """Uninitialized engine, shut down after the test."""
    engine = RecommendationEngine()
    yield engine
    engine.close()


@pytest.fixture
def ready_engine(engine, shop_catalog):
    """Engine with the shop catalog indexed."""
    engine.initialize(shop_catalog)
    return engine
