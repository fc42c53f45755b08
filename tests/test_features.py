"""Tests for catalog feature indexing."""

import numpy as np
import pytest

from recengine.recommender.errors import DuplicateItemError, EmptyCatalogError
from recengine.recommender.features import FeatureIndexer, analyze
from recengine.recommender.models import CatalogItem


def test_analyze_lowercases_and_stems():
    """Tokens are lowercased and reduced to their Porter stems."""
    tokens = analyze("Running Shoes for RUNNERS")

    assert "run" in tokens
    assert "shoe" in tokens
    assert all(token == token.lower() for token in tokens)


def test_index_returns_one_vector_per_item_in_order(shop_catalog):
    """Vectors come back in catalog order with matching positions."""
    indexer = FeatureIndexer()
    vectors = indexer.index(shop_catalog)

    assert [v.item_id for v in vectors] == [item.item_id for item in shop_catalog]
    assert [v.position for v in vectors] == list(range(len(shop_catalog)))
    assert indexer.tfidf_matrix.shape[0] == len(shop_catalog)
    assert indexer.position_of[3] == 2


def test_index_copies_non_text_fields(shop_catalog):
    """Categorical, numeric and flag fields are carried onto the vector."""
    vectors = FeatureIndexer().index(shop_catalog)
    laptop = vectors[2]

    assert laptop.category == "electronics"
    assert laptop.subcategory == "laptops"
    assert laptop.price == 1499.0
    assert laptop.rating == 4.7
    assert laptop.manufacturer == "Globex"
    assert laptop.is_featured is True
    assert laptop.is_on_sale is False


def test_term_frequencies_count_stemmed_tokens():
    """Repeated stems accumulate in the term-frequency map."""
    item = CatalogItem(item_id=1, name="Speaker", description="speakers speaking")
    vector = FeatureIndexer().index([item])[0]

    assert vector.term_frequencies["speaker"] == 2


def test_index_is_deterministic(shop_catalog):
    """Re-indexing an unchanged catalog yields identical vectors."""
    first = FeatureIndexer()
    second = FeatureIndexer()

    assert first.index(shop_catalog) == second.index(shop_catalog)
    np.testing.assert_array_equal(
        first.tfidf_matrix.toarray(), second.tfidf_matrix.toarray()
    )


def test_empty_catalog_raises():
    """Indexing zero items is rejected."""
    with pytest.raises(EmptyCatalogError):
        FeatureIndexer().index([])


def test_duplicate_item_ids_raise():
    """Two items with the same id are rejected."""
    catalog = [CatalogItem(item_id=1, name="a"), CatalogItem(item_id=1, name="b")]

    with pytest.raises(DuplicateItemError) as exc_info:
        FeatureIndexer().index(catalog)

    assert exc_info.value.details == {"item_id": 1}


def test_catalog_without_text_builds_empty_matrix():
    """Items with no text at all index to a zero-width matrix."""
    catalog = [CatalogItem(item_id=1, price=10.0), CatalogItem(item_id=2, price=20.0)]
    indexer = FeatureIndexer()
    vectors = indexer.index(catalog)

    assert len(vectors) == 2
    assert indexer.tfidf_matrix.shape == (2, 0)
