"""Tests for content-based item similarity."""

import itertools

import pytest

from recengine.recommender.config import EngineConfig
from recengine.recommender.content import ContentSimilarityEngine
from recengine.recommender.errors import UnknownItemError
from recengine.recommender.features import FeatureIndexer
from recengine.recommender.models import CatalogItem, RecommendationMethod


def build_content_engine(catalog, config=None):
    indexer = FeatureIndexer()
    vectors = indexer.index(catalog)
    return ContentSimilarityEngine.from_indexer(indexer, vectors, config)


def test_similar_items_ranked_by_category_price_and_rating(small_catalog):
    """Same-category item with close price and rating ranks first."""
    content = build_content_engine(small_catalog)

    recommendations = content.rank_similar_to(1, limit=2)

    assert [rec.item_id for rec in recommendations] == [2, 3]
    assert recommendations[0].score > recommendations[1].score
    assert all(rec.method is RecommendationMethod.CONTENT for rec in recommendations)


def test_self_similarity_is_one(shop_catalog):
    """Every item is fully similar to itself."""
    content = build_content_engine(shop_catalog)

    for item in shop_catalog:
        assert content.similarity(item.item_id, item.item_id) == 1.0


def test_similarity_is_symmetric(shop_catalog):
    """similarity(a, b) == similarity(b, a) exactly."""
    content = build_content_engine(shop_catalog)
    ids = [item.item_id for item in shop_catalog]

    for a, b in itertools.combinations(ids, 2):
        assert content.similarity(a, b) == content.similarity(b, a)


def test_similarity_bounded(shop_catalog):
    """Scores stay within [0, 1]."""
    content = build_content_engine(shop_catalog)
    ids = [item.item_id for item in shop_catalog]

    for a, b in itertools.product(ids, ids):
        assert 0.0 <= content.similarity(a, b) <= 1.0


def test_different_category_never_beats_shared_category():
    """An item differing only in category scores no higher than a same-category twin."""
    base = dict(
        name="Desk Lamp",
        description="LED lamp",
        manufacturer="Acme",
        subcategory="lighting",
        price=40.0,
        rating=4.0,
    )
    catalog = [
        CatalogItem(item_id="a", category="home", **base),
        CatalogItem(item_id="b", category="office", **base),
        CatalogItem(item_id="c", category="home", **base),
    ]
    content = build_content_engine(catalog)

    assert content.similarity("a", "b") <= content.similarity("a", "c")


def test_rank_excludes_anchor_and_excluded_items(shop_catalog):
    """The anchor and any excluded ids never appear in the ranking."""
    content = build_content_engine(shop_catalog)

    recommendations = content.rank_similar_to(1, exclude={2}, limit=10)
    ids = [rec.item_id for rec in recommendations]

    assert 1 not in ids
    assert 2 not in ids
    assert len(ids) == len(shop_catalog) - 2


def test_rank_respects_limit(shop_catalog):
    content = build_content_engine(shop_catalog)

    assert len(content.rank_similar_to(1, limit=3)) == 3


def test_rank_breaks_ties_by_item_id():
    """Identical candidates are ordered by ascending id."""
    catalog = [
        CatalogItem(item_id=1, category="toys", price=10.0, rating=3.0),
        CatalogItem(item_id=4, category="toys", price=10.0, rating=3.0),
        CatalogItem(item_id=2, category="toys", price=10.0, rating=3.0),
        CatalogItem(item_id=3, category="toys", price=10.0, rating=3.0),
    ]
    content = build_content_engine(catalog)

    assert [rec.item_id for rec in content.rank_similar_to(1)] == [2, 3, 4]


def test_ranking_is_deterministic(shop_catalog):
    content = build_content_engine(shop_catalog)

    assert content.rank_similar_to(3, limit=5) == content.rank_similar_to(3, limit=5)


def test_unknown_item_raises(small_catalog):
    content = build_content_engine(small_catalog)

    with pytest.raises(UnknownItemError):
        content.rank_similar_to(99)
    with pytest.raises(UnknownItemError):
        content.similarity(1, 99)


def test_custom_weights_change_scores(small_catalog):
    """With only the category term weighted, same-category items score 1.0."""
    config = EngineConfig(
        text_weight=0.0,
        category_weight=1.0,
        subcategory_weight=0.0,
        price_weight=0.0,
        rating_weight=0.0,
    )
    content = build_content_engine(small_catalog, config)

    assert content.similarity(1, 2) == pytest.approx(1.0)
    assert content.similarity(1, 3) == pytest.approx(0.0)


def test_contains_and_len(small_catalog):
    content = build_content_engine(small_catalog)

    assert 1 in content
    assert 42 not in content
    assert len(content) == 3


def test_mixed_int_and_str_item_ids():
    """Ties between int and str ids put the numeric id first."""
    catalog = [
        CatalogItem(item_id="anchor", category="toys", price=10.0, rating=3.0),
        CatalogItem(item_id="sku-9", category="toys", price=10.0, rating=3.0),
        CatalogItem(item_id=7, category="toys", price=10.0, rating=3.0),
    ]
    content = build_content_engine(catalog)

    assert [rec.item_id for rec in content.rank_similar_to("anchor")] == [7, "sku-9"]
