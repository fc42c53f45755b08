"""Tests for the popularity fallback ranking."""

import pytest

from recengine.recommender.fallback import FallbackRanker
from recengine.recommender.models import CatalogItem, RecommendationMethod


def test_ranked_by_rating_then_views_then_featured(shop_catalog):
    """Rating first, view count breaks rating ties, featured breaks the rest."""
    ranker = FallbackRanker(shop_catalog)

    ids = [rec.item_id for rec in ranker.fallback(limit=10)]

    # 3 (4.7); 1 and 4 tie on 4.5 and 900 views, 4 is featured; 2 (4.2); 6 (4.1); 5 (3.9)
    assert ids == [3, 4, 1, 2, 6, 5]


def test_scores_are_rating_over_five(shop_catalog):
    ranker = FallbackRanker(shop_catalog)

    top = ranker.fallback(limit=1)[0]

    assert top.score == pytest.approx(4.7 / 5)
    assert top.method is RecommendationMethod.FALLBACK


def test_limit(shop_catalog):
    assert len(FallbackRanker(shop_catalog).fallback(limit=2)) == 2


def test_empty_catalog_gives_empty_list():
    assert FallbackRanker([]).fallback(limit=5) == []


def test_full_ties_break_on_item_id():
    catalog = [CatalogItem(item_id=i, rating=3.0) for i in (5, 2, 9)]

    assert [rec.item_id for rec in FallbackRanker(catalog).fallback()] == [2, 5, 9]


def test_mixed_int_and_str_ids_tie_break():
    """Numeric ids sort before string ids when everything else ties."""
    catalog = [
        CatalogItem(item_id="sku-2", rating=4.0),
        CatalogItem(item_id=1, rating=4.0),
        CatalogItem(item_id="sku-1", rating=4.0),
        CatalogItem(item_id=3, rating=4.0),
    ]

    ids = [rec.item_id for rec in FallbackRanker(catalog).fallback()]

    assert ids == [1, 3, "sku-1", "sku-2"]


def test_by_categories_filters_and_keeps_popularity_order(shop_catalog):
    ranker = FallbackRanker(shop_catalog)

    recommendations = ranker.by_categories({"books", "sports"}, limit=10)

    assert [rec.item_id for rec in recommendations] == [4, 6, 5]
    assert all(rec.method is RecommendationMethod.CATEGORY_BASED for rec in recommendations)
    assert recommendations[0].score == pytest.approx(4.5 / 5)


def test_by_categories_price_range_is_inclusive(shop_catalog):
    ranker = FallbackRanker(shop_catalog)

    recommendations = ranker.by_categories(["books", "electronics"], price_range=(25.0, 199.0))

    assert [rec.item_id for rec in recommendations] == [4, 1, 2]


def test_by_categories_limit_and_no_match(shop_catalog):
    ranker = FallbackRanker(shop_catalog)

    assert len(ranker.by_categories(["electronics"], limit=2)) == 2
    assert ranker.by_categories(["garden"]) == []
    assert ranker.by_categories(["books"], price_range=(50.0, 10.0)) == []
