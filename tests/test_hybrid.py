"""Tests for hybrid recommendation blending.

The blender merges content and collaborative lists with fixed weights and
never needs both sides to be present.
"""

import pytest

from recengine.recommender.config import EngineConfig
from recengine.recommender.hybrid import HybridBlender
from recengine.recommender.models import Recommendation, RecommendationMethod


def content(item_id, score):
    return Recommendation(item_id=item_id, score=score, method=RecommendationMethod.CONTENT)


def collab(item_id, score):
    return Recommendation(
        item_id=item_id, score=score, method=RecommendationMethod.COLLABORATIVE
    )


@pytest.fixture
def blender():
    return HybridBlender()


def test_item_in_both_lists_gets_weighted_sum(blender):
    """0.6 * content + 0.4 * collaborative."""
    blended = blender.blend([content(1, 0.5)], [collab(1, 10.0)], limit=5)

    assert len(blended) == 1
    assert blended[0].score == pytest.approx(0.6 * 0.5 + 0.4 * 10.0)
    assert blended[0].method is RecommendationMethod.HYBRID


def test_item_in_one_list_gets_single_scaled_score(blender):
    blended = blender.blend([content(1, 0.9)], [collab(2, 2.0)], limit=5)
    scores = {rec.item_id: rec.score for rec in blended}

    assert scores[1] == pytest.approx(0.6 * 0.9)
    assert scores[2] == pytest.approx(0.4 * 2.0)
    assert [rec.item_id for rec in blended] == [2, 1]


def test_one_empty_side_still_blends(blender):
    """Only content signal: results are the scaled content scores."""
    blended = blender.blend([content(1, 0.8), content(2, 0.4)], [], limit=5)

    assert [rec.item_id for rec in blended] == [1, 2]
    assert blended[1].score == pytest.approx(0.24)


def test_both_empty_returns_empty(blender):
    assert blender.blend([], [], limit=5) == []


def test_limit_and_tie_break(blender):
    blended = blender.blend(
        [content(3, 0.5), content(1, 0.5), content(2, 0.5)], [], limit=2
    )

    assert [rec.item_id for rec in blended] == [1, 2]


def test_weights_are_normalized():
    blender = HybridBlender(content_weight=3.0, collaborative_weight=1.0)

    assert blender.content_weight == pytest.approx(0.75)
    assert blender.collaborative_weight == pytest.approx(0.25)


def test_from_config_uses_blend_weights():
    config = EngineConfig(content_blend_weight=0.5, collaborative_blend_weight=0.5)
    blender = HybridBlender.from_config(config)

    assert blender.content_weight == pytest.approx(0.5)
    assert blender.collaborative_weight == pytest.approx(0.5)


def test_mixed_int_and_str_ids_blend(blender):
    blended = blender.blend([content("sku-1", 0.5), content(2, 0.5)], [], limit=5)

    assert [rec.item_id for rec in blended] == [2, "sku-1"]
