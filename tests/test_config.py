"""Tests for engine configuration."""

import pytest

from recengine.recommender.config import (
    DEFAULT_CATEGORY_WEIGHT,
    DEFAULT_MIN_USER_SIMILARITY,
    DEFAULT_PRICE_WEIGHT,
    DEFAULT_RATING_WEIGHT,
    DEFAULT_SUBCATEGORY_WEIGHT,
    DEFAULT_TEXT_WEIGHT,
    EngineConfig,
)


def test_default_content_weights_sum_to_one():
    total = (
        DEFAULT_TEXT_WEIGHT
        + DEFAULT_CATEGORY_WEIGHT
        + DEFAULT_SUBCATEGORY_WEIGHT
        + DEFAULT_PRICE_WEIGHT
        + DEFAULT_RATING_WEIGHT
    )

    assert total == pytest.approx(1.0)


def test_defaults():
    config = EngineConfig()

    assert config.min_user_similarity == DEFAULT_MIN_USER_SIMILARITY
    assert config.content_blend_weight == 0.6
    assert config.collaborative_blend_weight == 0.4
    assert config.hybrid_candidate_ratio == 0.7
    assert config.default_limit == 10


def test_from_env_overrides():
    config = EngineConfig.from_env(
        {
            "RECENGINE_MIN_USER_SIMILARITY": "0.25",
            "RECENGINE_DEFAULT_LIMIT": "20",
            "UNRELATED": "x",
        }
    )

    assert config.min_user_similarity == 0.25
    assert config.default_limit == 20
    assert isinstance(config.default_limit, int)
    assert config.text_weight == DEFAULT_TEXT_WEIGHT


def test_from_env_rejects_garbage():
    with pytest.raises(ValueError, match="RECENGINE_DEFAULT_LIMIT"):
        EngineConfig.from_env({"RECENGINE_DEFAULT_LIMIT": "ten"})


@pytest.mark.parametrize(
    "overrides",
    [
        {"hybrid_candidate_ratio": 0.0},
        {"hybrid_candidate_ratio": 1.5},
        {"default_limit": 0},
        {"max_workers": 1},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValueError):
        EngineConfig(**overrides)
