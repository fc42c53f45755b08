"""Recommendation endpoints for the RecEngine API.

This module exposes personalized, item-to-item and trending recommendations
from the shared engine. Routes stay thin: validation and error mapping
happen here, ranking happens in the engine.
"""

import logging
import time
from typing import Callable, List, Optional, Union

from fastapi import APIRouter, Depends, Query

from recengine.api.dependencies import get_engine
from recengine.api.metrics import metrics_service
from recengine.api.schemas import (
    RecommendationItem,
    RecommendationResponse,
    UserStatsResponse,
)
from recengine.recommender.engine import RecommendationEngine
from recengine.recommender.models import Recommendation, RecommendationMethod

# Configure module logger
logger = logging.getLogger(__name__)

# Create API router
router = APIRouter(
    prefix="/recommend",
    tags=["recommendations"],
)

DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def parse_item_id(raw: str) -> Union[int, str]:
    """Numeric path ids address integer catalog ids."""
    try:
        return int(raw)
    except ValueError:
        return raw


def _serve(
    engine: RecommendationEngine,
    mode: str,
    user_id: Optional[str],
    produce: Callable[[], List[Recommendation]],
) -> RecommendationResponse:
    start_time = time.time()
    recommendations = produce()
    latency_ms = (time.time() - start_time) * 1000

    fell_back = any(rec.method is RecommendationMethod.FALLBACK for rec in recommendations)
    metrics_service.record_recommendation(mode, latency_ms, fell_back=fell_back and mode != "trending")

    logger.info(
        "Recommendations served",
        extra={
            "user_id": user_id,
            "mode": mode,
            "num_recommendations": len(recommendations),
            "fell_back": fell_back,
            "latency_ms": round(latency_ms, 2),
        },
    )

    generation = engine.generation
    return RecommendationResponse(
        user_id=user_id,
        mode=mode,
        count=len(recommendations),
        recommendations=[RecommendationItem.from_recommendation(rec) for rec in recommendations],
        generation=generation.version if generation else None,
    )


@router.get("/trending", response_model=RecommendationResponse)
def get_trending(
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    """Popularity ranking for anonymous or cold-start visitors.

    Example:
        GET /recommend/trending?limit=5
    """
    return _serve(engine, "trending", None, lambda: engine.fallback(limit))


@router.get("/similar/{item_id}", response_model=RecommendationResponse)
def get_similar_items(
    item_id: str,
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    """Products most similar in content to ``item_id``.

    Returns 404 when the item is not in the current catalog.
    """
    anchor = parse_item_id(item_id)
    return _serve(
        engine, "similar", None, lambda: engine.recommend_similar_to(anchor, limit)
    )


@router.get("/categories", response_model=RecommendationResponse)
def get_category_recommendations(
    category: List[str] = Query([], description="Favourite categories (repeatable)"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    """Popular products from a set of favourite categories.

    The price filter applies only when both bounds are given.

    Example:
        GET /recommend/categories?category=books&category=home&min_price=10&max_price=50
    """
    price_range = (min_price, max_price) if min_price is not None and max_price is not None else None
    return _serve(
        engine,
        "category_based",
        None,
        lambda: engine.recommend_by_categories(category, price_range=price_range, limit=limit),
    )


@router.get("/{user_id}/stats", response_model=UserStatsResponse)
def get_user_stats(
    user_id: str,
    engine: RecommendationEngine = Depends(get_engine),
) -> UserStatsResponse:
    """Interaction statistics for a user."""
    stats = engine.user_stats(user_id)
    return UserStatsResponse(**stats)


@router.get("/{user_id}", response_model=RecommendationResponse)
def get_recommendations(
    user_id: str,
    mode: str = Query("hybrid", description="content, collaborative or hybrid"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    item_id: Optional[str] = Query(None, description="Anchor item for content mode"),
    engine: RecommendationEngine = Depends(get_engine),
) -> RecommendationResponse:
    """Get personalized product recommendations for a user.

    Users without enough history receive the popularity ranking, tagged
    ``fallback`` in each item's ``method``.

    Example:
        GET /recommend/42?mode=collaborative&limit=5
    """
    anchor = parse_item_id(item_id) if item_id is not None else None
    return _serve(
        engine,
        mode,
        user_id,
        lambda: engine.recommend(user_id, mode=mode, limit=limit, item_id=anchor),
    )
