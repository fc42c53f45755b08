"""Interaction and catalog endpoints for the RecEngine API."""

import logging

from fastapi import APIRouter, Depends, status

from recengine.api.dependencies import get_engine
from recengine.api.metrics import metrics_service
from recengine.api.schemas import (
    InitializeRequest,
    InitializeResponse,
    InteractionRequest,
    InteractionResponse,
)
from recengine.recommender.engine import RecommendationEngine

logger = logging.getLogger(__name__)

router = APIRouter(tags=["interactions"])


@router.post(
    "/interactions",
    response_model=InteractionResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_interaction(
    body: InteractionRequest,
    engine: RecommendationEngine = Depends(get_engine),
) -> InteractionResponse:
    """Record one user interaction.

    User ids are stored as strings so they match the ``/recommend/{user_id}``
    path parameter.
    """
    event = engine.record_interaction(
        str(body.user_id), body.item_id, body.type, rating=body.rating
    )
    metrics_service.record_interaction()

    return InteractionResponse(
        user_id=str(event.user_id),
        item_id=event.item_id,
        type=event.type.value,
        timestamp=event.timestamp.isoformat(),
    )


@router.post("/engine/initialize", response_model=InitializeResponse)
def initialize_engine(
    body: InitializeRequest,
    engine: RecommendationEngine = Depends(get_engine),
) -> InitializeResponse:
    """Build (or rebuild) the catalog index from the supplied items.

    Recorded interactions are kept across rebuilds.
    """
    logger.info(f"Initializing engine with {len(body.items)} catalog items")
    generation = engine.initialize([payload.to_item() for payload in body.items])

    return InitializeResponse(
        generation=generation.version,
        num_items=len(generation.catalog),
        built_at=generation.built_at.isoformat(),
    )
