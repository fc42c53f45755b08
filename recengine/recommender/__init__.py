"""Recommendation engine core for RecEngine.

This module contains the catalog feature indexer, content and collaborative
similarity engines, the hybrid blender, the popularity fallback, and the
engine that orchestrates them over an in-memory catalog snapshot and an
append-only interaction ledger.
"""

from recengine.recommender.engine import EngineState, Generation, RecommendationEngine
from recengine.recommender.models import (
    CatalogItem,
    InteractionEvent,
    InteractionType,
    Recommendation,
    RecommendationMethod,
    RecommendationMode,
)

__all__ = [
    "CatalogItem",
    "EngineState",
    "Generation",
    "InteractionEvent",
    "InteractionType",
    "Recommendation",
    "RecommendationEngine",
    "RecommendationMethod",
    "RecommendationMode",
]
