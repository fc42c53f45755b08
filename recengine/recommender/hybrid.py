"""Hybrid recommendation module.

Combines content-based and collaborative recommendations.
"""

import logging
from typing import Dict, List, Optional, Sequence

from recengine.recommender.config import (
    DEFAULT_COLLABORATIVE_BLEND_WEIGHT,
    DEFAULT_CONTENT_BLEND_WEIGHT,
    EngineConfig,
)
from recengine.recommender.models import (
    ItemId,
    Recommendation,
    RecommendationMethod,
    id_sort_key,
)

# Configure module logger
logger = logging.getLogger(__name__)


class HybridBlender:
    """Merges content and collaborative lists into one ranked list.

    Attributes:
        content_weight: Normalized weight applied to content scores.
        collaborative_weight: Normalized weight applied to collaborative scores.
    """

    def __init__(
        self,
        content_weight: float = DEFAULT_CONTENT_BLEND_WEIGHT,
        collaborative_weight: float = DEFAULT_COLLABORATIVE_BLEND_WEIGHT,
    ):
        """Initialize the blender.

        Args:
            content_weight: Weight for content-based scores (default: 0.6)
            collaborative_weight: Weight for collaborative scores (default: 0.4)

        The two weights are normalized to sum to 1.0 when their total is
        positive.
        """
        self.content_weight = content_weight
        self.collaborative_weight = collaborative_weight

        # Normalize weights
        total_weight = content_weight + collaborative_weight
        if total_weight > 0:
            self.content_weight = content_weight / total_weight
            self.collaborative_weight = collaborative_weight / total_weight

        logger.debug(
            f"Initialized HybridBlender: "
            f"content weight={self.content_weight:.2f}, "
            f"collaborative weight={self.collaborative_weight:.2f}"
        )

    @classmethod
    def from_config(cls, config: Optional[EngineConfig] = None) -> "HybridBlender":
        config = config or EngineConfig()
        return cls(
            content_weight=config.content_blend_weight,
            collaborative_weight=config.collaborative_blend_weight,
        )

    def blend(
        self,
        content_recs: Sequence[Recommendation],
        collaborative_recs: Sequence[Recommendation],
        limit: int = 10,
    ) -> List[Recommendation]:
        """Blend two recommendation lists.

        Each content score is scaled by the content weight and each
        collaborative score by the collaborative weight; an item present in
        both lists gets the sum. An empty list on one side simply contributes
        nothing. Returns an empty list only when both inputs are empty.
        """
        combined: Dict[ItemId, float] = {}

        for rec in content_recs:
            combined[rec.item_id] = combined.get(rec.item_id, 0.0) + rec.score * self.content_weight

        for rec in collaborative_recs:
            combined[rec.item_id] = (
                combined.get(rec.item_id, 0.0) + rec.score * self.collaborative_weight
            )

        if not combined:
            logger.debug("Both input lists empty, nothing to blend")
            return []

        ranked = sorted(combined.items(), key=lambda pair: (-pair[1], id_sort_key(pair[0])))

        return [
            Recommendation(item_id=item_id, score=score, method=RecommendationMethod.HYBRID)
            for item_id, score in ranked[:limit]
        ]
