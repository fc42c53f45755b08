"""User-based collaborative filtering over the interaction ledger.

User similarity is cosine similarity restricted to the items both users have
interacted with. Recommendations aggregate neighbor weights, scaled by
neighbor similarity, over items the target user has not touched yet.

Low-overlap pairs are not down-weighted: one shared item with proportional
weights already yields similarity 1.0.
"""

import logging
from typing import Collection, Dict, List, Mapping, Optional, Tuple

import numpy as np

from recengine.recommender.config import EngineConfig
from recengine.recommender.errors import InsufficientSignal, UnknownUserError
from recengine.recommender.ledger import InteractionLedger
from recengine.recommender.models import (
    ItemId,
    Recommendation,
    RecommendationMethod,
    UserId,
    id_sort_key,
)

# Configure module logger
logger = logging.getLogger(__name__)


def common_item_cosine(
    vector_a: Mapping[ItemId, float],
    vector_b: Mapping[ItemId, float],
) -> float:
    """Cosine similarity of two user vectors over their shared items.

    Returns 0.0 when the users share no items.
    """
    common_items = [item_id for item_id in vector_a if item_id in vector_b]
    if not common_items:
        return 0.0

    weights_a = np.array([vector_a[item_id] for item_id in common_items], dtype=float)
    weights_b = np.array([vector_b[item_id] for item_id in common_items], dtype=float)

    norm_a = np.linalg.norm(weights_a)
    norm_b = np.linalg.norm(weights_b)
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(weights_a, weights_b) / (norm_a * norm_b))


class CollaborativeEngine:
    """Neighbor-based recommendations computed against the live ledger."""

    def __init__(self, ledger: InteractionLedger, config: Optional[EngineConfig] = None):
        self.ledger = ledger
        self.config = config or EngineConfig()

    def similar_users(self, user_id: UserId, limit: int = 10) -> List[Tuple[UserId, float]]:
        """Users most similar to ``user_id``, above the noise threshold.

        Sorted by similarity descending, ties by ascending user id.

        Raises:
            UnknownUserError: If the user has no recorded interactions.
        """
        target = self.ledger.vector_view(user_id)
        if not target:
            raise UnknownUserError(user_id)

        neighbors = []
        for other_id, other_vector in self.ledger.iter_vectors():
            if other_id == user_id or not other_vector:
                continue
            similarity = common_item_cosine(target, other_vector)
            if similarity > self.config.min_user_similarity:
                neighbors.append((other_id, similarity))

        neighbors.sort(key=lambda pair: (-pair[1], id_sort_key(pair[0])))
        return neighbors[:limit]

    def recommend_for_user(
        self,
        user_id: UserId,
        limit: int = 10,
        known_items: Optional[Collection[ItemId]] = None,
    ) -> List[Recommendation]:
        """Rank items liked by similar users that ``user_id`` has not seen.

        Args:
            user_id: Target user.
            limit: Number of neighbors to aggregate over, and of results.
            known_items: If given, only items in this collection (the current
                catalog) are recommended.

        Raises:
            InsufficientSignal: If the user has no interactions, no neighbor
                passes the threshold, or neighbors offer no unseen items.
        """
        target = self.ledger.vector_view(user_id)
        if not target:
            raise InsufficientSignal(
                f"User {user_id!r} has no interactions", details={"user_id": user_id}
            )

        neighbors = self.similar_users(user_id, limit)
        if not neighbors:
            raise InsufficientSignal(
                f"No similar users found for {user_id!r}", details={"user_id": user_id}
            )

        scores: Dict[ItemId, float] = {}
        for neighbor_id, similarity in neighbors:
            for item_id, weight in self.ledger.vector_view(neighbor_id).items():
                if item_id in target:
                    continue
                if known_items is not None and item_id not in known_items:
                    continue
                scores[item_id] = scores.get(item_id, 0.0) + weight * similarity

        if not scores:
            raise InsufficientSignal(
                f"Neighbors of {user_id!r} offer no unseen items",
                details={"user_id": user_id, "neighbors": len(neighbors)},
            )

        ranked = sorted(scores.items(), key=lambda pair: (-pair[1], id_sort_key(pair[0])))

        logger.debug(
            "Computed collaborative scores",
            extra={
                "user_id": user_id,
                "num_neighbors": len(neighbors),
                "num_candidates": len(scores),
            },
        )

        return [
            Recommendation(
                item_id=item_id,
                score=float(score),
                method=RecommendationMethod.COLLABORATIVE,
            )
            for item_id, score in ranked[:limit]
        ]
