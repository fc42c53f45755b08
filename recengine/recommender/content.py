"""Content-based item similarity.

Scores item pairs with a fixed weighted sum of text, category, price and
rating closeness over the output of the FeatureIndexer.
"""

import logging
from typing import Collection, Dict, List, Optional, Sequence

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.metrics.pairwise import cosine_similarity

from recengine.recommender.config import MAX_RATING, EngineConfig
from recengine.recommender.errors import UnknownItemError
from recengine.recommender.features import FeatureIndexer
from recengine.recommender.models import (
    FeatureVector,
    ItemId,
    Recommendation,
    RecommendationMethod,
    id_sort_key,
)

# Configure module logger
logger = logging.getLogger(__name__)


class ContentSimilarityEngine:
    """Pairwise item similarity for one catalog generation.

    The text cosine matrix is computed once at construction and symmetrized,
    so ``similarity(a, b) == similarity(b, a)`` holds exactly.
    """

    def __init__(
        self,
        vectors: Sequence[FeatureVector],
        tfidf_matrix: csr_matrix,
        config: Optional[EngineConfig] = None,
    ):
        self.config = config or EngineConfig()
        self.vectors = list(vectors)
        self.position_of: Dict[ItemId, int] = {
            vector.item_id: vector.position for vector in self.vectors
        }

        n_items = len(self.vectors)
        if tfidf_matrix.shape[1] > 0:
            text = cosine_similarity(tfidf_matrix)
            text = (text + text.T) / 2.0
        else:
            text = np.zeros((n_items, n_items))
        np.fill_diagonal(text, 1.0)
        self._text_similarity = np.clip(text, 0.0, 1.0)

        # Per-position attribute arrays for vectorized scoring
        self._categories = np.array([v.category for v in self.vectors], dtype=object)
        self._subcategories = np.array(
            [v.subcategory for v in self.vectors], dtype=object
        )
        self._prices = np.array([v.price for v in self.vectors], dtype=float)
        self._ratings = np.array([v.rating for v in self.vectors], dtype=float)

        logger.debug(f"Built content similarity state for {n_items} items")

    @classmethod
    def from_indexer(
        cls,
        indexer: FeatureIndexer,
        vectors: Sequence[FeatureVector],
        config: Optional[EngineConfig] = None,
    ) -> "ContentSimilarityEngine":
        """Create an engine from an indexer that has already run."""
        if indexer.tfidf_matrix is None:
            raise ValueError("FeatureIndexer.index() must run before building similarity")
        return cls(vectors, indexer.tfidf_matrix, config)

    def __contains__(self, item_id: ItemId) -> bool:
        return item_id in self.position_of

    def __len__(self) -> int:
        return len(self.vectors)

    def _position(self, item_id: ItemId) -> int:
        try:
            return self.position_of[item_id]
        except KeyError:
            raise UnknownItemError(item_id) from None

    def _scores_against(self, position: int) -> np.ndarray:
        """Similarity of the item at ``position`` to every indexed item."""
        config = self.config

        category_match = self._categories == self._categories[position]
        subcategory_match = category_match & (
            self._subcategories == self._subcategories[position]
        )

        price = self._prices[position]
        max_price = np.maximum(self._prices, price)
        price_diff = np.abs(self._prices - price)
        with np.errstate(divide="ignore", invalid="ignore"):
            price_closeness = np.where(
                max_price > 0, 1.0 - price_diff / max_price, 1.0
            )

        rating_closeness = 1.0 - np.abs(self._ratings - self._ratings[position]) / MAX_RATING

        scores = (
            config.text_weight * self._text_similarity[position]
            + config.category_weight * category_match
            + config.subcategory_weight * subcategory_match
            + config.price_weight * np.clip(price_closeness, 0.0, 1.0)
            + config.rating_weight * np.clip(rating_closeness, 0.0, 1.0)
        )
        return np.clip(scores, 0.0, 1.0)

    def similarity(self, item_a: ItemId, item_b: ItemId) -> float:
        """Similarity in [0, 1] between two indexed items.

        Raises:
            UnknownItemError: If either item is not indexed.
        """
        position_a = self._position(item_a)
        position_b = self._position(item_b)

        if position_a == position_b:
            return 1.0

        # Score from the lower position so the pair is always evaluated the same way
        low, high = sorted((position_a, position_b))
        return float(self._scores_against(low)[high])

    def rank_similar_to(
        self,
        anchor: ItemId,
        exclude: Optional[Collection[ItemId]] = None,
        limit: int = 10,
    ) -> List[Recommendation]:
        """Rank catalog items by similarity to an anchor item.

        The anchor itself is never returned. Ties are broken by ascending
        item id.

        Raises:
            UnknownItemError: If the anchor is not indexed.
        """
        position = self._position(anchor)
        excluded = set(exclude or ())
        excluded.add(anchor)

        scores = self._scores_against(position)
        candidates = [
            (vector.item_id, float(scores[vector.position]))
            for vector in self.vectors
            if vector.item_id not in excluded
        ]
        candidates.sort(key=lambda pair: (-pair[1], id_sort_key(pair[0])))

        return [
            Recommendation(item_id=item_id, score=score, method=RecommendationMethod.CONTENT)
            for item_id, score in candidates[:limit]
        ]
