"""Popularity ranking used when personalized signal is missing."""

import logging
from typing import Collection, List, Optional, Sequence, Tuple

from recengine.recommender.config import MAX_RATING
from recengine.recommender.models import (
    CatalogItem,
    Recommendation,
    RecommendationMethod,
    id_sort_key,
)

# Configure module logger
logger = logging.getLogger(__name__)


def _popularity_key(item: CatalogItem):
    return (-item.rating, -item.view_count, not item.is_featured, id_sort_key(item.item_id))


class FallbackRanker:
    """Non-personalized ranking: rating, then views, then featured flag.

    The order is computed once per catalog since it never depends on the
    caller.
    """

    def __init__(self, catalog: Sequence[CatalogItem]):
        self._ordered = sorted(catalog, key=_popularity_key)
        self._ranked = [
            self._recommendation(item, RecommendationMethod.FALLBACK)
            for item in self._ordered
        ]

    @staticmethod
    def _recommendation(item: CatalogItem, method: RecommendationMethod) -> Recommendation:
        return Recommendation(
            item_id=item.item_id,
            score=float(item.rating) / MAX_RATING,
            method=method,
        )

    def fallback(self, limit: int = 10) -> List[Recommendation]:
        """Top ``limit`` items by popularity. Empty catalog gives []."""
        if not self._ranked:
            logger.debug("Fallback requested for an empty catalog")
        return self._ranked[:limit]

    def by_categories(
        self,
        categories: Collection[str],
        price_range: Optional[Tuple[float, float]] = None,
        limit: int = 10,
    ) -> List[Recommendation]:
        """Popular items restricted to the given categories.

        Args:
            categories: Categories to keep.
            price_range: Optional inclusive (min, max) price bounds.
            limit: Maximum number of results.

        Returns:
            Items in popularity order, tagged ``category_based``.
        """
        wanted = set(categories)
        results = []
        for item in self._ordered:
            if item.category not in wanted:
                continue
            if price_range is not None and not price_range[0] <= item.price <= price_range[1]:
                continue
            results.append(self._recommendation(item, RecommendationMethod.CATEGORY_BASED))
            if len(results) == limit:
                break
        return results
