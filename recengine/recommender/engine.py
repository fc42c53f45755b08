"""Recommendation engine orchestration.

Owns the catalog generation served to callers, the interaction ledger, and
the lifecycle between them. Recommendation calls never fail for lack of
signal: they degrade to the popularity ranking and tag results ``fallback``.
"""

import logging
import math
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from recengine.recommender.collaborative import CollaborativeEngine
from recengine.recommender.config import EngineConfig
from recengine.recommender.content import ContentSimilarityEngine
from recengine.recommender.errors import (
    EngineNotReadyError,
    InsufficientSignal,
    NoCategoriesError,
)
from recengine.recommender.fallback import FallbackRanker
from recengine.recommender.features import FeatureIndexer
from recengine.recommender.hybrid import HybridBlender
from recengine.recommender.ledger import InteractionLedger
from recengine.recommender.models import (
    CatalogItem,
    FeatureVector,
    InteractionEvent,
    InteractionType,
    ItemId,
    Recommendation,
    RecommendationMode,
    UserId,
)

# Configure module logger
logger = logging.getLogger(__name__)

CatalogRecord = Union[CatalogItem, Mapping[str, Any]]


class EngineState(str, Enum):
    """Lifecycle states of the engine."""

    UNINITIALIZED = "uninitialized"
    BUILDING = "building"
    READY = "ready"
    REBUILDING = "rebuilding"


@dataclass(frozen=True)
class Generation:
    """Immutable catalog snapshot: items, features and content similarity."""

    version: int
    catalog: Tuple[CatalogItem, ...]
    vectors: Tuple[FeatureVector, ...]
    content: ContentSimilarityEngine
    popularity: FallbackRanker
    item_ids: FrozenSet[ItemId]
    built_at: datetime


def _catalog_item(record: CatalogRecord) -> CatalogItem:
    if isinstance(record, CatalogItem):
        return record
    return CatalogItem.from_dict(record)


class RecommendationEngine:
    """Serves content, collaborative, hybrid and fallback recommendations.

    Readers take one reference to the current generation per call and work
    only against it, so a concurrent rebuild is never observed half-done.
    Rebuilds are serialized and published by a single reference swap.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        ledger: Optional[InteractionLedger] = None,
    ):
        self.config = config or EngineConfig()
        self.ledger = ledger or InteractionLedger()
        self.collaborative = CollaborativeEngine(self.ledger, self.config)
        self.blender = HybridBlender.from_config(self.config)

        self._generation: Optional[Generation] = None
        self._state = EngineState.UNINITIALIZED
        self._rebuild_lock = threading.Lock()
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers,
            thread_name_prefix="recengine-worker",
        )
        self._rebuild_executor = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="recengine-rebuild",
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def generation(self) -> Optional[Generation]:
        return self._generation

    def is_ready(self) -> bool:
        """True once a generation has been published."""
        return self._generation is not None

    def initialize(self, catalog: Iterable[CatalogRecord]) -> Generation:
        """Build a generation from the catalog and publish it.

        Safe to call repeatedly; each successful call publishes a new
        generation with the next version number. The interaction ledger is
        left untouched. If the build fails, the previous generation (if any)
        keeps serving and the error propagates.

        Raises:
            EmptyCatalogError: If the catalog has no items.
            DuplicateItemError: If item ids are not unique.
        """
        items = [_catalog_item(record) for record in catalog]

        with self._rebuild_lock:
            previous = self._generation
            previous_state = self._state
            self._state = (
                EngineState.BUILDING if previous is None else EngineState.REBUILDING
            )
            version = previous.version + 1 if previous is not None else 1
            start_time = time.time()

            logger.info(
                "Building catalog generation",
                extra={"version": version, "num_items": len(items)},
            )

            try:
                generation = self._build_generation(items, version)
            except Exception as e:
                self._state = previous_state
                logger.error(
                    "Catalog generation build failed",
                    extra={
                        "version": version,
                        "error": str(e),
                        "error_type": type(e).__name__,
                    },
                )
                raise

            self._generation = generation
            self._state = EngineState.READY

        logger.info(
            "Catalog generation published",
            extra={
                "version": version,
                "num_items": len(items),
                "build_time_ms": round((time.time() - start_time) * 1000, 2),
            },
        )

        return generation

    def initialize_in_background(self, catalog: Iterable[CatalogRecord]) -> "Future[Generation]":
        """Run ``initialize`` on the rebuild worker.

        The current generation keeps serving until the returned future
        completes. Callers wanting bounded latency can wait with
        ``future.result(timeout=...)`` and keep serving on expiry.
        """
        items = list(catalog)
        return self._rebuild_executor.submit(self.initialize, items)

    def _build_generation(self, items: List[CatalogItem], version: int) -> Generation:
        indexer = FeatureIndexer()
        vectors = indexer.index(items)
        content = ContentSimilarityEngine.from_indexer(indexer, vectors, self.config)

        return Generation(
            version=version,
            catalog=tuple(items),
            vectors=tuple(vectors),
            content=content,
            popularity=FallbackRanker(items),
            item_ids=frozenset(item.item_id for item in items),
            built_at=datetime.now(timezone.utc),
        )

    def _require_generation(self, operation: str) -> Generation:
        generation = self._generation
        if generation is None:
            raise EngineNotReadyError(operation)
        return generation

    def close(self) -> None:
        """Shut down worker threads."""
        self._executor.shutdown(wait=True)
        self._rebuild_executor.shutdown(wait=True)

    def __enter__(self) -> "RecommendationEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Interactions
    # ------------------------------------------------------------------

    def record_interaction(
        self,
        user_id: UserId,
        item_id: ItemId,
        interaction_type: Union[str, InteractionType],
        rating: Optional[float] = None,
        timestamp: Optional[datetime] = None,
    ) -> InteractionEvent:
        """Record one weighted interaction event.

        Raises:
            InvalidInteractionTypeError: For an unsupported type; nothing is
                recorded.
            EngineNotReadyError: If no generation has been published yet.
        """
        parsed_type = InteractionType.parse(interaction_type)
        self._require_generation("record interactions")
        return self.ledger.record(
            user_id, item_id, parsed_type, rating=rating, timestamp=timestamp
        )

    def record_events(self, events: Iterable[InteractionEvent]) -> int:
        """Replay an interaction log into the ledger.

        Returns:
            Number of events recorded.

        Raises:
            EngineNotReadyError: If no generation has been published yet.
        """
        self._require_generation("record interactions")
        count = 0
        for event in events:
            self.ledger.record(
                event.user_id,
                event.item_id,
                event.type,
                rating=event.rating,
                timestamp=event.timestamp,
            )
            count += 1

        logger.info(f"Replayed {count} interaction events")
        return count

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def _resolve_limit(self, limit: Optional[int]) -> int:
        if limit is None:
            return self.config.default_limit
        if limit < 1:
            raise ValueError(f"limit must be positive, got {limit}")
        return limit

    def recommend(
        self,
        user_id: Optional[UserId],
        mode: Union[str, RecommendationMode] = RecommendationMode.HYBRID,
        limit: Optional[int] = None,
        item_id: Optional[ItemId] = None,
    ) -> List[Recommendation]:
        """Personalized recommendations for a user.

        Args:
            user_id: Target user. May be None for content mode with an
                explicit ``item_id``.
            mode: "content", "collaborative" or "hybrid".
            limit: Maximum number of results (config default if None).
            item_id: Optional anchor item for content mode.

        Returns:
            Ranked recommendations, tagged ``fallback`` when the requested
            mode lacked signal.

        Raises:
            InvalidModeError: For an unknown mode.
            EngineNotReadyError: If no generation has been published yet.
        """
        parsed_mode = RecommendationMode.parse(mode)
        limit = self._resolve_limit(limit)
        generation = self._require_generation("recommend")

        try:
            if parsed_mode is RecommendationMode.CONTENT:
                return self._content_candidates(generation, user_id, item_id, limit)
            if parsed_mode is RecommendationMode.COLLABORATIVE:
                return self._collaborative_candidates(generation, user_id, limit)
            return self._hybrid_candidates(generation, user_id, limit)
        except InsufficientSignal as e:
            logger.debug(
                "Insufficient signal, serving fallback",
                extra={"user_id": user_id, "mode": parsed_mode.value, "reason": e.message},
            )
            return generation.popularity.fallback(limit)

    def recommend_similar_to(self, item_id: ItemId, limit: Optional[int] = None) -> List[Recommendation]:
        """Items most similar in content to ``item_id``.

        Raises:
            UnknownItemError: If the item is not in the current catalog.
            EngineNotReadyError: If no generation has been published yet.
        """
        limit = self._resolve_limit(limit)
        generation = self._require_generation("recommend similar items")
        return generation.content.rank_similar_to(item_id, limit=limit)

    def fallback(self, limit: Optional[int] = None) -> List[Recommendation]:
        """Popularity ranking for anonymous or cold-start callers.

        Raises:
            EngineNotReadyError: If no generation has been published yet.
        """
        limit = self._resolve_limit(limit)
        generation = self._require_generation("serve fallback recommendations")
        return generation.popularity.fallback(limit)

    def recommend_by_categories(
        self,
        categories: Iterable[str],
        price_range: Optional[Tuple[float, float]] = None,
        limit: Optional[int] = None,
    ) -> List[Recommendation]:
        """Popular items from a set of favourite categories.

        Items are ranked with the fallback order and tagged
        ``category_based``. No match (including an inverted price range)
        gives an empty list.

        Args:
            categories: Favourite categories; at least one is required.
            price_range: Optional inclusive (min, max) price bounds.
            limit: Maximum number of results (config default if None).

        Raises:
            NoCategoriesError: If no category is given.
            EngineNotReadyError: If no generation has been published yet.
        """
        wanted = [category for category in categories if category]
        if not wanted:
            raise NoCategoriesError()
        limit = self._resolve_limit(limit)
        generation = self._require_generation("serve category recommendations")
        return generation.popularity.by_categories(wanted, price_range, limit)

    def _content_candidates(
        self,
        generation: Generation,
        user_id: Optional[UserId],
        item_id: Optional[ItemId],
        limit: int,
    ) -> List[Recommendation]:
        seen = self.ledger.vector_view(user_id) if user_id is not None else {}

        if item_id is not None:
            anchor = item_id
        elif user_id is not None:
            anchor = self.ledger.anchor_item_for(user_id, among=generation.item_ids)
        else:
            anchor = None

        if anchor is None:
            raise InsufficientSignal("No anchor item for content recommendations")
        if anchor not in generation.item_ids:
            raise InsufficientSignal(
                f"Anchor item {anchor!r} is not in the catalog", details={"item_id": anchor}
            )

        recommendations = generation.content.rank_similar_to(
            anchor, exclude=seen.keys(), limit=limit
        )
        if not recommendations:
            raise InsufficientSignal("No unseen items left to recommend")
        return recommendations

    def _collaborative_candidates(
        self,
        generation: Generation,
        user_id: Optional[UserId],
        limit: int,
    ) -> List[Recommendation]:
        if user_id is None:
            raise InsufficientSignal("Collaborative filtering requires a user")
        return self.collaborative.recommend_for_user(
            user_id, limit, known_items=generation.item_ids
        )

    def _hybrid_candidates(
        self,
        generation: Generation,
        user_id: Optional[UserId],
        limit: int,
    ) -> List[Recommendation]:
        candidate_limit = math.ceil(limit * self.config.hybrid_candidate_ratio)

        content_future = self._executor.submit(
            _empty_on_insufficient_signal,
            self._content_candidates,
            generation,
            user_id,
            None,
            candidate_limit,
        )
        collaborative_future = self._executor.submit(
            _empty_on_insufficient_signal,
            self._collaborative_candidates,
            generation,
            user_id,
            candidate_limit,
        )
        content_recs = content_future.result()
        collaborative_recs = collaborative_future.result()

        blended = self.blender.blend(content_recs, collaborative_recs, limit)
        if not blended:
            raise InsufficientSignal("Neither content nor collaborative signal available")
        return blended

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def status(self) -> Dict[str, Any]:
        """Engine health summary."""
        generation = self._generation
        return {
            "state": self._state.value,
            "ready": generation is not None,
            "generation": generation.version if generation else None,
            "built_at": generation.built_at.isoformat() if generation else None,
            "num_items": len(generation.catalog) if generation else 0,
            "num_users": len(self.ledger.all_users()),
            "num_interactions": len(self.ledger),
        }

    def user_stats(self, user_id: UserId) -> Dict[str, Any]:
        """Interaction statistics for a user, with top catalog categories."""
        stats = self.ledger.stats_for(user_id)
        generation = self._generation

        category_counts: Dict[str, int] = {}
        if generation is not None:
            category_of = {item.item_id: item.category for item in generation.catalog}
            for event in self.ledger.events_for(user_id):
                category = category_of.get(event.item_id)
                if category:
                    category_counts[category] = category_counts.get(category, 0) + 1

        top_categories = sorted(category_counts.items(), key=lambda pair: (-pair[1], pair[0]))
        stats["top_categories"] = [
            {"category": category, "count": count} for category, count in top_categories[:5]
        ]
        return stats


def _empty_on_insufficient_signal(
    strategy: Callable[..., List[Recommendation]], *args: Any
) -> List[Recommendation]:
    try:
        return strategy(*args)
    except InsufficientSignal:
        return []
