"""Append-only ledger of user-item interactions.

Accumulates per-user, per-item interaction weights. Writers are serialized per
user; each write publishes a fresh copy of that user's vector, so concurrent
readers always see a vector with either all or none of an event applied.
"""

import logging
import threading
from collections import Counter
from datetime import datetime, timezone
from typing import (
    Any,
    Container,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

from recengine.recommender.models import (
    INTERACTION_WEIGHTS,
    InteractionEvent,
    InteractionType,
    ItemId,
    UserId,
)

# Configure module logger
logger = logging.getLogger(__name__)


class InteractionLedger:
    """Weighted interaction history for all users.

    Survives catalog rebuilds; nothing is ever removed from it.
    """

    def __init__(self):
        self._vectors: Dict[UserId, Mapping[ItemId, float]] = {}
        self._events: Dict[UserId, Tuple[InteractionEvent, ...]] = {}
        self._user_locks: Dict[UserId, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        self._event_count = 0
        self._count_lock = threading.Lock()

    def _lock_for(self, user_id: UserId) -> threading.Lock:
        lock = self._user_locks.get(user_id)
        if lock is None:
            with self._locks_guard:
                lock = self._user_locks.setdefault(user_id, threading.Lock())
        return lock

    def record(
        self,
        user_id: UserId,
        item_id: ItemId,
        interaction_type: Union[str, InteractionType],
        rating: Optional[float] = None,
        timestamp: Optional[datetime] = None,
    ) -> InteractionEvent:
        """Record one interaction and add its weight to the user's vector.

        Raises:
            InvalidInteractionTypeError: If the type is not supported. The
                ledger is left untouched.
        """
        parsed_type = InteractionType.parse(interaction_type)

        event_kwargs: Dict[str, Any] = {"rating": rating}
        if timestamp is not None:
            if timestamp.tzinfo is None:
                timestamp = timestamp.replace(tzinfo=timezone.utc)
            event_kwargs["timestamp"] = timestamp
        event = InteractionEvent(
            user_id=user_id, item_id=item_id, type=parsed_type, **event_kwargs
        )
        weight = INTERACTION_WEIGHTS[parsed_type]

        with self._lock_for(user_id):
            updated = dict(self._vectors.get(user_id, {}))
            updated[item_id] = updated.get(item_id, 0) + weight
            self._events[user_id] = self._events.get(user_id, ()) + (event,)
            self._vectors[user_id] = updated

        with self._count_lock:
            self._event_count += 1

        logger.debug(
            "Recorded interaction",
            extra={
                "user_id": user_id,
                "item_id": item_id,
                "type": parsed_type.value,
                "weight": weight,
            },
        )

        return event

    def vector_for(self, user_id: UserId) -> Dict[ItemId, float]:
        """Item -> accumulated weight for a user (empty if unknown)."""
        return dict(self._vectors.get(user_id, {}))

    def vector_view(self, user_id: UserId) -> Mapping[ItemId, float]:
        # Published vectors are never mutated, so no copy is needed internally
        return self._vectors.get(user_id, {})

    def all_users(self) -> List[UserId]:
        return list(self._vectors.keys())

    def has_user(self, user_id: UserId) -> bool:
        return bool(self._vectors.get(user_id))

    def events_for(self, user_id: UserId) -> Tuple[InteractionEvent, ...]:
        """All events recorded for a user, in recording order."""
        return self._events.get(user_id, ())

    def anchor_item_for(
        self,
        user_id: UserId,
        among: Optional[Container[ItemId]] = None,
    ) -> Optional[ItemId]:
        """Item of the user's strongest interaction.

        Picks the event with the highest type weight; among equal weights the
        most recent one wins. If ``among`` is given, only events on those
        items are considered. Returns None when no event qualifies.
        """
        events = self.events_for(user_id)
        if among is not None:
            events = tuple(event for event in events if event.item_id in among)
        if not events:
            return None

        strongest = max(
            enumerate(events),
            key=lambda indexed: (indexed[1].weight, indexed[1].timestamp, indexed[0]),
        )
        return strongest[1].item_id

    def stats_for(self, user_id: UserId) -> Dict[str, Any]:
        """Summary of a user's interaction history."""
        events = self.events_for(user_id)
        by_type = Counter(event.type.value for event in events)
        return {
            "user_id": user_id,
            "total_interactions": len(events),
            "unique_items": len({event.item_id for event in events}),
            "interactions_by_type": dict(by_type),
        }

    def iter_vectors(self) -> Iterator[Tuple[UserId, Mapping[ItemId, float]]]:
        """Yield (user_id, vector) pairs for every user with interactions."""
        for user_id in list(self._vectors.keys()):
            yield user_id, self.vector_view(user_id)

    def __len__(self) -> int:
        return self._event_count
