"""Tests for the interaction ledger."""

import threading
from datetime import datetime, timedelta, timezone

import pytest

from recengine.recommender.errors import InvalidInteractionTypeError
from recengine.recommender.ledger import InteractionLedger
from recengine.recommender.models import InteractionType


@pytest.fixture
def ledger():
    return InteractionLedger()


def test_record_accumulates_weights(ledger):
    """Weights of repeated events on the same item add up."""
    ledger.record("u1", 10, "view")
    ledger.record("u1", 10, "like")
    ledger.record("u1", 11, "purchase")

    assert ledger.vector_for("u1") == {10: 4, 11: 10}
    assert len(ledger) == 3


def test_interaction_weights():
    """view < like < cart_add < purchase."""
    ledger = InteractionLedger()
    for offset, interaction_type in enumerate(["view", "like", "cart_add", "purchase"]):
        ledger.record("u", offset, interaction_type)

    assert ledger.vector_for("u") == {0: 1, 1: 3, 2: 5, 3: 10}


def test_unknown_type_leaves_ledger_unchanged(ledger):
    """An unsupported type raises and nothing is recorded."""
    ledger.record("u1", 10, "view")
    before = ledger.vector_for("u1")

    with pytest.raises(InvalidInteractionTypeError) as exc_info:
        ledger.record("u1", 10, "wishlist")

    assert exc_info.value.details == {"type": "wishlist"}
    assert ledger.vector_for("u1") == before
    assert len(ledger) == 1
    assert len(ledger.events_for("u1")) == 1


def test_vector_for_returns_copy(ledger):
    """Mutating a returned vector does not touch the ledger."""
    ledger.record("u1", 10, "view")

    vector = ledger.vector_for("u1")
    vector[10] = 999

    assert ledger.vector_for("u1") == {10: 1}


def test_unknown_user_has_empty_vector(ledger):
    assert ledger.vector_for("ghost") == {}
    assert ledger.has_user("ghost") is False
    assert ledger.events_for("ghost") == ()


def test_published_vector_is_not_mutated_by_later_writes(ledger):
    """A vector a reader already holds never changes under it."""
    ledger.record("u1", 10, "view")
    snapshot = ledger.vector_view("u1")

    ledger.record("u1", 10, "purchase")

    assert snapshot == {10: 1}
    assert ledger.vector_view("u1") == {10: 11}


def test_naive_timestamps_are_treated_as_utc(ledger):
    event = ledger.record("u1", 10, "view", timestamp=datetime(2024, 1, 1, 12, 0))

    assert event.timestamp.tzinfo is timezone.utc


def test_anchor_prefers_strongest_then_most_recent(ledger):
    """The anchor is the highest-weight event; recency breaks weight ties."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ledger.record("u1", 1, "purchase", timestamp=base)
    ledger.record("u1", 2, "view", timestamp=base + timedelta(days=2))
    ledger.record("u1", 3, "purchase", timestamp=base + timedelta(days=1))

    assert ledger.anchor_item_for("u1") == 3


def test_anchor_restricted_to_known_items(ledger):
    ledger.record("u1", 1, "purchase")
    ledger.record("u1", 2, "view")

    assert ledger.anchor_item_for("u1", among={2}) == 2
    assert ledger.anchor_item_for("u1", among={99}) is None
    assert ledger.anchor_item_for("nobody") is None


def test_stats_for(ledger):
    ledger.record("u1", 1, InteractionType.VIEW)
    ledger.record("u1", 1, InteractionType.PURCHASE)
    ledger.record("u1", 2, InteractionType.VIEW)

    stats = ledger.stats_for("u1")

    assert stats == {
        "user_id": "u1",
        "total_interactions": 3,
        "unique_items": 2,
        "interactions_by_type": {"view": 2, "purchase": 1},
    }


def test_concurrent_writes_are_not_lost(ledger):
    """Parallel writers on one user each land exactly once."""
    def write():
        for _ in range(200):
            ledger.record("u1", 1, "view")

    threads = [threading.Thread(target=write) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert ledger.vector_for("u1") == {1: 800}
    assert len(ledger) == 800
