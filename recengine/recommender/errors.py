"""Exceptions raised by the recommendation engine.

Only malformed input and lookups with no sensible fallback are raised to
callers. ``InsufficientSignal`` is internal: the engine catches it and serves
the popularity ranking instead.
"""

from typing import Any, Dict, Optional


class RecEngineError(Exception):
    """Base exception for engine errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize exception.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class EmptyCatalogError(RecEngineError):
    """Raised when indexing is attempted on a catalog with no items."""

    def __init__(self):
        super().__init__("Cannot index an empty catalog")


class DuplicateItemError(RecEngineError):
    """Raised when the catalog contains the same item id twice."""

    def __init__(self, item_id: Any):
        super().__init__(
            f"Catalog contains duplicate item id {item_id!r}",
            details={"item_id": item_id},
        )


class UnknownItemError(RecEngineError):
    """Raised when an item id is not present in the current index."""

    def __init__(self, item_id: Any):
        super().__init__(
            f"Item {item_id!r} is not in the catalog index",
            details={"item_id": item_id},
        )


class UnknownUserError(RecEngineError):
    """Raised when a user has no recorded interactions."""

    def __init__(self, user_id: Any):
        super().__init__(
            f"User {user_id!r} has no recorded interactions",
            details={"user_id": user_id},
        )


class InvalidInteractionTypeError(RecEngineError):
    """Raised when an interaction type is outside the supported set."""

    def __init__(self, interaction_type: Any):
        super().__init__(
            f"Invalid interaction type {interaction_type!r}. "
            "Expected one of: view, like, cart_add, purchase",
            details={"type": interaction_type},
        )


class InvalidModeError(RecEngineError):
    """Raised when a recommendation mode is not recognised."""

    def __init__(self, mode: Any):
        super().__init__(
            f"Invalid recommendation mode {mode!r}. "
            "Expected one of: content, collaborative, hybrid",
            details={"mode": mode},
        )


class NoCategoriesError(RecEngineError):
    """Raised when category-based recommendations are requested without categories."""

    def __init__(self):
        super().__init__("At least one category is required for category-based recommendations")


class EngineNotReadyError(RecEngineError):
    """Raised when no catalog generation has been built yet."""

    def __init__(self, operation: str):
        super().__init__(
            f"Recommendation engine is not initialized; cannot {operation}. "
            "Call initialize() with a catalog first.",
            details={"operation": operation},
        )


class InsufficientSignal(RecEngineError):
    """Signals that a strategy has too little data and the caller must fall back."""
