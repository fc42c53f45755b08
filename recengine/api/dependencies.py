"""Process-wide engine instance shared by the API routes."""

import logging
import threading
from typing import Optional

from recengine.api.settings import settings
from recengine.recommender.engine import RecommendationEngine

logger = logging.getLogger(__name__)

_engine: Optional[RecommendationEngine] = None
_engine_lock = threading.Lock()


def get_engine() -> RecommendationEngine:
    """Return the shared engine, creating it on first use."""
    global _engine

    if _engine is None:
        with _engine_lock:
            if _engine is None:
                logger.info("Creating recommendation engine")
                _engine = RecommendationEngine(config=settings.engine)
    return _engine


def reset_engine() -> None:
    """Discard the shared engine (useful for testing)."""
    global _engine

    with _engine_lock:
        if _engine is not None:
            _engine.close()
        _engine = None
