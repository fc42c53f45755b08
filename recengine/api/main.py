"""FastAPI application main module.

This module defines the FastAPI application for the RecEngine service. It
wires the routers, error handlers and request logging, and optionally loads
a catalog and interaction log from CSV at startup.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI

from recengine.api.dependencies import get_engine, reset_engine
from recengine.api.exceptions import register_exception_handlers
from recengine.api.logging_config import RequestLoggingMiddleware, setup_logging
from recengine.api.metrics import metrics_service
from recengine.api.routes import interactions, recommend
from recengine.api.settings import settings
from recengine.recommender.engine import RecommendationEngine
from recengine.recommender.utils import load_catalog_csv, load_interactions_csv

logger = logging.getLogger(__name__)


def load_startup_data(engine: RecommendationEngine) -> None:
    """Initialize the engine from the CSV exports named in settings, if any."""
    if not settings.catalog_csv:
        logger.info("No startup catalog configured; waiting for /engine/initialize")
        return

    engine.initialize(load_catalog_csv(settings.catalog_csv))

    if settings.interactions_csv:
        engine.record_events(load_interactions_csv(settings.interactions_csv))


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)
    load_startup_data(get_engine())
    yield
    reset_engine()


# Create FastAPI application instance
app = FastAPI(
    title=settings.app_name,
    description="Product recommendation service",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
register_exception_handlers(app)

# Include routers
app.include_router(recommend.router)
app.include_router(interactions.router)


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/status")
def engine_status(engine: RecommendationEngine = Depends(get_engine)) -> Dict[str, Any]:
    """Engine lifecycle state and snapshot sizes."""
    return engine.status()


@app.get("/metrics")
def get_metrics() -> Dict[str, Any]:
    """Recommendation traffic counters and latency."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "recengine.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
