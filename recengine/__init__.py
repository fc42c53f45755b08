"""RecEngine: product recommendation engine.

This package provides an in-memory recommendation engine that ranks catalog
products for users by content similarity, behavioral similarity between
users, a blend of both, and a popularity fallback for cold-start callers.

Modules:
    api: FastAPI service layer exposing the engine over HTTP
    recommender: Engine core (indexing, similarity, ledger, orchestration)
"""

__version__ = "0.1.0"
