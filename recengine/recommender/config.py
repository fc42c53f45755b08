"""Engine configuration.

Tunable constants live here as module-level defaults; ``EngineConfig``
bundles them so an engine can be built with overrides, or from
``RECENGINE_*`` environment variables.
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

# Content similarity term weights (sum to 1.0)
DEFAULT_TEXT_WEIGHT = 0.40
DEFAULT_CATEGORY_WEIGHT = 0.30
DEFAULT_SUBCATEGORY_WEIGHT = 0.10
DEFAULT_PRICE_WEIGHT = 0.10
DEFAULT_RATING_WEIGHT = 0.10

# Users at or below this similarity are treated as noise
DEFAULT_MIN_USER_SIMILARITY = 0.1

# Hybrid blending
DEFAULT_CONTENT_BLEND_WEIGHT = 0.6
DEFAULT_COLLABORATIVE_BLEND_WEIGHT = 0.4
DEFAULT_HYBRID_CANDIDATE_RATIO = 0.7

DEFAULT_LIMIT = 10
DEFAULT_MAX_WORKERS = 4

MAX_RATING = 5.0

ENV_PREFIX = "RECENGINE_"


@dataclass(frozen=True)
class EngineConfig:
    """Weights and thresholds used by the engine components."""

    text_weight: float = DEFAULT_TEXT_WEIGHT
    category_weight: float = DEFAULT_CATEGORY_WEIGHT
    subcategory_weight: float = DEFAULT_SUBCATEGORY_WEIGHT
    price_weight: float = DEFAULT_PRICE_WEIGHT
    rating_weight: float = DEFAULT_RATING_WEIGHT
    min_user_similarity: float = DEFAULT_MIN_USER_SIMILARITY
    content_blend_weight: float = DEFAULT_CONTENT_BLEND_WEIGHT
    collaborative_blend_weight: float = DEFAULT_COLLABORATIVE_BLEND_WEIGHT
    hybrid_candidate_ratio: float = DEFAULT_HYBRID_CANDIDATE_RATIO
    default_limit: int = DEFAULT_LIMIT
    max_workers: int = DEFAULT_MAX_WORKERS

    def __post_init__(self) -> None:
        if not 0.0 < self.hybrid_candidate_ratio <= 1.0:
            raise ValueError(
                f"hybrid_candidate_ratio must be in (0, 1], got {self.hybrid_candidate_ratio}"
            )
        if self.default_limit < 1:
            raise ValueError(f"default_limit must be positive, got {self.default_limit}")
        if self.max_workers < 2:
            raise ValueError(
                f"max_workers must be at least 2 for hybrid fan-out, got {self.max_workers}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config from ``RECENGINE_<FIELD>`` environment variables.

        Unset variables keep their defaults. For example
        ``RECENGINE_MIN_USER_SIMILARITY=0.2`` overrides the neighbor threshold.
        """
        environ = os.environ if environ is None else environ
        overrides = {}

        for config_field in fields(cls):
            raw = environ.get(ENV_PREFIX + config_field.name.upper())
            if raw is None:
                continue
            caster = int if config_field.type in (int, "int") else float
            try:
                overrides[config_field.name] = caster(raw)
            except ValueError as e:
                raise ValueError(
                    f"Invalid value for {ENV_PREFIX}{config_field.name.upper()}: {raw!r}"
                ) from e

        if overrides:
            logger.info(f"Engine config overrides from environment: {overrides}")

        return cls(**overrides)
