"""Service settings loaded from the environment."""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from recengine.recommender.config import EngineConfig

# Load environment variables from .env file
load_dotenv()


@dataclass
class Settings:
    """Service layer settings."""

    app_name: str = "RecEngine API"
    app_version: str = "0.1.0"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    # Optional CSV exports loaded into the engine at startup
    catalog_csv: Optional[str] = None
    interactions_csv: Optional[str] = None

    engine: EngineConfig = field(default_factory=EngineConfig)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_host=os.getenv("RECENGINE_API_HOST", cls.api_host),
            api_port=int(os.getenv("RECENGINE_API_PORT", str(cls.api_port))),
            log_level=os.getenv("RECENGINE_LOG_LEVEL", cls.log_level),
            catalog_csv=os.getenv("RECENGINE_CATALOG_CSV") or None,
            interactions_csv=os.getenv("RECENGINE_INTERACTIONS_CSV") or None,
            engine=EngineConfig.from_env(),
        )


settings = Settings.from_env()
