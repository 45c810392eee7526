"""Process configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    log_level: str = "info"

    # Default algorithm for extract_segments(), one of engine.config.ALGORITHMS
    algorithm: str = "dbscan"

    # Pixels with alpha at or below this are excluded from segmentation
    alpha_threshold: int = 0

    model_config = {"env_prefix": "AUTOPALETTE_", "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
