"""Service configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ngonchaos_env: str = "development"
    ngonchaos_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Upper bound on iterations a single API request may ask for
    max_api_iterations: int = 2_000_000
    # Points per SSE "points" event
    stream_batch_size: int = 1500

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
