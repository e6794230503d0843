"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    shapesense_env: str = "development"
    shapesense_log_level: str = "info"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Largest image accepted over HTTP (pixels)
    max_image_pixels: int = 4096 * 4096

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
