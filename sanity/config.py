from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Comma / semicolon separated glob paths of module files
    sanity_modules: str = ""

    # Comma / semicolon separated Python files run once before loading
    # Each must define `setup(sanity)`
    sanity_require: str = ""

    # SQLite cache location (empty = ~/.cache/sanity/cache.db)
    sanity_cache_path: str = ""

    # HTTP endpoint
    sanity_host: str = "127.0.0.1"
    sanity_port: int = 8080

    # Logging
    log_level: str = "WARNING"


settings = Settings()
