"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - Domain roots, id strategy and limits come from environment variables or .env
    - get_settings() is cached (lru_cache) - single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults match the data/ layout so a checkout runs out-of-the-box
"""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from app.core.domain_types import IdStrategy


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage domains
    static_root: Path = Path("data/static")
    business_root: Path = Path("data/business")
    user_root: Path = Path("data/user")

    # Identity profiles live at <user_root>/<identity_collection>/<id>/
    identity_collection: str = "user"
    index_document: str = "index.html"

    @field_validator("identity_collection")
    @classmethod
    def single_segment(cls, v: str) -> str:
        v = v.strip("/")
        if not v or "/" in v or v in (".", ".."):
            raise ValueError("identity_collection must be a single path segment")
        return v

    # Ownership walk hop cap
    ownership_max_depth: int = Field(128, ge=1)

    id_strategy: IdStrategy = IdStrategy.UUID

    # API
    cors_origins: list[str] = ["http://localhost:8080"]
    gzip_minimum_size: int = 500

    # Observability
    log_requests: bool = True
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
