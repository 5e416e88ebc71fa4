"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden by a CLUSTERLINT_* environment variable or .env entry
    - get_settings() is cached (lru_cache) — single instance per process
    - core/ never imports this module; services pass the values down explicitly

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults work out-of-the-box: artifacts land in the working directory
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clusterlint.core.domain_types import REQUIRED_SYSTEM_COLLECTIONS, SYSTEM_COLLECTION_PREFIX


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CLUSTERLINT_", env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Remediation output
    output_dir: Path = Path(".")
    repair_command: str = "./debugging/index.js <options>"

    # Analysis. List settings are read from env as JSON, e.g. '["_apps","_graphs"]'
    required_system_collections: list[str] = list(REQUIRED_SYSTEM_COLLECTIONS)
    system_collection_prefix: str = SYSTEM_COLLECTION_PREFIX

    @field_validator("system_collection_prefix")
    @classmethod
    def prefix_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("system_collection_prefix cannot be empty")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "text"


@lru_cache
def get_settings() -> Settings:
    return Settings()
