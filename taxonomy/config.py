"""Library configuration using Pydantic Settings.

Reads configuration from environment variables (prefixed ``TAXONOMY_``)
with sensible defaults. Every value can also be passed explicitly to the
component that uses it, so tests never depend on the environment.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TAXONOMY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    environment: Literal["prod", "staging", "dev"] = Field(
        default="dev",
        description="Environment name",
    )

    # =========================================================================
    # Category hierarchy
    # =========================================================================
    max_depth: int = Field(
        default=32,
        ge=1,
        description="Maximum parent hops before a node is considered cyclic",
    )
    max_selection_levels: int = Field(
        default=4,
        ge=1,
        description="Selection chain length (main category + three sub levels)",
    )

    # =========================================================================
    # Auto-classification
    # =========================================================================
    manual_assignment_threshold: int = Field(
        default=50,
        ge=0,
        description="Confidence below which an imported row needs manual assignment",
    )
    keyword_families_path: str | None = Field(
        default=None,
        description="Optional YAML file overriding the keyword family table",
    )

    # =========================================================================
    # Logging
    # =========================================================================
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Output logs as JSON",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Singleton instance for convenience
settings = get_settings()
