"""
Configuration management for the literature investigation engine.

Uses Pydantic Settings to load and validate run defaults from environment
variables (prefixed with ``LITMAP_``) or a .env file. Explicit run
parameters always take precedence over these defaults.
"""

from functools import lru_cache
from typing import Literal, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from litmap.models.schemas import DatabaseId


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    All settings can be overridden via .env file or LITMAP_* variables.
    """

    # Application Settings
    app_name: str = Field(
        default="Literature Investigation Engine",
        description="Name of the application"
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )

    # Search Settings
    max_concurrent_searches: int = Field(
        default=3,
        ge=1,
        le=16,
        description="Maximum number of keyword-sequence searches in flight at once"
    )
    search_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        le=300.0,
        description="Timeout applied to each external search call"
    )
    default_databases: Union[str, list[DatabaseId]] = Field(
        default="arxiv,google_scholar,pubmed",
        description="Databases queried when a run does not name any"
    )

    # Investigation Limits
    max_papers_per_sequence: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Results requested per keyword sequence"
    )
    total_max_papers: int = Field(
        default=100,
        ge=1,
        le=5000,
        description="Cap on investigated papers kept in a result"
    )
    max_sequences: int = Field(
        default=10,
        ge=1,
        le=10,
        description="Number of keyword sequences retained after scoring"
    )

    model_config = SettingsConfigDict(
        env_prefix="LITMAP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("default_databases", mode="before")
    @classmethod
    def parse_default_databases(cls, v):
        """Parse databases from comma-separated string or list."""
        if isinstance(v, str):
            return [db.strip().lower() for db in v.split(",") if db.strip()]
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: The engine settings instance
    """
    return Settings()
