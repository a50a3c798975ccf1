"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Backend API
    api_base_url: str = "http://127.0.0.1:5001"
    api_timeout: float = Field(
        default=30.0,
        description="Transport timeout per request, seconds"
    )
    api_max_concurrent: int = 8

    # Search
    search_threshold: float = Field(
        default=0.5,
        description="Similarity threshold sent with every search request"
    )
    search_debounce: float = 0.3
    page_size: int = 9
    page_window: int = Field(
        default=5,
        description="Number of contiguous page markers around the current page"
    )

    # Suggestions
    suggest_debounce: float = 0.3
    suggest_limit: int | None = Field(
        default=None,
        description="Optional client-side cap on suggestions; the backend decides by default"
    )

    # Graph
    reference_relation: str = Field(
        default="hasWikipediaPage",
        description="Relation linking concepts to external reference pages, hidden from users"
    )

    log_level: str = "INFO"


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(
        api_base_url="http://127.0.0.1:5001",
        log_level="DEBUG",
    )


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        api_base_url="http://testserver",
        api_timeout=5.0,
        search_debounce=0.01,
        suggest_debounce=0.01,
        log_level="DEBUG",
    )


# Global settings instance
settings = Settings()
