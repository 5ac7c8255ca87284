"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here; no scattered magic strings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        environment: Deployment environment; "production" enables secure cookies.
        api_prefix: Mount point of the JSON API.
        cache_backend: "memory" or "redis".
        cache_ttl_seconds: Default lifetime of cached renders.
        cache_max_entries: Entry cap of the in-process cache backend.
        events_page_size: Number of events per listing page.
        rate_limit_enabled: Turn rate limiting off (tests, trusted networks).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_search: Rate limit for market search.

    Database settings follow the usual precedence: an explicit
    `DATABASE_URL` wins, otherwise a DSN is built from the postgres_* values.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "EventDesk"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"
    api_prefix: str = "/api"
    site_url: str = "http://localhost:3000"

    rate_limit_enabled: bool = True
    rate_limit_default: str = "120/minute"
    rate_limit_search: str = "60/minute"

    # Database
    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "eventdesk"
    db_pool_size: int = 5
    db_max_overflow: int = 0
    auto_create_schema: bool = False

    # Cache
    cache_backend: str = "memory"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl_seconds: int = 300
    cache_max_entries: int = 2048

    events_page_size: int = 40

    # Push notification defaults
    push_default_title: str = "EventDesk"
    push_default_body: str = "You have a new notification."
    push_default_icon: str = "/icon-192.png"
    push_default_badge: str = "/badge-72.png"
    push_default_url: str = "/"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    def get_database_url(self) -> str:
        """Return the effective database URL.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build a DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
