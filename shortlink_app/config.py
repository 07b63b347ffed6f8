from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Application
    app_name: str = "Shortlink Analytics"
    app_version: str = "1.0.0"

    # Database (aliases and clicks)
    database_url: str = "sqlite:///./shortlink.db"
    db_pool_size: int = 10
    db_max_overflow: int = 5

    # Alias generation
    base_url: str = "http://127.0.0.1:8000"
    short_code_length: int = 6
    max_retries: int = 5  # Collision retries for generated codes

    # Cache settings
    cache_backend: str = "redis"  # Options: "redis", "memory", "null"
    redis_url: str = "redis://localhost:6379/0"
    cache_ttl: int = 3600  # Seconds, independent of alias expiry. 0 = no TTL
    cache_key_prefix: str = "alias"

    # Click recording
    click_queue_size: int = 1000  # Backlog cap, overflow is dropped
    click_workers: int = 4
    click_shutdown_timeout: float = 5.0

    # Analytics
    analytics_timezone: str = "UTC"  # Reference timezone for day/month windows

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
