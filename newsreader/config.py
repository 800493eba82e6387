"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    environment: str = "development"

    # CORS: the reader front-end and fetch-news callers may be on any origin
    cors_origins: list[str] = ["*"]
    cors_allow_headers: list[str] = [
        "authorization",
        "x-client-info",
        "apikey",
        "content-type",
        "x-admin-key",
        "x-user-id",
    ]

    # Azure Blob Storage (article store)
    azure_storage_account: str = "newsreaderstorage"
    azure_storage_container: str = "articles"

    # Azure User-Assigned Managed Identity
    managed_identity_client_id: str = ""

    # Admin API key (protects /admin routes)
    admin_api_key: str = ""

    # Feed fetching
    feed_request_timeout: float = 30.0
    feed_user_agent: str = "NewsReader/1.0 (RSS Ingest)"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
