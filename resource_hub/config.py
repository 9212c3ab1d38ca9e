"""Client configuration using Pydantic Settings."""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote resource API
    resource_api_url: str = "http://localhost:8000"
    request_timeout: float = 30.0

    # Session context (resolved elsewhere, only read here)
    access_token: str = ""
    organization_uuid: str = ""
    event_uuid: str = ""

    # Tree handling
    max_tree_depth: int = 32  # Cycle guard for whole-tree loads
    root_label: str = "All media"

    # App Settings
    log_level: str = "INFO"
    debug: bool = False

    @property
    def api_base_url(self) -> str:
        """Return the API URL without a trailing slash."""
        return self.resource_api_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
