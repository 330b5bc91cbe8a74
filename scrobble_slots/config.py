from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Application
    app_name: str = "Scrobble Slots API"
    log_level: str = "INFO"
    api_prefix: str = ""
    cors_origins: list[str] = ["*"]

    # Outbound HTTP (Last.fm asks clients to identify themselves)
    user_agent: str = "scrobble-slots/1.0.0"
    http_timeout_seconds: float = 15.0
    http_connect_timeout_seconds: float = 5.0
    http_max_connections: int = 20

    # Last.fm API (history + user info)
    lastfm_api_key: Optional[str] = None
    lastfm_api_url: str = "https://ws.audioscrobbler.com/2.0/"
    lastfm_page_size: int = 200  # Max limit per page for user.getrecenttracks

    # Spotify API (client credentials, enrichment only)
    spotify_client_id: Optional[str] = None
    spotify_client_secret: Optional[str] = None
    spotify_market: str = "US"

    # Redis (optional response cache, disabled when unset)
    redis_url: Optional[str] = None
    cache_ttl_seconds: int = 300
    cache_stale_while_revalidate_seconds: int = 600

    @property
    def spotify_configured(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret)

    @property
    def cache_control_header(self) -> str:
        ttl = self.cache_ttl_seconds
        return (
            f"public, max-age={ttl}, s-maxage={ttl}, "
            f"stale-while-revalidate={self.cache_stale_while_revalidate_seconds}"
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
