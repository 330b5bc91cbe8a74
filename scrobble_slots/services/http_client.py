"""
Shared outbound HTTP client for the Last.fm and Spotify calls.

Every call of a lookup (history page, token exchange, search) goes through
one pooled httpx.AsyncClient built from Settings. Requests are never retried.
"""
from typing import Annotated, Optional

import httpx
from fastapi import Depends

from scrobble_slots.config import Settings, get_settings


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create an AsyncClient with the service's timeouts, pool size and User-Agent."""
    return httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=settings.http_max_connections,
            max_keepalive_connections=settings.http_max_connections // 2,
        ),
        timeout=httpx.Timeout(
            settings.http_timeout_seconds,
            connect=settings.http_connect_timeout_seconds,
        ),
        http2=True,
    )


class HTTPClientManager:
    """Owns the process-wide client between app startup and shutdown."""

    _client: Optional[httpx.AsyncClient] = None

    @classmethod
    def get_client(cls, settings: Settings) -> httpx.AsyncClient:
        """Get the shared client, creating it from settings on first use."""
        if cls._client is None:
            cls._client = build_http_client(settings)
        return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the HTTP client. Call this on app shutdown."""
        if cls._client is not None:
            await cls._client.aclose()
            cls._client = None


def get_http_client(settings: Annotated[Settings, Depends(get_settings)]) -> httpx.AsyncClient:
    """Dependency returning the shared HTTP client."""
    return HTTPClientManager.get_client(settings)
