"""Shared fixtures: settings, a controllable clock and HTTP clients."""

import httpx
import pytest

from helpers import FakeClock
from scrobble_slots.config import Settings
from scrobble_slots.services.cache_service import CacheService
from scrobble_slots.services.http_client import HTTPClientManager
from scrobble_slots.services.spotify_service import SpotifyTokenCache, spotify_token_cache


@pytest.fixture
def settings() -> Settings:
    """Settings with Last.fm and Spotify configured, no Redis."""
    return Settings(
        _env_file=None,
        lastfm_api_key="test-key",
        spotify_client_id="client-id",
        spotify_client_secret="client-secret",
        redis_url=None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_cache(clock: FakeClock) -> SpotifyTokenCache:
    return SpotifyTokenCache(clock=clock)


@pytest.fixture
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture(autouse=True)
async def reset_process_state():
    """Drop the process-wide token, HTTP client and cache connections between tests."""
    spotify_token_cache.clear()
    yield
    spotify_token_cache.clear()
    await HTTPClientManager.close()
    CacheService._clients.clear()
