import base64
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx

from scrobble_slots.config import Settings
from scrobble_slots.core.exceptions import MissingCredentials
from scrobble_slots.schemas.track import SpotifyMatch
from scrobble_slots.utils.titles import build_track_query, normalize_track_title

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SpotifyAccessToken:
    """Client-credentials token with its absolute expiry."""
    value: str
    expires_at: datetime


class SpotifyTokenCache:
    """
    Process-wide holder for the Spotify client-credentials token.

    States: absent (nothing cached), valid (more than SAFETY_MARGIN before
    expiry) and expiring (inside the margin or past expiry). Writers always
    overwrite the whole token, so concurrent refreshes can only waste a
    token request.
    """

    SAFETY_MARGIN = timedelta(seconds=15)

    def __init__(self, clock: Clock = utc_now):
        self._clock = clock
        self._lock = threading.Lock()
        self._token: Optional[SpotifyAccessToken] = None

    def now(self) -> datetime:
        return self._clock()

    @property
    def state(self) -> str:
        with self._lock:
            token = self._token
        if token is None:
            return "absent"
        if self.now() < token.expires_at - self.SAFETY_MARGIN:
            return "valid"
        return "expiring"

    def get_valid(self) -> Optional[str]:
        """Return the cached token value if it is still valid, else None."""
        with self._lock:
            token = self._token
        if token is not None and self.now() < token.expires_at - self.SAFETY_MARGIN:
            return token.value
        return None

    def store(self, value: str, expires_in: int, issued_at: Optional[datetime] = None) -> SpotifyAccessToken:
        """Replace the cached token; expiry is issued_at + expires_in."""
        issued_at = issued_at or self.now()
        token = SpotifyAccessToken(value=value, expires_at=issued_at + timedelta(seconds=expires_in))
        with self._lock:
            self._token = token
        return token

    @property
    def token(self) -> Optional[SpotifyAccessToken]:
        with self._lock:
            return self._token

    def clear(self) -> None:
        with self._lock:
            self._token = None


class SpotifyService:
    """Service for best-effort Spotify track lookups."""

    TOKEN_URL = "https://accounts.spotify.com/api/token"
    API_BASE_URL = "https://api.spotify.com/v1"
    TRACK_URL = "https://open.spotify.com/track/"

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        token_cache: Optional[SpotifyTokenCache] = None,
    ):
        self.settings = settings
        self.client = client
        self.token_cache = token_cache or spotify_token_cache

    async def _get_access_token(self) -> str:
        """Get or refresh Spotify access token using Client Credentials flow."""
        # Return cached token if still valid
        cached = self.token_cache.get_valid()
        if cached:
            return cached

        if not self.settings.spotify_configured:
            raise MissingCredentials()

        credentials = f"{self.settings.spotify_client_id}:{self.settings.spotify_client_secret}"
        encoded_credentials = base64.b64encode(credentials.encode()).decode()

        issued_at = self.token_cache.now()
        response = await self.client.post(
            self.TOKEN_URL,
            headers={
                "Authorization": f"Basic {encoded_credentials}",
                "Content-Type": "application/x-www-form-urlencoded",
            },
            data={"grant_type": "client_credentials"},
        )
        response.raise_for_status()
        data = response.json()

        token = self.token_cache.store(
            data["access_token"],
            int(data.get("expires_in", 3600)),
            issued_at=issued_at,
        )
        logger.info(f"[SpotifyService] Refreshed access token, expires at {token.expires_at.isoformat()}")
        return token.value

    async def search_track(self, artist: str, title: str) -> Optional[SpotifyMatch]:
        """
        Search Spotify for a single track. Raises on any failure.

        Args:
            artist: Artist name
            title: Track title, normalized before searching

        Returns:
            The best match, or None if Spotify has no result
        """
        token = await self._get_access_token()
        query = build_track_query(artist, normalize_track_title(title))

        response = await self.client.get(
            f"{self.API_BASE_URL}/search",
            headers={"Authorization": f"Bearer {token}"},
            params={
                "q": query,
                "type": "track",
                "limit": 1,
                "market": self.settings.spotify_market,
            },
        )
        response.raise_for_status()
        data = response.json()

        items = (data.get("tracks") or {}).get("items") or []
        if not items:
            return None

        item = items[0]
        return SpotifyMatch(
            id=item["id"],
            url=(item.get("external_urls") or {}).get("spotify") or f"{self.TRACK_URL}{item['id']}",
            preview=item.get("preview_url"),
            name=item.get("name", ""),
            artists=[a["name"] for a in item.get("artists", []) if a.get("name")],
        )

    async def find_track(self, artist: str, title: str) -> Optional[SpotifyMatch]:
        """
        Enrichment entry point: never raises, returns None when there is no match.
        """
        artist = (artist or "").strip()
        title = (title or "").strip()
        if not artist or not title:
            return None

        try:
            match = await self.search_track(artist, title)
        except MissingCredentials:
            logger.debug("[SpotifyService] Credentials not configured, skipping enrichment")
            return None
        except Exception as e:
            logger.warning(f"[SpotifyService] Enrichment failed for {artist} - {title}: {type(e).__name__}: {e}")
            return None

        if match is None:
            logger.info(f"[SpotifyService] No match for {artist} - {title}")
        return match


# Singleton token cache shared by all requests
spotify_token_cache = SpotifyTokenCache()
