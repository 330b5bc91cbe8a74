import logging
from typing import Any

import httpx

from scrobble_slots.config import Settings
from scrobble_slots.core.exceptions import (
    MalformedUpstreamData,
    ServerMisconfigured,
    UpstreamError,
    UpstreamNotFound,
)

logger = logging.getLogger(__name__)

# Last.fm error code for "User not found"
LASTFM_ERROR_INVALID_RESOURCE = 6


class LastfmService:
    """Service for interacting with the Last.fm API."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.settings = settings
        self.client = client

    def _require_api_key(self) -> str:
        if not self.settings.lastfm_api_key:
            logger.error("[LastfmService] LASTFM_API_KEY is not configured on the server.")
            raise ServerMisconfigured()
        return self.settings.lastfm_api_key

    async def _request(self, method: str, **params: Any) -> dict:
        """
        Call a Last.fm API method and return the decoded JSON body.

        Translates every failure into the service error taxonomy, so nothing
        raw from httpx reaches the caller.
        """
        api_key = self._require_api_key()
        query = {
            "method": method,
            "api_key": api_key,
            "format": "json",
            **{k: str(v) for k, v in params.items()},
        }

        try:
            response = await self.client.get(self.settings.lastfm_api_url, params=query)
        except httpx.HTTPError as e:
            logger.error(f"[LastfmService] {method} request failed: {type(e).__name__}: {e}")
            raise UpstreamError()

        if response.status_code == 404:
            logger.info(f"[LastfmService] {method}: user not found")
            raise UpstreamNotFound()

        if not response.is_success:
            logger.error(
                f"[LastfmService] Last.fm API error: {response.status_code} {response.reason_phrase}"
            )
            raise UpstreamError(status_code=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.error(f"[LastfmService] {method} returned a non-JSON body")
            raise MalformedUpstreamData()

        if not isinstance(data, dict):
            raise MalformedUpstreamData()

        # Last.fm sometimes reports errors inside a 200 body
        if "error" in data:
            logger.error(f"[LastfmService] {method} error {data.get('error')}: {data.get('message')}")
            if data.get("error") == LASTFM_ERROR_INVALID_RESOURCE:
                raise UpstreamNotFound()
            raise UpstreamError()

        return data

    async def get_playcount(self, username: str) -> int:
        """
        Get a user's total scrobble count via user.getinfo.

        Args:
            username: Last.fm username

        Returns:
            Total playcount
        """
        data = await self._request("user.getinfo", user=username)

        user = data.get("user")
        if not isinstance(user, dict):
            logger.error(f"[LastfmService] Unexpected user.getinfo payload for {username}")
            raise MalformedUpstreamData("Could not find playcount for the specified user.")

        # Playcount comes back as a numeric string
        playcount = user.get("playcount")
        if playcount is None:
            logger.error(f"[LastfmService] No playcount in user.getinfo response for {username}")
            raise MalformedUpstreamData("Could not find playcount for the specified user.")

        try:
            return int(str(playcount).strip())
        except ValueError:
            logger.error(f"[LastfmService] Non-numeric playcount for {username}: {playcount!r}")
            raise MalformedUpstreamData("Invalid playcount format received from Last.fm")

    async def get_recent_tracks_page(self, username: str, page: int) -> list[dict]:
        """
        Get one page of a user's history via user.getrecenttracks.

        Tracks are ordered most recent first. A now-playing track, if any,
        is the first entry of page 1.

        Args:
            username: Last.fm username
            page: 1-based page number

        Returns:
            Raw track dicts for the page (possibly empty)
        """
        data = await self._request(
            "user.getrecenttracks",
            user=username,
            limit=self.settings.lastfm_page_size,
            page=page,
        )

        recent = data.get("recenttracks")
        if not isinstance(recent, dict):
            logger.error(f"[LastfmService] Unexpected user.getrecenttracks payload for {username}")
            raise MalformedUpstreamData()

        tracks = recent.get("track", [])
        # A page with a single track comes back as an object
        if isinstance(tracks, dict):
            tracks = [tracks]
        if not isinstance(tracks, list):
            raise MalformedUpstreamData()

        return tracks
