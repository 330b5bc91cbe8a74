"""
Index-to-track resolution for the slot machine.

Resolving index n against a playcount assumes the history did not change in
between. New scrobbles push every older entry further from the front, so a
lookup after fresh plays lands on a different (more recent) track or on an
empty slot. That window is accepted: the index is relative to the playcount
snapshot the client holds.
"""
import logging

from pydantic import ValidationError

from scrobble_slots.config import Settings
from scrobble_slots.core.exceptions import MalformedUpstreamData, MissingParameter, TrackNotFound
from scrobble_slots.core.pagination import locate_index, validate_index
from scrobble_slots.schemas.track import ScrobbleRecord, TrackByIndexResponse
from scrobble_slots.services.cache_service import CacheKeys, CacheService
from scrobble_slots.services.lastfm_service import LastfmService
from scrobble_slots.services.spotify_service import SpotifyService

logger = logging.getLogger(__name__)


class TrackService:
    """Resolves playcounts and reverse-chronological indices to tracks."""

    def __init__(self, settings: Settings, lastfm: LastfmService, spotify: SpotifyService):
        self.settings = settings
        self.lastfm = lastfm
        self.spotify = spotify
        self.cache = CacheService(settings)

    @property
    def cache_enabled(self) -> bool:
        return self.cache.enabled

    async def get_max_playcount(self, username: str | None) -> int:
        """
        Get the user's total scrobble count, the upper bound for indices.

        Raises:
            MissingParameter: username absent or blank
        """
        username = (username or "").strip()
        if not username:
            raise MissingParameter("Missing required parameter: user")

        cache_key = f"{CacheKeys.PLAYCOUNT}{username.lower()}"
        if self.cache_enabled:
            cached = await self.cache.get_json(cache_key)
            if isinstance(cached, int):
                return cached

        playcount = await self.lastfm.get_playcount(username)

        if self.cache_enabled:
            await self.cache.set_json(cache_key, playcount, ttl=self.settings.cache_ttl_seconds)
        return playcount

    async def get_track_by_index(self, username: str | None, n: int, max_playcount: int) -> TrackByIndexResponse:
        """
        Get the n-th most recent scrobble, plus a Spotify match when one is found.

        Args:
            username: Last.fm username
            n: 1-based index, 1 being the most recent scrobble
            max_playcount: Playcount the index was drawn against

        Raises:
            MissingParameter: username absent or blank
            InvalidIndex: n outside 1..max_playcount
            TrackNotFound: the computed page has no record at the offset
        """
        username = (username or "").strip()
        if not username:
            raise MissingParameter("Missing required parameters: user, n, maxPlaycount")
        validate_index(n, max_playcount)

        cache_key = f"{CacheKeys.TRACK_BY_INDEX}{username.lower()}:{max_playcount}:{n}"
        if self.cache_enabled:
            cached = await self.cache.get_json(cache_key)
            if cached:
                try:
                    return TrackByIndexResponse.model_validate(cached)
                except ValidationError:
                    logger.warning(f"[TrackService] Ignoring unreadable cache entry {cache_key}")

        position = locate_index(n, max_playcount, page_size=self.settings.lastfm_page_size)
        tracks = await self.lastfm.get_recent_tracks_page(username, position.page)

        if position.offset >= len(tracks):
            logger.info(
                f"[TrackService] No track for {username} at page {position.page} "
                f"offset {position.offset} (page has {len(tracks)})"
            )
            raise TrackNotFound()

        try:
            track = ScrobbleRecord.model_validate(tracks[position.offset])
        except ValidationError as e:
            logger.error(f"[TrackService] Unexpected track payload from Last.fm: {e}")
            raise MalformedUpstreamData()

        spotify = await self.spotify.find_track(track.artist_name, track.name)
        result = TrackByIndexResponse(track=track, spotify=spotify)

        if self.cache_enabled:
            await self.cache.set_json(
                cache_key,
                result.model_dump(mode="json", by_alias=True),
                ttl=self.settings.cache_ttl_seconds,
            )
        return result
