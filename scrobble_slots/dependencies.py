from typing import Annotated

import httpx
from fastapi import Depends

from scrobble_slots.config import Settings, get_settings
from scrobble_slots.services.http_client import get_http_client
from scrobble_slots.services.lastfm_service import LastfmService
from scrobble_slots.services.spotify_service import SpotifyService
from scrobble_slots.services.track_service import TrackService


def get_track_service(
    settings: Annotated[Settings, Depends(get_settings)],
    client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> TrackService:
    """
    Dependency that wires the Last.fm and Spotify services for a request.

    Usage:
        @router.get("/playcount")
        async def playcount(service: TrackServiceDep):
            ...
    """
    return TrackService(
        settings=settings,
        lastfm=LastfmService(settings, client),
        spotify=SpotifyService(settings, client),
    )


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
TrackServiceDep = Annotated[TrackService, Depends(get_track_service)]
