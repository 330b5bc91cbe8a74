from scrobble_slots.schemas.track import (
    ErrorResponse,
    LastfmDate,
    LastfmImage,
    LastfmText,
    PlaycountResponse,
    ScrobbleRecord,
    SpotifyMatch,
    TrackByIndexResponse,
)

__all__ = [
    "ErrorResponse",
    "LastfmDate",
    "LastfmImage",
    "LastfmText",
    "PlaycountResponse",
    "ScrobbleRecord",
    "SpotifyMatch",
    "TrackByIndexResponse",
]
