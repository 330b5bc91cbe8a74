"""Last.fm and Spotify payload builders plus a controllable clock for tests."""

from datetime import datetime, timedelta, timezone
from typing import Any

import httpx

LASTFM_URL = "https://ws.audioscrobbler.com/2.0/"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_SEARCH_URL = "https://api.spotify.com/v1/search"


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self) -> None:
        self.current = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


def lastfm_url(method: str, **params: Any) -> httpx.URL:
    """Exact Last.fm request URL as built by LastfmService."""
    query = {"method": method, "api_key": "test-key", "format": "json"}
    query.update({k: str(v) for k, v in params.items()})
    return httpx.URL(LASTFM_URL, params=query)


def spotify_search_url(query: str, market: str = "US") -> httpx.URL:
    return httpx.URL(
        SPOTIFY_SEARCH_URL,
        params={"q": query, "type": "track", "limit": "1", "market": market},
    )


def make_track(
    index: int,
    artist: str = "Test Artist",
    name: str | None = None,
    now_playing: bool = False,
) -> dict:
    """Last.fm recenttracks entry."""
    track = {
        "artist": {"mbid": "", "#text": artist},
        "streamable": "0",
        "image": [
            {"size": "small", "#text": f"https://lastfm.freetls.fastly.net/i/u/34s/{index}.jpg"},
            {"size": "medium", "#text": f"https://lastfm.freetls.fastly.net/i/u/64s/{index}.jpg"},
            {"size": "large", "#text": f"https://lastfm.freetls.fastly.net/i/u/174s/{index}.jpg"},
            {"size": "extralarge", "#text": f"https://lastfm.freetls.fastly.net/i/u/300x300/{index}.jpg"},
        ],
        "mbid": "",
        "album": {"mbid": "", "#text": "Test Album"},
        "name": name or f"Song {index}",
        "url": f"https://www.last.fm/music/Test+Artist/_/Song+{index}",
    }
    if now_playing:
        track["@attr"] = {"nowplaying": "true"}
    else:
        track["date"] = {"uts": str(1700000000 - index), "#text": "14 Nov 2023, 22:13"}
    return track


def recent_tracks_payload(tracks: list[dict], page: int = 1, total: int = 500) -> dict:
    return {
        "recenttracks": {
            "track": tracks,
            "@attr": {
                "user": "alice",
                "page": str(page),
                "perPage": "200",
                "totalPages": str((total + 199) // 200),
                "total": str(total),
            },
        }
    }


def spotify_track_item(
    track_id: str = "4uLU6hMCjMI75M1A2tKUQC",
    name: str = "Song Title",
    artists: tuple[str, ...] = ("Test Artist",),
    preview_url: str | None = "https://p.scdn.co/mp3-preview/abc",
    with_url: bool = True,
) -> dict:
    item = {
        "id": track_id,
        "name": name,
        "preview_url": preview_url,
        "artists": [{"id": f"artist-{i}", "name": a} for i, a in enumerate(artists)],
    }
    if with_url:
        item["external_urls"] = {"spotify": f"https://open.spotify.com/track/{track_id}"}
    return item


