"""Track schemas for Last.fm history records and Spotify matches."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# ============== Last.fm Schemas ==============

class LastfmText(BaseModel):
    """Last.fm `{"#text": ...}` wrapper used for artist and album."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    text: str = Field("", alias="#text")


class LastfmImage(BaseModel):
    """Cover image at one of Last.fm's fixed sizes."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    text: str = Field("", alias="#text")
    size: str = ""


class LastfmDate(BaseModel):
    """Scrobble timestamp (unix seconds plus a display string)."""
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    uts: str
    text: str = Field("", alias="#text")


class ScrobbleRecord(BaseModel):
    """
    One play event from user.getrecenttracks.

    Keys we do not model (mbid, streamable, @attr, ...) are kept as extras so
    the record goes back to the client exactly as Last.fm sent it.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    artist: LastfmText
    name: str
    album: LastfmText = LastfmText()
    image: list[LastfmImage] = []
    date: Optional[LastfmDate] = None  # Absent for the now-playing track
    url: Optional[str] = None

    @property
    def artist_name(self) -> str:
        return self.artist.text

    @property
    def is_now_playing(self) -> bool:
        attr = (self.model_extra or {}).get("@attr") or {}
        return self.date is None and attr.get("nowplaying") == "true"


# ============== Spotify Schemas ==============

class SpotifyMatch(BaseModel):
    """Best-effort Spotify match for a scrobbled track."""
    id: str
    url: str
    preview: Optional[str] = None  # 30 second preview, often unavailable
    name: str
    artists: list[str] = []


# ============== Response Schemas ==============

class PlaycountResponse(BaseModel):
    """Schema for the playcount endpoint."""
    maxPlaycount: int


class TrackByIndexResponse(BaseModel):
    """Schema for the track-by-index endpoint."""
    track: ScrobbleRecord
    spotify: Optional[SpotifyMatch] = None


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    error: str
