"""Last.fm slot machine endpoints: playcount bound and track by index."""

from typing import Optional

from fastapi import APIRouter, Query, Response

from scrobble_slots.core.exceptions import InvalidIndex, MissingParameter
from scrobble_slots.dependencies import AppSettings, TrackServiceDep
from scrobble_slots.schemas.track import ErrorResponse, PlaycountResponse, TrackByIndexResponse

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def parse_int(value: str) -> int:
    """Parse a query value as an integer or raise InvalidIndex."""
    try:
        return int(value.strip())
    except ValueError:
        raise InvalidIndex()


@router.get(
    "/playcount",
    response_model=PlaycountResponse,
    responses=ERROR_RESPONSES,
    summary="Get a user's total scrobble count",
)
@router.get("/max-playcount", response_model=PlaycountResponse, include_in_schema=False)
async def get_playcount(
    response: Response,
    service: TrackServiceDep,
    settings: AppSettings,
    user: Optional[str] = Query(None, description="Last.fm username"),
):
    """
    Get the user's total playcount from Last.fm user.getinfo.

    The value is the upper bound for indices passed to /track-by-index.
    """
    max_playcount = await service.get_max_playcount(user)
    response.headers["Cache-Control"] = settings.cache_control_header
    return PlaycountResponse(maxPlaycount=max_playcount)


@router.get(
    "/track-by-index",
    response_model=TrackByIndexResponse,
    responses=ERROR_RESPONSES,
    summary="Get a scrobble by its reverse chronological index",
)
@router.get("/get-nth-song", response_model=TrackByIndexResponse, include_in_schema=False)
async def get_track_by_index(
    response: Response,
    service: TrackServiceDep,
    settings: AppSettings,
    user: Optional[str] = Query(None, description="Last.fm username"),
    n: Optional[str] = Query(None, description="Reverse index, 1 is the most recent scrobble"),
    maxPlaycount: Optional[str] = Query(None, description="The user's total playcount"),
):
    """
    Get the n-th most recent track of a user's history.

    The Spotify match is best effort and null when Spotify is not configured,
    unreachable, or has no result.
    """
    if not (user or "").strip() or not n or not maxPlaycount:
        raise MissingParameter("Missing required parameters: user, n, maxPlaycount")

    result = await service.get_track_by_index(user, parse_int(n), parse_int(maxPlaycount))
    response.headers["Cache-Control"] = settings.cache_control_header
    return result
