from dataclasses import dataclass

from scrobble_slots.core.exceptions import InvalidIndex

# Last.fm's max limit per page for user.getrecenttracks
DEFAULT_PAGE_SIZE = 200


@dataclass(frozen=True)
class PagePosition:
    """Where a reverse-chronological index lands in the paginated history."""
    position_from_oldest: int
    page: int  # 1-based, as Last.fm expects
    offset: int  # 0-based index into that page's track list


def validate_index(n: int, max_playcount: int) -> None:
    """Raise InvalidIndex unless 1 <= n <= max_playcount."""
    if n < 1 or n > max_playcount:
        raise InvalidIndex()


def locate_index(n: int, max_playcount: int, page_size: int = DEFAULT_PAGE_SIZE) -> PagePosition:
    """
    Convert a reverse-chronological index into a page and offset.

    n=1 is the most recent scrobble and n=max_playcount the oldest one.

    Args:
        n: 1-based index counted from the most recent scrobble
        max_playcount: The user's total scrobble count
        page_size: Records per history page

    Returns:
        The page position holding the n-th track
    """
    validate_index(n, max_playcount)

    position_from_oldest = max_playcount - n + 1
    page = (position_from_oldest - 1) // page_size + 1
    offset = (position_from_oldest - 1) % page_size

    return PagePosition(
        position_from_oldest=position_from_oldest,
        page=page,
        offset=offset,
    )
