"""
Track title clean-up for Spotify search.

Last.fm titles often carry release qualifiers ("- Remastered 2011",
"(feat. X)") that hurt search recall. Only well-known qualifiers are stripped
so titles that legitimately contain brackets or dashes survive.
"""
import re

_YEAR = r"(?:19|20)\d{2}"

# " - Radio Edit", " - Remastered 2011", " - 2011 Remaster", " - Live at Wembley", " - Mono Version"
RE_DASH_QUALIFIER = re.compile(
    r"\s+[-–—]\s+(?:"
    rf"(?:{_YEAR}\s+)?remaster(?:ed)?(?:\s+{_YEAR})?(?:\s+version)?"
    r"|radio\s+edit"
    r"|(?:single|album)\s+version"
    r"|live(?:\s+(?:at|from|in|on)\b.*)?"
    r"|(?:mono|stereo)(?:\s+version)?"
    r")\s*$",
    flags=re.IGNORECASE,
)

# "(feat. X)", "[ft. X]", "(Live)", "(Live at ...)", "(Remastered 2009)", "(2009 Remaster)"
RE_BRACKET_QUALIFIER = re.compile(
    r"\s*[\(\[](?:"
    r"(?:feat\.?|ft\.|featuring)\s+[^\)\]]+"
    r"|live(?:\s+(?:at|from|in|on)\b[^\)\]]*)?"
    rf"|(?:{_YEAR}\s+)?remaster(?:ed)?(?:\s+{_YEAR})?(?:\s+(?:version|edition))?"
    r")[\)\]]",
    flags=re.IGNORECASE,
)

RE_WHITESPACE = re.compile(r"\s+")


def normalize_track_title(title: str) -> str:
    """
    Strip release qualifiers from a track title.

    Args:
        title: Title as scrobbled

    Returns:
        Cleaned title, or the trimmed original if cleaning would empty it
    """
    original = title.strip()
    cleaned = RE_DASH_QUALIFIER.sub("", original)
    cleaned = RE_BRACKET_QUALIFIER.sub("", cleaned)
    cleaned = RE_WHITESPACE.sub(" ", cleaned).strip()
    return cleaned or original


def build_track_query(artist: str, title: str) -> str:
    """Build a Spotify field-filtered search query."""
    # Double quotes would terminate the field filter early
    artist = artist.replace('"', "").strip()
    title = title.replace('"', "").strip()
    return f'track:"{title}" artist:"{artist}"'
