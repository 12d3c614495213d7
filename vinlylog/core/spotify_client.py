"""Spotify metadata via oEmbed; embed player derived from the URL when oEmbed is unavailable."""
from typing import Optional

import httpx

from vinlylog.config import (
    SPOTIFY_COMPACT_HEIGHT,
    SPOTIFY_DEFAULT_HEIGHT,
    SPOTIFY_EMBED_TEMPLATE,
    SPOTIFY_OEMBED_URL,
)
from vinlylog.core.classifier import path_segments
from vinlylog.core.oembed import ResolverOutcome, extract_iframe, fetch_json

# Single-item players get the compact embed
_COMPACT_TYPES = ("track", "episode")


def parse_spotify_url(url: str) -> Optional[tuple[str, str]]:
    """Return (resource_type, id) e.g. ('album', '4aawyAB9vmqN3uQ7FjRGTy') or None."""
    segments = path_segments(url)
    if len(segments) < 2:
        return None
    return segments[0].lower(), segments[1]


def default_embed_height(resource_type: Optional[str]) -> int:
    return SPOTIFY_COMPACT_HEIGHT if resource_type in _COMPACT_TYPES else SPOTIFY_DEFAULT_HEIGHT


def offline_embed(url: str, resource_type: Optional[str]) -> tuple[Optional[str], int]:
    """Embed URL and height computed from the URL alone (no network)."""
    parsed = parse_spotify_url(url)
    kind = resource_type or (parsed[0] if parsed else None)
    if parsed is None:
        return None, default_embed_height(kind)
    return (
        SPOTIFY_EMBED_TEMPLATE.format(kind=parsed[0], resource_id=parsed[1]),
        default_embed_height(kind),
    )


async def resolve_spotify(
    client: httpx.AsyncClient,
    url: str,
    resource_type: Optional[str] = None,
) -> ResolverOutcome:
    """Resolve a Spotify link. oEmbed title/thumbnail/iframe win over the derived defaults."""
    out = ResolverOutcome()
    meta = out.metadata
    meta.embed_url, meta.embed_height = offline_embed(url, resource_type)

    result = out.record(
        await fetch_json(client, SPOTIFY_OEMBED_URL, {"url": url}, source="spotify oembed")
    )
    if not result.ok:
        return out
    meta.title = result.text("title")
    meta.thumb_url = result.text("thumbnail_url")
    src, height = extract_iframe(result.data.get("html"))
    if src:
        meta.embed_url = src
    if height:
        meta.embed_height = height
    return out
