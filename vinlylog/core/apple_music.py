"""Apple Music metadata: oEmbed first, iTunes lookup for whatever oEmbed left out."""
import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from vinlylog.config import (
    APPLE_DEFAULT_HEIGHT,
    APPLE_EMBED_HOST,
    APPLE_OEMBED_URL,
    ITUNES_LOOKUP_URL,
)
from vinlylog.core.classifier import path_segments
from vinlylog.core.oembed import ResolverOutcome, extract_iframe, fetch_json

DEFAULT_STOREFRONT = "us"

_STOREFRONT_RE = re.compile(r"^[a-z]{2}$", re.IGNORECASE)
_RESOURCE_ID_RE = re.compile(r"^(?:id)?(\d+)$", re.IGNORECASE)
_ARTWORK_SIZE_RE = re.compile(r"\d+x\d+bb\.jpg$", re.IGNORECASE)


def embed_url(url: str) -> Optional[str]:
    """Same URL served from the embed host, or None if url does not parse."""
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return urlunsplit((parts.scheme, APPLE_EMBED_HOST, parts.path, parts.query, parts.fragment))


def storefront(url: str) -> str:
    """Two-letter country code from the first path segment; 'us' when absent or invalid."""
    segments = path_segments(url)
    if segments and _STOREFRONT_RE.match(segments[0]):
        return segments[0].lower()
    return DEFAULT_STOREFRONT


def resource_id(url: str) -> Optional[str]:
    """Numeric id from the last path segment (e.g. .../album/name/1440857781)."""
    segments = path_segments(url)
    if not segments:
        return None
    m = _RESOURCE_ID_RE.match(segments[-1])
    return m.group(1) if m else None


def upscale_artwork(artwork_url: str) -> str:
    """Ask the artwork CDN for 600x600 instead of the 100x100 the lookup API returns."""
    return _ARTWORK_SIZE_RE.sub("600x600bb.jpg", artwork_url)


def compose_title(item: dict) -> Optional[str]:
    """'<collection or track> - <artist>' when both are present; the name alone otherwise."""
    name = _text(item.get("collectionName")) or _text(item.get("trackName"))
    artist = _text(item.get("artistName"))
    if name and artist:
        return f"{name} - {artist}"
    return name


def _text(value) -> Optional[str]:
    return (value.strip() or None) if isinstance(value, str) else None


async def resolve_apple_music(client: httpx.AsyncClient, url: str) -> ResolverOutcome:
    out = ResolverOutcome()
    meta = out.metadata
    meta.embed_url = embed_url(url)
    meta.embed_height = APPLE_DEFAULT_HEIGHT

    result = out.record(
        await fetch_json(client, APPLE_OEMBED_URL, {"url": url}, source="apple oembed")
    )
    if result.ok:
        meta.title = result.text("title")
        meta.thumb_url = result.text("thumbnail_url")
        src, height = extract_iframe(result.data.get("html"))
        if src:
            meta.embed_url = src
        if height:
            meta.embed_height = height

    if meta.title and meta.thumb_url:
        return out

    item_id = resource_id(url)
    if item_id is None:
        return out
    lookup = out.record(
        await fetch_json(
            client,
            ITUNES_LOOKUP_URL,
            {"id": item_id, "country": storefront(url)},
            source="itunes lookup",
        )
    )
    if not lookup.ok:
        return out
    results = lookup.data.get("results")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return out
    item = results[0]
    meta.title = meta.title or compose_title(item)
    if not meta.thumb_url:
        artwork = _text(item.get("artworkUrl100"))
        meta.thumb_url = upscale_artwork(artwork) if artwork else None
    return out
