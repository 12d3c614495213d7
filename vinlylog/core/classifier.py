"""Classify a link by host and derive a fallback display label."""
from typing import Optional
from urllib.parse import parse_qs, urlsplit

from vinlylog.models.link import Classification, ProviderKind


def parse_host(url: str) -> Optional[str]:
    """Return lowercased host without a leading 'www.', or None if url is not an absolute URL."""
    try:
        parts = urlsplit(url.strip())
        host = parts.hostname
    except (ValueError, AttributeError):
        return None
    if not parts.scheme or not host:
        return None
    return host[4:] if host.startswith("www.") else host


def path_segments(url: str) -> list[str]:
    try:
        path = urlsplit(url.strip()).path
    except ValueError:
        return []
    return [s for s in path.split("/") if s]


def query_param(url: str, name: str) -> Optional[str]:
    """First non-empty value of a query parameter, or None."""
    try:
        query = urlsplit(url.strip()).query
    except ValueError:
        return None
    values = parse_qs(query).get(name) or []
    return values[0] if values and values[0] else None


def classify(url: str) -> Classification:
    """Decide which provider a URL belongs to. Never raises; unknown or malformed URLs are LINK."""
    host = parse_host(url)
    if host is None:
        return Classification(ProviderKind.LINK)
    if host == "youtu.be" or host.endswith("youtube.com"):
        return Classification(ProviderKind.YOUTUBE, host=host)
    if host == "open.spotify.com":
        segments = path_segments(url)
        resource_type = segments[0].lower() if segments else None
        return Classification(ProviderKind.SPOTIFY, host=host, spotify_resource_type=resource_type)
    if host.endswith("music.apple.com"):
        return Classification(ProviderKind.APPLE, host=host)
    return Classification(ProviderKind.LINK, host=host)


def link_label(url: str) -> str:
    """Short label for a link with no title: YouTube id/list when present, else host, else 'Link'."""
    host = parse_host(url)
    if host is None:
        return "Link"
    if host == "youtu.be":
        # Only the leading slash is dropped; the rest of the path is kept as-is
        return f"YouTube: {urlsplit(url.strip()).path.replace('/', '', 1)}"
    if host.endswith("youtube.com"):
        playlist = query_param(url, "list")
        video = query_param(url, "v")
        if playlist and video:
            return f"YouTube mix: {video}"
        if playlist:
            return f"YouTube playlist: {playlist}"
        if video:
            return f"YouTube video: {video}"
    return host
