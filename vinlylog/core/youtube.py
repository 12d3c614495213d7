"""YouTube metadata: video id from the URL, title/thumbnail from oEmbed."""
from typing import Optional

import httpx

from vinlylog.config import (
    YOUTUBE_EMBED_TEMPLATE,
    YOUTUBE_OEMBED_URL,
    YOUTUBE_THUMB_TEMPLATE,
    YOUTUBE_WATCH_URL,
)
from vinlylog.core.classifier import parse_host, path_segments, query_param
from vinlylog.core.oembed import ResolverOutcome, fetch_json


def extract_video_id(url: str) -> Optional[str]:
    """Video id from ?v=, youtu.be/<id> or /shorts/<id>; None if the URL has none."""
    host = parse_host(url)
    if host is None:
        return None
    if host == "youtu.be":
        segments = path_segments(url)
        return segments[0] if segments else None
    if host.endswith("youtube.com"):
        v = query_param(url, "v")
        if v:
            return v
        segments = path_segments(url)
        if len(segments) >= 2 and segments[0] == "shorts":
            return segments[1]
    return None


def watch_url(video_id: str) -> str:
    return str(httpx.URL(YOUTUBE_WATCH_URL, params={"v": video_id}))


def thumbnail_url(video_id: str) -> str:
    return YOUTUBE_THUMB_TEMPLATE.format(video_id=video_id)


def embed_url(video_id: str) -> str:
    return YOUTUBE_EMBED_TEMPLATE.format(video_id=video_id)


async def resolve_youtube(client: httpx.AsyncClient, url: str) -> ResolverOutcome:
    """Resolve a YouTube link. The embed URL depends only on the video id, never on oEmbed."""
    out = ResolverOutcome()
    video_id = extract_video_id(url)
    meta = out.metadata
    if video_id:
        meta.video_id = video_id
        meta.embed_url = embed_url(video_id)
        meta.thumb_url = thumbnail_url(video_id)

    result = out.record(
        await fetch_json(
            client,
            YOUTUBE_OEMBED_URL,
            {"format": "json", "url": watch_url(video_id) if video_id else url},
            source="youtube oembed",
        )
    )
    if result.ok:
        meta.title = result.text("title")
        meta.thumb_url = result.text("thumbnail_url") or meta.thumb_url
    return out
