"""Configuration: env, JSONBin document store, provider endpoints, timeouts."""
import os
from pathlib import Path

from dotenv import load_dotenv

from vinlylog.core.errors import ConfigMissing

# Base paths (project root = parent of vinlylog package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so JSONBIN_BIN_ID etc. are set
load_dotenv(BASE_DIR / ".env")

# API
API_HOST = os.getenv("VINLYLOG_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("VINLYLOG_API_PORT", "8000"))
# Allowed CORS origin for the web front-end (e.g. http://localhost:5173 for Vite dev)
VINLYLOG_WEB_ORIGIN = os.getenv("VINLYLOG_WEB_ORIGIN", "")

# JSONBin document store (one bin holds the whole document)
JSONBIN_API_BASE = os.getenv("JSONBIN_API_BASE", "https://api.jsonbin.io/v3")
JSONBIN_BIN_ID = os.getenv("JSONBIN_BIN_ID", "").strip()
JSONBIN_MASTER_KEY = os.getenv("JSONBIN_MASTER_KEY", "").strip()

# Every outbound call (document store and providers)
HTTP_TIMEOUT_SEC = float(os.getenv("VINLYLOG_HTTP_TIMEOUT_SEC", "10.0"))
# Read-modify-write cycles before giving up on a concurrently changing document
MERGE_MAX_ATTEMPTS = int(os.getenv("VINLYLOG_MERGE_MAX_ATTEMPTS", "3"))

# Provider endpoints
YOUTUBE_OEMBED_URL = "https://www.youtube.com/oembed"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch"
YOUTUBE_THUMB_TEMPLATE = "https://i.ytimg.com/vi/{video_id}/hqdefault.jpg"
YOUTUBE_EMBED_TEMPLATE = "https://www.youtube-nocookie.com/embed/{video_id}?rel=0&modestbranding=1"
SPOTIFY_OEMBED_URL = "https://open.spotify.com/oembed"
SPOTIFY_EMBED_TEMPLATE = "https://open.spotify.com/embed/{kind}/{resource_id}"
APPLE_OEMBED_URL = "https://music.apple.com/oembed"
APPLE_EMBED_HOST = "embed.music.apple.com"
ITUNES_LOOKUP_URL = "https://itunes.apple.com/lookup"

# Player heights (px)
SPOTIFY_COMPACT_HEIGHT = 152
SPOTIFY_DEFAULT_HEIGHT = 352
APPLE_DEFAULT_HEIGHT = 150


def has_jsonbin_config() -> bool:
    return bool(JSONBIN_BIN_ID) and bool(JSONBIN_MASTER_KEY)


def require_jsonbin_config(bin_id: str | None = None, master_key: str | None = None) -> tuple[str, str]:
    """Return (bin_id, master_key), falling back to env values; raise ConfigMissing if either is empty."""
    bin_id = (bin_id if bin_id is not None else JSONBIN_BIN_ID).strip()
    master_key = (master_key if master_key is not None else JSONBIN_MASTER_KEY).strip()
    missing = []
    if not bin_id:
        missing.append("JSONBIN_BIN_ID")
    if not master_key:
        missing.append("JSONBIN_MASTER_KEY")
    if missing:
        raise ConfigMissing(f"Missing configuration: {', '.join(missing)}")
    return bin_id, master_key
