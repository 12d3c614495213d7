"""Shared provider fetch: explicit ok/failed result instead of raised errors."""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from bs4 import BeautifulSoup

from vinlylog.core.errors import MetadataUnavailable
from vinlylog.models.link import LinkMetadata

logger = logging.getLogger(__name__)

_HEIGHT_RE = re.compile(r"\d+")


@dataclass
class FetchResult:
    """Outcome of one provider call: data on success, error otherwise."""
    data: Optional[dict] = None
    error: Optional[MetadataUnavailable] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    def text(self, key: str) -> Optional[str]:
        """Stripped string field from data, or None if missing/blank."""
        if not self.data:
            return None
        value = self.data.get(key)
        if not isinstance(value, str):
            return None
        return value.strip() or None


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, str],
    source: str,
) -> FetchResult:
    """GET url and decode a JSON object. Network errors, bad statuses and bad bodies become FetchResult.error."""
    try:
        res = await client.get(url, params=params)
    except httpx.TimeoutException:
        return _failed(source, "timeout")
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        return _failed(source, f"network error: {e}")
    if not res.is_success:
        return _failed(source, "bad status", res.status_code)
    try:
        data = res.json()
    except ValueError:
        return _failed(source, "invalid JSON", res.status_code)
    if not isinstance(data, dict):
        return _failed(source, "unexpected payload", res.status_code)
    logger.debug("%s: ok", source)
    return FetchResult(data=data)


def _failed(source: str, reason: str, status: Optional[int] = None) -> FetchResult:
    err = MetadataUnavailable(source, reason, status)
    logger.debug("%s", err)
    return FetchResult(error=err)


def extract_iframe(html: Any) -> tuple[Optional[str], Optional[int]]:
    """Return (src, height) of the first iframe in oEmbed html; either may be None."""
    if not isinstance(html, str) or not html:
        return None, None
    iframe = BeautifulSoup(html, "html.parser").find("iframe")
    if iframe is None:
        return None, None
    src = iframe.get("src") or None
    height = None
    height_raw = iframe.get("height")
    if height_raw:
        # "352" and "352px" both occur in provider markup
        m = _HEIGHT_RE.match(height_raw.strip())
        if m:
            height = int(m.group(0))
    return src, height


@dataclass
class ResolverOutcome:
    """What a provider resolver produced, plus the calls that failed along the way."""
    metadata: LinkMetadata = field(default_factory=LinkMetadata)
    failures: list[MetadataUnavailable] = field(default_factory=list)

    def record(self, result: FetchResult) -> FetchResult:
        if result.error is not None:
            self.failures.append(result.error)
        return result
