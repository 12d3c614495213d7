"""Link resolution pipeline: classify, dispatch to the provider resolver, tag the result."""
import logging
from typing import assert_never

import httpx

from vinlylog.config import HTTP_TIMEOUT_SEC
from vinlylog.core.apple_music import resolve_apple_music
from vinlylog.core.classifier import classify
from vinlylog.core.oembed import ResolverOutcome
from vinlylog.core.spotify_client import resolve_spotify
from vinlylog.core.youtube import resolve_youtube
from vinlylog.models.link import Classification, ProviderKind, ResolvedLink

logger = logging.getLogger(__name__)


async def resolve_generic(url: str) -> ResolverOutcome:
    """Plain links get no metadata call; the UI labels them by host."""
    return ResolverOutcome()


class LinkResolver:
    """Resolves links to provider metadata. Provider failures only ever drop fields."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=HTTP_TIMEOUT_SEC,
                follow_redirects=True,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def resolve_outcome(self, url: str) -> tuple[Classification, ResolverOutcome]:
        """Classify and run the matching resolver, keeping per-call failures visible."""
        classification = classify(url)
        client = self._get_client()
        match classification.kind:
            case ProviderKind.YOUTUBE:
                outcome = await resolve_youtube(client, url)
            case ProviderKind.SPOTIFY:
                outcome = await resolve_spotify(client, url, classification.spotify_resource_type)
            case ProviderKind.APPLE:
                outcome = await resolve_apple_music(client, url)
            case ProviderKind.LINK:
                outcome = await resolve_generic(url)
            case _:
                assert_never(classification.kind)
        return classification, outcome

    async def resolve(self, url: str) -> ResolvedLink:
        """The only entry point add-link should call."""
        classification, outcome = await self.resolve_outcome(url)
        for failure in outcome.failures:
            logger.warning("Metadata degraded for %s link: %s", classification.kind.value, failure)
        return ResolvedLink(provider=classification.kind, metadata=outcome.metadata)
