"""Provider kinds and resolved link metadata."""
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional


class ProviderKind(str, Enum):
    """Closed set of providers a link can belong to."""
    YOUTUBE = "youtube"
    SPOTIFY = "spotify"
    APPLE = "apple"
    LINK = "link"

    @classmethod
    def parse(cls, value: object) -> Optional["ProviderKind"]:
        """Return the matching kind for a stored value, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class Classification:
    """Classifier output: provider plus the bits of the URL resolvers need."""
    kind: ProviderKind
    host: Optional[str] = None
    spotify_resource_type: Optional[str] = None  # "track" | "album" | "playlist" | ...


@dataclass
class LinkMetadata:
    """Best-effort metadata for a link; every field may be absent."""
    title: Optional[str] = None
    thumb_url: Optional[str] = None
    embed_url: Optional[str] = None
    embed_height: Optional[int] = None
    video_id: Optional[str] = None

    def is_empty(self) -> bool:
        return all(v is None for v in asdict(self).values())


@dataclass
class ResolvedLink:
    """Pipeline result: metadata tagged with the provider that produced it."""
    provider: ProviderKind
    metadata: LinkMetadata

    def to_dict(self) -> dict:
        m = self.metadata
        return {
            "provider": self.provider.value,
            "title": m.title,
            "thumbUrl": m.thumb_url,
            "embedUrl": m.embed_url,
            "embedHeight": m.embed_height,
            "videoId": m.video_id,
        }
