"""The shared JSON document: users and their saved links."""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from vinlylog.models.link import LinkMetadata, ProviderKind


def now_iso() -> str:
    """UTC timestamp in the document's format, e.g. 2024-05-01T12:00:00.000Z."""
    return _format(datetime.now(timezone.utc))


def _format(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse(value: str) -> Optional[datetime]:
    try:
        dt = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _opt_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _scalar_str(value: Any) -> Optional[str]:
    """String form of a stored scalar; pins saved as numbers come back as '4321'."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return None


def _opt_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _leftovers(item: dict, known: tuple[str, ...], unreadable: dict) -> dict:
    """Keys this model does not own, plus owned keys whose stored value could not be read."""
    extra = {k: v for k, v in item.items() if k not in known}
    extra.update({k: v for k, v in unreadable.items() if v is not None})
    return extra


_ENTRY_KEYS = ("url", "provider", "title", "thumbUrl", "videoId", "embedUrl", "embedHeight", "note", "addedAt")
_USER_KEYS = ("username", "pin", "playlists")
_DOC_KEYS = ("users", "updatedAt")


@dataclass
class LinkEntry:
    """One saved link. (added_at, url) is its identity within a playlist.

    extra holds stored keys this model does not understand; they are written back unchanged.
    """
    url: str
    provider: ProviderKind
    added_at: str
    title: Optional[str] = None
    thumb_url: Optional[str] = None
    video_id: Optional[str] = None
    embed_url: Optional[str] = None
    embed_height: Optional[int] = None
    note: Optional[str] = None
    extra: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_metadata(
        cls,
        url: str,
        provider: ProviderKind,
        metadata: LinkMetadata,
        note: Optional[str] = None,
        added_at: Optional[str] = None,
    ) -> "LinkEntry":
        return cls(
            url=url,
            provider=provider,
            added_at=added_at or now_iso(),
            title=metadata.title,
            thumb_url=metadata.thumb_url,
            video_id=metadata.video_id,
            embed_url=metadata.embed_url,
            embed_height=metadata.embed_height,
            note=note or None,
        )

    @classmethod
    def from_dict(cls, item: dict) -> "LinkEntry":
        """Raises KeyError/TypeError when url or addedAt is unusable."""
        url = _scalar_str(item["url"])
        added_at = _scalar_str(item["addedAt"])
        if url is None or added_at is None:
            raise TypeError("url and addedAt must be strings")
        provider = ProviderKind.parse(item.get("provider"))
        if provider is None:
            # Entries written before providers were stored
            from vinlylog.core.classifier import classify

            provider = classify(url).kind
        unreadable = {}
        values = {}
        for key in ("title", "thumbUrl", "videoId", "embedUrl", "note"):
            raw = item.get(key)
            values[key] = _opt_str(raw)
            if values[key] is None and raw != "":
                unreadable[key] = raw
        height = _opt_int(item.get("embedHeight"))
        if height is None:
            unreadable["embedHeight"] = item.get("embedHeight")
        return cls(
            url=url,
            provider=provider,
            added_at=added_at,
            title=values["title"],
            thumb_url=values["thumbUrl"],
            video_id=values["videoId"],
            embed_url=values["embedUrl"],
            embed_height=height,
            note=values["note"],
            extra=_leftovers(item, _ENTRY_KEYS, unreadable),
        )

    def to_dict(self) -> dict:
        data = {
            "url": self.url,
            "provider": self.provider.value,
            "title": self.title,
            "thumbUrl": self.thumb_url,
            "videoId": self.video_id,
            "embedUrl": self.embed_url,
            "embedHeight": self.embed_height,
            "note": self.note,
            "addedAt": self.added_at,
        }
        return {**self.extra, **{k: v for k, v in data.items() if v is not None}}


def entry_key(entry: LinkEntry) -> str:
    """Stable lookup key for an entry; there is no surrogate id."""
    return f"{entry.added_at}|{entry.url}"


@dataclass
class User:
    """Document user. username is unique ignoring case; pin is a 4-digit shared secret.

    Stored playlist items that cannot be read as LinkEntry stay in unparsed and are
    written back after the readable ones.
    """
    username: str
    pin: str
    playlists: List[LinkEntry] = field(default_factory=list)
    unparsed: list = field(default_factory=list, repr=False, compare=False)
    extra: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, item: dict) -> "User":
        """Raises KeyError/TypeError when username or pin is unusable."""
        username, pin = _scalar_str(item["username"]), _scalar_str(item["pin"])
        if username is None or pin is None:
            raise TypeError("username and pin must be strings")
        raw_playlists = item.get("playlists")
        playlists, unparsed = [], []
        for raw in raw_playlists if isinstance(raw_playlists, list) else []:
            try:
                playlists.append(LinkEntry.from_dict(raw))
            except (KeyError, TypeError):
                unparsed.append(raw)
        unreadable = {} if isinstance(raw_playlists, list) else {"playlists": raw_playlists}
        return cls(
            username=username,
            pin=pin,
            playlists=playlists,
            unparsed=unparsed,
            extra=_leftovers(item, _USER_KEYS, unreadable),
        )

    def to_dict(self) -> dict:
        data = {
            "username": self.username,
            "pin": self.pin,
            "playlists": [p.to_dict() for p in self.playlists] + self.unparsed,
        }
        if "playlists" in self.extra and not self.playlists and not self.unparsed:
            # Unreadable playlists value nobody has touched: write it back as found
            data["playlists"] = self.extra["playlists"]
        return {**{k: v for k, v in self.extra.items() if k != "playlists"}, **data}


@dataclass
class Document:
    """Entire persisted state. updated_at doubles as the version seen by the merge cycle.

    Users that cannot be read stay in unparsed_users and are written back untouched, so
    one client never erases data it does not understand.
    """
    users: List[User] = field(default_factory=list)
    updated_at: str = field(default_factory=now_iso)
    unparsed_users: list = field(default_factory=list, repr=False, compare=False)
    extra: dict = field(default_factory=dict, repr=False, compare=False)

    @staticmethod
    def is_document(value: Any) -> bool:
        """True if value has the stored shape: a users list and an updatedAt string."""
        return (
            isinstance(value, dict)
            and isinstance(value.get("users"), list)
            and isinstance(value.get("updatedAt"), str)
        )

    @classmethod
    def from_dict(cls, data: Any) -> "Document":
        """Parse a stored record; anything that is not document-shaped yields an empty Document."""
        if not cls.is_document(data):
            return cls()
        users, unparsed = [], []
        for raw in data["users"]:
            try:
                users.append(User.from_dict(raw))
            except (KeyError, TypeError):
                unparsed.append(raw)
        return cls(
            users=users,
            updated_at=data["updatedAt"],
            unparsed_users=unparsed,
            extra=_leftovers(data, _DOC_KEYS, {}),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            "users": [u.to_dict() for u in self.users] + self.unparsed_users,
            "updatedAt": self.updated_at,
        }

    def touch(self) -> None:
        """Stamp updated_at with the current time, always moving it forward."""
        now = datetime.now(timezone.utc)
        previous = _parse(self.updated_at)
        if previous is not None and now <= previous:
            now = previous + timedelta(milliseconds=1)
        self.updated_at = _format(now)
