"""Filter and order a user's playlist for display."""
from typing import List

from vinlylog.core.classifier import link_label
from vinlylog.models.document import LinkEntry


def display_title(entry: LinkEntry) -> str:
    return entry.title or link_label(entry.url)


def matches(entry: LinkEntry, query: str) -> bool:
    """Case-insensitive substring match on title, note or url."""
    return (
        query in (entry.title or "").lower()
        or query in (entry.note or "").lower()
        or query in entry.url.lower()
    )


def search_playlist(entries: List[LinkEntry], query: str = "") -> List[LinkEntry]:
    """Entries matching query, newest first. A blank query returns everything."""
    q = query.strip().lower()
    found = [e for e in entries if not q or matches(e, q)]
    return sorted(found, key=lambda e: e.added_at, reverse=True)
