"""Data models for the shared document, links and sessions."""
from vinlylog.models.link import Classification, LinkMetadata, ProviderKind, ResolvedLink
from vinlylog.models.document import Document, LinkEntry, User, entry_key
from vinlylog.models.session import Session

__all__ = [
    "Classification",
    "Document",
    "LinkEntry",
    "LinkMetadata",
    "ProviderKind",
    "ResolvedLink",
    "Session",
    "User",
    "entry_key",
]
