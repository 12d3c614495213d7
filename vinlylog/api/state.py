"""Shared application state (injected into routes).

All changes to the cached document go through the merge engine; the
snapshot here is only replaced after a successful read or write.
"""
import asyncio
import json
import logging
from typing import List, Optional

from vinlylog.core.document_client import DocumentClient
from vinlylog.core.errors import AuthConflict, ValidationError, VinlyLogError
from vinlylog.core.identity import (
    AuthResult,
    add_entry,
    authenticate,
    create_user,
    find_user,
    remove_entry,
    validate_credentials,
)
from vinlylog.core.link_resolver import LinkResolver
from vinlylog.core.merge_engine import MergeEngine, Mutator
from vinlylog.core.playlist_search import search_playlist
from vinlylog.models.document import Document, LinkEntry, User
from vinlylog.models.link import ResolvedLink
from vinlylog.models.session import Session

logger = logging.getLogger(__name__)


def _log_add_failure(task: "asyncio.Future[LinkEntry]") -> None:
    # Also retrieves the exception when the caller stopped waiting on the shield
    if not task.cancelled() and task.exception() is not None:
        logger.warning("Add link failed: %s", task.exception())


class AppState:
    def __init__(
        self,
        document_client: DocumentClient | None = None,
        link_resolver: LinkResolver | None = None,
    ) -> None:
        self.doc: Optional[Document] = None
        self._document_client = document_client
        self._merge_engine: MergeEngine | None = None
        self._link_resolver = link_resolver

    @property
    def document_client(self) -> DocumentClient:
        # Created on first use so a missing bin id / key surfaces as ConfigMissing per request
        if self._document_client is None:
            self._document_client = DocumentClient()
        return self._document_client

    @property
    def merge_engine(self) -> MergeEngine:
        if self._merge_engine is None:
            self._merge_engine = MergeEngine(self.document_client)
        return self._merge_engine

    @property
    def link_resolver(self) -> LinkResolver:
        if self._link_resolver is None:
            self._link_resolver = LinkResolver()
        return self._link_resolver

    async def close(self) -> None:
        if self._document_client is not None:
            await self._document_client.close()
        if self._link_resolver is not None:
            await self._link_resolver.close()

    async def refresh(self) -> Document:
        """Reload the snapshot. On failure the snapshot is dropped and the error re-raised."""
        try:
            self.doc = await self.document_client.fetch()
        except VinlyLogError:
            self.doc = None
            raise
        return self.doc

    async def current_doc(self) -> Document:
        if self.doc is None:
            return await self.refresh()
        return self.doc

    async def _apply(self, mutator: Mutator) -> Document:
        # Snapshot only moves forward on a successful write
        self.doc = await self.merge_engine.apply_mutation(mutator)
        return self.doc

    async def sign_in(self, username: str, pin: str) -> tuple[AuthResult, Session]:
        """Sign in, or create the user if the name is new. Wrong pin raises AuthConflict without writing.

        Checks a fresh read, then the written document again: another client may have
        taken the name in between, in which case create_user was a no-op.
        """
        username, pin = validate_credentials(username, pin)
        doc = await self.refresh()
        result = authenticate(doc, username, pin)
        if result is AuthResult.CREATED:
            created = False

            def mutate(latest: Document) -> None:
                nonlocal created
                created = find_user(latest, username) is None
                create_user(username, pin)(latest)

            doc = await self._apply(mutate)
            if not created:
                result = authenticate(doc, username, pin)
        if result is AuthResult.WRONG_PIN:
            raise AuthConflict("Wrong pin")
        return result, Session(username=username, pin=pin)

    async def session_user(self, session: Session) -> User:
        """The signed-in user from the current snapshot, pin checked."""
        username, pin = validate_credentials(session.username, session.pin)
        doc = await self.current_doc()
        result = authenticate(doc, username, pin)
        if result is AuthResult.WRONG_PIN:
            raise AuthConflict("Pin mismatch for this user")
        user = find_user(doc, username)
        if user is None:
            raise LookupError("Signed-in user not found in the document. Try refresh.")
        return user

    async def list_links(self, session: Session, query: str = "") -> List[LinkEntry]:
        user = await self.session_user(session)
        return search_playlist(user.playlists, query)

    async def resolve_link(self, url: str) -> ResolvedLink:
        url = (url or "").strip()
        if not url:
            raise ValidationError("Paste a link")
        return await self.link_resolver.resolve(url)

    async def add_link(self, session: Session, url: str, note: str = "") -> LinkEntry:
        """Resolve metadata and append the link. Finishes even if the caller goes away."""
        session = Session(*validate_credentials(session.username, session.pin))
        url = (url or "").strip()
        if not url:
            raise ValidationError("Paste a link")
        # Cheap local check; the mutation re-checks against the fresh document
        if self.doc is not None and authenticate(self.doc, session.username, session.pin) is AuthResult.WRONG_PIN:
            raise AuthConflict("Pin mismatch for this user")
        task = asyncio.ensure_future(self._add_link(session, url, (note or "").strip()))
        task.add_done_callback(_log_add_failure)
        return await asyncio.shield(task)


    async def _add_link(self, session: Session, url: str, note: str) -> LinkEntry:
        resolved = await self.link_resolver.resolve(url)
        entry = LinkEntry.from_metadata(url, resolved.provider, resolved.metadata, note=note)
        await self._apply(add_entry(session, entry))
        logger.info("Added %s link for %s", entry.provider.value, session.username)
        return entry

    async def remove_link(self, session: Session, added_at: str, url: str) -> None:
        session = Session(*validate_credentials(session.username, session.pin))
        if not added_at or not url:
            raise ValidationError("Both added_at and url identify a link")
        await self._apply(remove_entry(session, added_at, url))
        logger.info("Removed link for %s", session.username)

    async def export_json(self) -> str:
        """Pretty-printed snapshot for download."""
        doc = await self.current_doc()
        return json.dumps(doc.to_dict(), indent=2)


_state = AppState()


def get_state() -> AppState:
    return _state
