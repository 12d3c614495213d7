"""Read-modify-write cycle over the shared document.

JSONBin has no compare-and-swap, so each cycle re-reads the stored
updatedAt right before writing and starts over if another writer got in
first. The window between that check and the PUT is still open; with a
handful of users that residual race is accepted.
"""
import asyncio
import logging
from typing import Callable, Optional

from vinlylog.config import MERGE_MAX_ATTEMPTS
from vinlylog.core.document_client import DocumentClient
from vinlylog.core.errors import MergeConflict, RemoteRejected, RemoteUnavailable
from vinlylog.models.document import Document

logger = logging.getLogger(__name__)

# Mutates the document in place; raise a VinlyLogError to abort without writing.
Mutator = Callable[[Document], None]


class MergeEngine:
    """Applies mutations to the latest remote document, one at a time per process."""

    def __init__(self, client: DocumentClient, max_attempts: int = MERGE_MAX_ATTEMPTS) -> None:
        self._client = client
        self._max_attempts = max(1, max_attempts)
        # Overlapping calls queue here instead of interleaving
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def _read_latest(self) -> tuple[Document, Optional[str]]:
        """Latest document and its version; an empty document if the read fails."""
        try:
            return await self._client.fetch_snapshot()
        except (RemoteUnavailable, RemoteRejected) as e:
            logger.warning("Read before write failed (%s); merging into an empty document", e)
            return Document(), None

    async def _unchanged_since(self, version: Optional[str]) -> bool:
        try:
            _, current = await self._client.fetch_snapshot()
        except (RemoteUnavailable, RemoteRejected) as e:
            # Can't tell; write anyway and let store() report a real outage
            logger.warning("Version check failed (%s); writing without it", e)
            return True
        return current == version

    async def apply_mutation(self, mutator: Mutator) -> Document:
        """Fetch, mutate, stamp updatedAt, store. Returns the stored document.

        Errors raised by mutator abort the cycle with nothing written. Store
        failures propagate. Raises MergeConflict if the document changed
        underneath every attempt.
        """
        async with self._lock:
            for attempt in range(1, self._max_attempts + 1):
                doc, version = await self._read_latest()
                mutator(doc)
                doc.touch()
                if not await self._unchanged_since(version):
                    logger.warning(
                        "Document changed during merge (attempt %d/%d); retrying",
                        attempt,
                        self._max_attempts,
                    )
                    continue
                await self._client.store(doc)
                logger.info("Document saved (%d users, attempt %d)", len(doc.users), attempt)
                return doc
        raise MergeConflict(
            f"Document kept changing; gave up after {self._max_attempts} attempts. Refresh and try again."
        )
