"""Read and write the single shared document held in a JSONBin bin."""
import logging
from typing import Optional

import httpx

from vinlylog.config import HTTP_TIMEOUT_SEC, JSONBIN_API_BASE, require_jsonbin_config
from vinlylog.core.errors import RemoteRejected, RemoteUnavailable
from vinlylog.models.document import Document

logger = logging.getLogger(__name__)


class DocumentClient:
    """Full-document GET/PUT against one bin. No business logic, no partial updates."""

    def __init__(
        self,
        bin_id: str | None = None,
        master_key: str | None = None,
        *,
        api_base: str = JSONBIN_API_BASE,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        # Fails fast with ConfigMissing before any request can be made
        self._bin_id, self._master_key = require_jsonbin_config(bin_id, master_key)
        self._api_base = api_base.rstrip("/")
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=HTTP_TIMEOUT_SEC)
        return self._client

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        headers = {"X-Master-Key": self._master_key, **kwargs.pop("headers", {})}
        try:
            res = await self._get_client().request(method, url, headers=headers, **kwargs)
        except httpx.TimeoutException as e:
            raise RemoteUnavailable(f"JSONBin {method} timed out") from e
        except httpx.HTTPError as e:
            raise RemoteUnavailable(f"JSONBin {method} failed: {e}") from e
        if not res.is_success:
            raise RemoteRejected(res.status_code, res.text, operation=method)
        return res

    async def fetch_snapshot(self) -> tuple[Document, Optional[str]]:
        """Return (document, version). version is the stored updatedAt, or None when the
        bin held something that is not a document (an empty Document is returned then)."""
        res = await self._send("GET", f"{self._api_base}/b/{self._bin_id}/latest")
        try:
            payload = res.json()
        except ValueError:
            payload = None
        record = payload.get("record") if isinstance(payload, dict) else None
        if not Document.is_document(record):
            logger.warning("JSONBin record is not a document; starting from an empty one")
            return Document(), None
        return Document.from_dict(record), record["updatedAt"]

    async def fetch(self) -> Document:
        doc, _ = await self.fetch_snapshot()
        return doc

    async def store(self, doc: Document) -> None:
        """Replace the whole bin with doc."""
        await self._send(
            "PUT",
            f"{self._api_base}/b/{self._bin_id}",
            json=doc.to_dict(),
            headers={"Content-Type": "application/json"},
        )
