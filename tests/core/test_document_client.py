"""Tests for the JSONBin document client."""
import httpx
import pytest

from vinlylog.core.document_client import DocumentClient
from vinlylog.core.errors import ConfigMissing, RemoteRejected, RemoteUnavailable
from vinlylog.models.document import Document, User


class TestConfig:
    @pytest.mark.parametrize("bin_id,key", [("", "k"), ("b", ""), ("  ", "  ")])
    def test_missing_config_fails_fast(self, bin_id: str, key: str) -> None:
        with pytest.raises(ConfigMissing):
            DocumentClient(bin_id, key)


class TestFetch:
    async def test_fetch_parses_record(self, fake_bin, document_client) -> None:
        doc = await document_client.fetch()
        assert [u.username for u in doc.users] == ["josh"]
        assert doc.updated_at == "2024-01-01T00:00:00.000Z"
        assert fake_bin.gets == 1

    async def test_snapshot_version_is_stored_updated_at(self, document_client) -> None:
        _, version = await document_client.fetch_snapshot()
        assert version == "2024-01-01T00:00:00.000Z"

    @pytest.mark.parametrize("record", [None, {}, [], "garbage", {"users": {}, "updatedAt": "x"}, {"users": []}])
    async def test_malformed_record_gives_empty_document(self, make_bin, client_for, record) -> None:
        client = client_for(make_bin(record))
        doc, version = await client.fetch_snapshot()
        assert doc.users == []
        assert doc.updated_at
        assert version is None

    async def test_bad_status_raises_rejected(self, fake_bin, document_client) -> None:
        fake_bin.get_status = 401
        with pytest.raises(RemoteRejected) as exc:
            await document_client.fetch()
        assert exc.value.status == 401
        assert "bin unavailable" in exc.value.body
        assert "GET failed (401)" in str(exc.value)

    async def test_network_error_raises_unavailable(self, fake_bin, document_client) -> None:
        fake_bin.get_error = httpx.ConnectError("connection refused")
        with pytest.raises(RemoteUnavailable):
            await document_client.fetch()

    async def test_timeout_is_unavailable(self, fake_bin, document_client) -> None:
        fake_bin.get_error = httpx.ReadTimeout("slow")
        with pytest.raises(RemoteUnavailable, match="timed out"):
            await document_client.fetch()


class TestStore:
    async def test_store_puts_whole_document(self, fake_bin, document_client) -> None:
        doc = Document(users=[User(username="ann", pin="1111")], updated_at="2024-03-01T00:00:00.000Z")
        await document_client.store(doc)
        assert fake_bin.puts == [
            {
                "users": [{"username": "ann", "pin": "1111", "playlists": []}],
                "updatedAt": "2024-03-01T00:00:00.000Z",
            }
        ]

    async def test_store_rejected(self, fake_bin, document_client) -> None:
        fake_bin.put_status = 403
        with pytest.raises(RemoteRejected) as exc:
            await document_client.store(Document())
        assert exc.value.status == 403
        assert exc.value.operation == "PUT"
