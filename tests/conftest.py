"""Shared fixtures: an in-memory JSONBin and fake provider endpoints behind httpx.MockTransport."""
import json
from typing import Callable, Optional

import httpx
import pytest

from vinlylog.core.document_client import DocumentClient
from vinlylog.core.link_resolver import LinkResolver

BIN_ID = "test-bin"
MASTER_KEY = "test-key"
API_BASE = "https://jsonbin.test/v3"


class FakeBin:
    """Stands in for one JSONBin bin: GET /b/<id>/latest and PUT /b/<id>."""

    def __init__(self, record: Optional[object] = None) -> None:
        self.record = record
        self.gets = 0
        self.puts: list[dict] = []
        self.get_status = 200
        self.put_status = 200
        self.get_error: Optional[Exception] = None
        # Called after each GET; lets a test simulate another writer
        self.after_get: Optional[Callable[["FakeBin"], None]] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        assert request.headers["X-Master-Key"] == MASTER_KEY
        if request.method == "GET":
            assert request.url.path == f"/v3/b/{BIN_ID}/latest"
            self.gets += 1
            if self.get_error is not None:
                raise self.get_error
            if self.get_status != 200:
                return httpx.Response(self.get_status, text="bin unavailable")
            response = httpx.Response(200, json={"record": self.record, "metadata": {"id": BIN_ID}})
            if self.after_get is not None:
                self.after_get(self)
            return response
        if request.method == "PUT":
            assert request.url.path == f"/v3/b/{BIN_ID}"
            if self.put_status != 200:
                return httpx.Response(self.put_status, text="write refused")
            body = json.loads(request.content)
            self.puts.append(body)
            self.record = body
            return httpx.Response(200, json={"record": body})
        return httpx.Response(405)


def make_document_client(fake: FakeBin) -> DocumentClient:
    return DocumentClient(
        BIN_ID,
        MASTER_KEY,
        api_base=API_BASE,
        client=httpx.AsyncClient(transport=httpx.MockTransport(fake.handler)),
    )


def josh_record(playlists: Optional[list] = None) -> dict:
    return {
        "users": [{"username": "josh", "pin": "1234", "playlists": playlists or []}],
        "updatedAt": "2024-01-01T00:00:00.000Z",
    }


@pytest.fixture
def fake_bin() -> FakeBin:
    return FakeBin(josh_record())


@pytest.fixture
def document_client(fake_bin: FakeBin) -> DocumentClient:
    return make_document_client(fake_bin)


class FakeProviders:
    """Routes provider requests to canned responses keyed by host."""

    def __init__(self) -> None:
        self.responses: dict[str, object] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        canned = self.responses.get(request.url.host)
        if canned is None:
            return httpx.Response(404, text="not found")
        if isinstance(canned, Exception):
            raise canned
        if isinstance(canned, httpx.Response):
            return canned
        return httpx.Response(200, json=canned)


@pytest.fixture
def providers() -> FakeProviders:
    return FakeProviders()


@pytest.fixture
def provider_client(providers: FakeProviders) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(providers.handler))


@pytest.fixture
def link_resolver(provider_client: httpx.AsyncClient) -> LinkResolver:
    return LinkResolver(client=provider_client)


@pytest.fixture
def make_bin() -> Callable[..., FakeBin]:
    return FakeBin


@pytest.fixture
def client_for() -> Callable[[FakeBin], DocumentClient]:
    return make_document_client


@pytest.fixture
def josh() -> Callable[..., dict]:
    """Factory for a record holding user josh / 1234 with the given playlists."""
    return josh_record
