"""Tests for the shared provider fetch and iframe extraction."""
import httpx

from vinlylog.core.oembed import extract_iframe, fetch_json


class TestExtractIframe:
    def test_double_quoted(self) -> None:
        html = '<iframe style="border-radius: 12px" width="100%" height="352" src="https://open.spotify.com/embed/album/x?utm_source=oembed"></iframe>'
        assert extract_iframe(html) == ("https://open.spotify.com/embed/album/x?utm_source=oembed", 352)

    def test_single_quoted_and_unquoted(self) -> None:
        assert extract_iframe("<IFRAME SRC='https://e.test/1' HEIGHT=150>") == ("https://e.test/1", 150)

    def test_ignores_data_src(self) -> None:
        html = '<iframe data-src="https://wrong.test" src="https://right.test"></iframe>'
        assert extract_iframe(html)[0] == "https://right.test"

    def test_height_with_unit(self) -> None:
        assert extract_iframe('<iframe src="https://e.test" height="450px"></iframe>') == ("https://e.test", 450)

    def test_attribute_text_inside_other_values(self) -> None:
        html = '<iframe title="height=1" src="https://x/embed" height="352">'
        assert extract_iframe(html) == ("https://x/embed", 352)

    def test_no_iframe(self) -> None:
        assert extract_iframe("<div>nothing</div>") == (None, None)
        assert extract_iframe(None) == (None, None)


class TestFetchJson:
    async def test_ok(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json={"title": " T "})))
        result = await fetch_json(client, "https://p.test/oembed", {"url": "u"}, source="p")
        assert result.ok
        assert result.text("title") == "T"

    async def test_bad_status(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404)))
        result = await fetch_json(client, "https://p.test/oembed", {}, source="p")
        assert not result.ok
        assert result.error.status == 404
        assert result.text("title") is None

    async def test_invalid_json(self) -> None:
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>")))
        result = await fetch_json(client, "https://p.test/oembed", {}, source="p")
        assert result.error.reason == "invalid JSON"

    async def test_network_error(self) -> None:
        def boom(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(boom))
        result = await fetch_json(client, "https://p.test/oembed", {}, source="p")
        assert not result.ok
        assert result.error.source == "p"

    async def test_timeout(self) -> None:
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(slow))
        result = await fetch_json(client, "https://p.test/oembed", {}, source="p")
        assert result.error.reason == "timeout"
