"""Tests for provider classification and fallback labels."""
import pytest

from vinlylog.core.classifier import classify, link_label, parse_host
from vinlylog.models.link import ProviderKind


class TestClassify:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=abc123",
            "https://youtu.be/abc123",
            "https://m.youtube.com/watch?v=abc123",
            "https://music.youtube.com/playlist?list=PL1",
            "HTTPS://WWW.YOUTUBE.COM/shorts/xyz",
        ],
    )
    def test_youtube_hosts(self, url: str) -> None:
        assert classify(url).kind is ProviderKind.YOUTUBE

    def test_spotify_captures_resource_type(self) -> None:
        c = classify("https://open.spotify.com/Playlist/37i9dQZF1DXcBWIGoYBM5M?si=x")
        assert c.kind is ProviderKind.SPOTIFY
        assert c.spotify_resource_type == "playlist"

    def test_spotify_requires_exact_host(self) -> None:
        assert classify("https://spotify.com/track/123").kind is ProviderKind.LINK

    def test_apple_music(self) -> None:
        c = classify("https://music.apple.com/us/album/abbey-road/1441164426")
        assert c.kind is ProviderKind.APPLE
        assert classify("https://geo.music.apple.com/gb/album/x/1").kind is ProviderKind.APPLE

    def test_other_hosts_are_links(self) -> None:
        c = classify("https://bandcamp.com/album/foo")
        assert c.kind is ProviderKind.LINK
        assert c.host == "bandcamp.com"

    @pytest.mark.parametrize("url", ["not a url", "", "youtube.com/watch?v=1", "http://[broken"])
    def test_malformed_urls_never_raise(self, url: str) -> None:
        assert classify(url).kind is ProviderKind.LINK

    def test_idempotent(self) -> None:
        url = "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC"
        assert classify(url) == classify(url)


class TestLinkLabel:
    def test_youtu_be(self) -> None:
        assert link_label("https://youtu.be/abc123") == "YouTube: abc123"
        assert link_label("https://youtu.be//abc/x") == "YouTube: /abc/x"

    def test_youtube_mix_playlist_video(self) -> None:
        assert link_label("https://www.youtube.com/watch?v=v1&list=L1") == "YouTube mix: v1"
        assert link_label("https://www.youtube.com/playlist?list=L1") == "YouTube playlist: L1"
        assert link_label("https://www.youtube.com/watch?v=v1") == "YouTube video: v1"

    def test_host_fallback(self) -> None:
        assert link_label("https://www.discogs.com/release/1") == "discogs.com"

    def test_unparsable(self) -> None:
        assert link_label("not a url") == "Link"


def test_parse_host_strips_www_and_lowercases() -> None:
    assert parse_host("https://WWW.Example.COM/path") == "example.com"
