"""Tests for HttpxDownloader, using httpx.MockTransport in place of the network."""

from __future__ import annotations

from pathlib import Path

import httpx
import pytest

from quicktv_get.bridge.downloader import Downloader, HttpxDownloader
from quicktv_get.errors import TransportError


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)


class TestHttpxDownloader:
    def test_satisfies_protocol(self):
        assert isinstance(HttpxDownloader(_client(lambda request: httpx.Response(200))), Downloader)

    def test_writes_body(self, tmp_path: Path):
        downloader = HttpxDownloader(_client(lambda request: httpx.Response(200, content=b"zip bytes")))
        destination = tmp_path / "a.zip"

        downloader.download("https://releases.example/v1/a.zip", destination)

        assert destination.read_bytes() == b"zip bytes"
        assert not (tmp_path / "a.zip.partial").exists()

    def test_follows_redirects(self, tmp_path: Path):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "releases.example":
                return httpx.Response(302, headers={"Location": "https://cdn.example/a.zip"})
            return httpx.Response(200, content=b"from cdn")

        destination = tmp_path / "a.zip"
        HttpxDownloader(_client(handler)).download("https://releases.example/a.zip", destination)
        assert destination.read_bytes() == b"from cdn"

    def test_options_forwarded(self, tmp_path: Path):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b"ok")

        HttpxDownloader(_client(handler)).download(
            "https://releases.example/a.zip",
            tmp_path / "a.zip",
            {"headers": {"X-Trace": "abc"}, "params": {"token": "t"}},
        )

        assert seen[0].headers["X-Trace"] == "abc"
        assert seen[0].url.params["token"] == "t"

    def test_http_error_raises_transport_error(self, tmp_path: Path):
        downloader = HttpxDownloader(_client(lambda request: httpx.Response(404)))
        destination = tmp_path / "a.zip"
        url = "https://releases.example/missing.zip"

        with pytest.raises(TransportError, match="HTTP 404") as info:
            downloader.download(url, destination)

        assert info.value.url == url
        assert not destination.exists()
        assert not (tmp_path / "a.zip.partial").exists()

    def test_network_error_raises_transport_error(self, tmp_path: Path):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError, match="connection refused"):
            HttpxDownloader(_client(handler)).download("https://releases.example/a.zip", tmp_path / "a.zip")

    def test_context_manager_closes_client(self):
        client = _client(lambda request: httpx.Response(200))
        with HttpxDownloader(client):
            pass
        assert client.is_closed
