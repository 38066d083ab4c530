"""Unit tests for the tzdata download client.

WHY: The download is the only network step. It must hit the right URL,
return the body untouched, and turn every failure into DownloadError so
the CLI can report it as a transport fault.

HOW: httpx.MockTransport stands in for the network. Async methods are
driven with asyncio.run() inside ordinary synchronous tests.

RULES:
- No test performs real network I/O
"""

import asyncio

import httpx
import pytest

from tzlookup.config import (
    DEFAULT_DOWNLOAD_TIMEOUT_S,
    ConfigError,
    archive_filename,
    archive_url,
    load_download_timeout,
)
from tzlookup.download.client import DownloadError, TzdataClient


def _fetch(handler, **kwargs):
    async def _run():
        async with TzdataClient(transport=httpx.MockTransport(handler), **kwargs) as client:
            return await client.fetch_archive()

    return asyncio.run(_run())


class TestArchiveUrl:

    def test_archive_filename(self):
        assert archive_filename("2025c") == "tzdata2025c.tar.gz"

    @pytest.mark.parametrize("base", ["https://example.org/tz", "https://example.org/tz/"])
    def test_single_separator(self, base):
        assert archive_url(base, "2024a") == "https://example.org/tz/tzdata2024a.tar.gz"

    def test_client_url(self):
        client = TzdataClient(base_url="https://example.org/releases", release="2023d")
        assert client.url == "https://example.org/releases/tzdata2023d.tar.gz"


class TestFetchArchive:

    def test_returns_body(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b"\x1f\x8barchive")

        data = _fetch(handler, base_url="https://example.org/releases", release="2025c")
        assert data == b"\x1f\x8barchive"
        assert seen[0].method == "GET"
        assert str(seen[0].url) == "https://example.org/releases/tzdata2025c.tar.gz"

    def test_status_callback(self):
        messages = []

        async def _run():
            transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"abc"))
            async with TzdataClient(base_url="https://example.org", transport=transport) as client:
                await client.fetch_archive(on_status=messages.append)

        asyncio.run(_run())
        assert messages[0].startswith("Downloading https://example.org/")
        assert "3 bytes" in messages[1]

    def test_not_found_raises_download_error(self):
        with pytest.raises(DownloadError) as excinfo:
            _fetch(lambda request: httpx.Response(404), release="1999z")
        assert excinfo.value.status_code == 404
        assert "tzdata1999z.tar.gz" in str(excinfo.value)
        assert excinfo.value.stage == "download"

    def test_transport_error_raises_download_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DownloadError) as excinfo:
            _fetch(handler)
        assert excinfo.value.status_code is None
        assert "connection refused" in str(excinfo.value)

    def test_requires_context_manager(self):
        client = TzdataClient()
        with pytest.raises(RuntimeError):
            asyncio.run(client.fetch_archive())

    def test_cancellation_is_not_wrapped(self):
        async def handler(request):
            await asyncio.sleep(10)
            return httpx.Response(200)

        async def _run():
            async with TzdataClient(transport=httpx.MockTransport(handler)) as client:
                task = asyncio.ensure_future(client.fetch_archive())
                await asyncio.sleep(0.01)
                task.cancel()
                await task

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(_run())


class TestDownloadTimeout:
    """TZDATA_DOWNLOAD_TIMEOUT is validated when a client is created."""

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("TZDATA_DOWNLOAD_TIMEOUT", raising=False)
        assert load_download_timeout() == DEFAULT_DOWNLOAD_TIMEOUT_S

    def test_numeric_override(self, monkeypatch):
        monkeypatch.setenv("TZDATA_DOWNLOAD_TIMEOUT", "12.5")
        assert load_download_timeout() == 12.5

    @pytest.mark.parametrize("raw", ["soon", "0", "-3", "nan"])
    def test_bad_value_raises_config_error(self, monkeypatch, raw):
        monkeypatch.setenv("TZDATA_DOWNLOAD_TIMEOUT", raw)
        with pytest.raises(ConfigError) as excinfo:
            load_download_timeout()
        assert excinfo.value.stage == "config"
        assert raw in str(excinfo.value)

    def test_client_surfaces_config_error(self, monkeypatch):
        monkeypatch.setenv("TZDATA_DOWNLOAD_TIMEOUT", "soon")
        with pytest.raises(ConfigError):
            TzdataClient()

    def test_explicit_timeout_skips_env(self, monkeypatch):
        monkeypatch.setenv("TZDATA_DOWNLOAD_TIMEOUT", "soon")
        TzdataClient(timeout=5.0)
