"""Async HTTP client for IANA tzdata release archives.

WHY: The generator needs the gzip-compressed tarball for one tzdata
release. Keeping the HTTP details here means the CLI and tests only
deal with "give me the archive bytes".

HOW: Uses httpx.AsyncClient. TzdataClient is an async context manager:
enter it to open the connection pool, exit to close it. fetch_archive()
issues one GET for ``<base_url>/tzdata<release>.tar.gz``.

RULES:
- Always use the async context manager (async with TzdataClient() as client:)
- Non-200 responses and transport errors become DownloadError
- The coroutine is cancellable; asyncio.CancelledError is never wrapped
- transport is injectable so tests can use httpx.MockTransport
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from tzlookup.config import TZDATA_BASE_URL, TZDATA_RELEASE, archive_url, load_download_timeout
from tzlookup.errors import TzLookupError

logger = logging.getLogger(__name__)


class DownloadError(TzLookupError):
    """Raised when the archive cannot be fetched.

    RULES:
    - status_code is None for transport-level failures
    """

    stage = "download"

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        self.message = message
        if status_code is None:
            super().__init__("{}: {}".format(url, message))
        else:
            super().__init__("{}: HTTP {}: {}".format(url, status_code, message))


class TzdataClient:
    """Async downloader for a single tzdata release archive.

    RULES:
    - base_url defaults to TZDATA_BASE_URL from config
    - release defaults to TZDATA_RELEASE from config
    - timeout (seconds) defaults to load_download_timeout() from config,
      which raises ConfigError for a bad TZDATA_DOWNLOAD_TIMEOUT
    """

    def __init__(
        self,
        base_url: str | None = None,
        release: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url or TZDATA_BASE_URL
        self._release = release or TZDATA_RELEASE
        self._timeout = timeout if timeout is not None else load_download_timeout()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def url(self) -> str:
        return archive_url(self._base_url, self._release)

    async def __aenter__(self) -> TzdataClient:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout, connect=min(self._timeout, 30.0)),
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "TzdataClient must be used as an async context manager: "
                "async with TzdataClient() as client: ..."
            )
        return self._client

    async def fetch_archive(
        self,
        on_status: Callable[[str], None] | None = None,
    ) -> bytes:
        """Download the release archive and return its raw bytes.

        WHY: The extractor reads from a byte stream; buffering the whole
        archive (a few hundred KiB) keeps the network out of the
        pipeline's worker threads.

        HOW: One GET against ``self.url``. The body is returned only for
        a 200 response.

        RULES:
        - Raises DownloadError on non-200 status or httpx.HTTPError
        - Calls on_status before the request and after the body arrives

        Args:
            on_status: Optional callback for status updates.

        Returns:
            The gzip-compressed tar archive bytes.
        """
        client = self._ensure_client()
        url = self.url
        if on_status:
            on_status("Downloading {}...".format(url))
        logger.info("GET %s", url)

        try:
            resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise DownloadError(url, str(exc) or type(exc).__name__) from exc

        if resp.status_code != 200:
            raise DownloadError(url, resp.reason_phrase or "unexpected status", resp.status_code)

        data = resp.content
        logger.info("Received %d bytes from %s", len(data), url)
        if on_status:
            on_status("  Downloaded {:,} bytes".format(len(data)))
        return data
