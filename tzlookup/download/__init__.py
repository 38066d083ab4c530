"""tzdata download package: async HTTP fetch of the release archive.

WHY: The table is normally rebuilt from the published IANA release. The
download is I/O glue around the core pipeline and lives apart from it.

HOW: TzdataClient wraps httpx.AsyncClient and returns the archive bytes.

RULES:
- All HTTP calls go through TzdataClient (no direct httpx usage elsewhere)
- Requests are unauthenticated GETs
"""

from tzlookup.download.client import DownloadError, TzdataClient

__all__ = ["DownloadError", "TzdataClient"]
