"""Configuration constants, region allow-list, and .env loading.

WHY: The remote location of the tzdata release, the release tag, and
the output filename change independently of the code. Keeping them as
plain module constants makes them easy to find and override.

HOW: python-dotenv loads the .env file on import. Each constant reads
an environment variable with a hard-coded default. The pipeline entry
point receives these values as explicit arguments; nothing in core/
imports this module.

RULES:
- REGIONS is the fixed closed set of seven region files in the archive
- All defaults can be overridden via environment variables
- Boolean variables accept "true"/"false" (case-insensitive)
- Numeric variables are parsed on first use by a load_*() function, so a
  bad value surfaces as ConfigError rather than failing the import
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

from tzlookup.errors import TzLookupError

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Region files read from the archive
# ---------------------------------------------------------------------------

REGIONS: frozenset[str] = frozenset({
    "africa",
    "antarctica",
    "asia",
    "australasia",
    "europe",
    "northamerica",
    "southamerica",
})
"""Top-level archive entries that hold zone definitions."""

# ---------------------------------------------------------------------------
# Download and output defaults
# ---------------------------------------------------------------------------

TZDATA_BASE_URL = os.getenv("TZDATA_BASE_URL", "https://data.iana.org/time-zones/releases")
TZDATA_RELEASE = os.getenv("TZDATA_RELEASE", "2025c")
OUTPUT_FILENAME = os.getenv("TZLOOKUP_OUTPUT", "tz")
LEGACY_ORDERING = os.getenv("TZLOOKUP_LEGACY_ORDERING", "false").lower() == "true"


DEFAULT_DOWNLOAD_TIMEOUT_S = 60.0


class ConfigError(TzLookupError, ValueError):
    """Raised when an environment override cannot be interpreted."""

    stage = "config"


def load_download_timeout() -> float:
    """Load the download timeout in seconds from TZDATA_DOWNLOAD_TIMEOUT.

    RULES:
    - Unset or blank means DEFAULT_DOWNLOAD_TIMEOUT_S
    - Anything that is not a positive number raises ConfigError
    """
    raw = os.getenv("TZDATA_DOWNLOAD_TIMEOUT", "").strip()
    if not raw:
        return DEFAULT_DOWNLOAD_TIMEOUT_S
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not value > 0:
        raise ConfigError(
            "TZDATA_DOWNLOAD_TIMEOUT must be a positive number of seconds, "
            "got {!r}".format(raw)
        )
    return value


def archive_filename(release: str) -> str:
    """Return the archive name for a tzdata release, e.g. ``tzdata2025c.tar.gz``."""
    return "tzdata{}.tar.gz".format(release)


def archive_url(base_url: str, release: str) -> str:
    """Join the release directory URL and the archive filename.

    RULES:
    - Exactly one "/" separates base URL and filename, whatever the
      base URL ends with
    """
    return "{}/{}".format(base_url.rstrip("/"), archive_filename(release))
